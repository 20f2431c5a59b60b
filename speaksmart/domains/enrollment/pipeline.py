# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment pipeline.

Turns a confirmed payment into an enrollment in four staged commits:

1. record the payment
2. record the enrollment
3. advance the class enrollment counter
4. clear the student's selections for the class

Each step is idempotent. The store's unique (student, class) keys on
payments and enrollments make a retry reuse the existing rows, and the
enrollment's counter_applied flag is flipped in the same transaction as
the counter increment so the counter moves exactly once. A failure
after step 1 raises EnrollmentIncompleteError; calling
complete_enrollment() again, or reconcile(), finishes the job.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import and_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from speaksmart.core.config.settings import PaymentSettings
from speaksmart.core.exceptions import EnrollmentIncompleteError
from speaksmart.domains.class_.service import ClassService
from speaksmart.domains.enrollment.service import to_enrollment_response
from speaksmart.domains.payment.service import check_price, require_approved
from speaksmart.domains.selection.service import SelectionService
from speaksmart.infrastructure.database.models import Enrollment, Payment, Selection
from speaksmart.models.enrollment import (
    CompleteEnrollmentRequest,
    EnrollmentResponse,
    ReconcileResponse,
)

logger = logging.getLogger(__name__)

STEP_PAYMENT = "payment"
STEP_ENROLLMENT = "enrollment"
STEP_COUNTER = "counter"
STEP_SELECTIONS = "selections"


class EnrollmentPipeline:
    """Completes enrollments after successful payment.

    Attributes:
        db: Async database session.
        settings: Payment settings (currency, price tolerance).
    """

    def __init__(self, db: AsyncSession, settings: PaymentSettings) -> None:
        """Initialize the pipeline.

        Args:
            db: Async database session.
            settings: Payment settings.
        """
        self.db = db
        self.settings = settings

    async def complete_enrollment(
        self,
        request: CompleteEnrollmentRequest,
    ) -> EnrollmentResponse:
        """Record a payment and enroll the student.

        Safe to call again with the same request: the result is the same
        single payment, enrollment and counter increment.

        Args:
            request: Payment confirmation from the client.

        Returns:
            The enrollment, with its class.

        Raises:
            ClassNotFoundError: If class not found.
            ClassNotApprovedError: If the class is still pending.
            PriceMismatchError: If the paid amount differs from the price.
            EnrollmentIncompleteError: If a step after the payment failed.
        """
        class_ = await ClassService(self.db).get_class_model(request.class_id)
        require_approved(class_)
        check_price(request.amount, class_.price, self.settings.price_tolerance)

        payment_id = await self._record_payment(request, class_.price)
        completed = [STEP_PAYMENT]

        try:
            enrollment_id, _ = await self._record_enrollment(
                request.student_email, request.class_id, payment_id
            )
            completed.append(STEP_ENROLLMENT)

            await self._apply_counter(enrollment_id, request.class_id)
            completed.append(STEP_COUNTER)

            await SelectionService(self.db).remove_for_pair(
                request.student_email, request.class_id
            )
            completed.append(STEP_SELECTIONS)
        except Exception as e:
            await self.db.rollback()
            logger.error(
                "Enrollment incomplete: student=%s, class=%s, completed=%s, error=%s",
                request.student_email,
                request.class_id,
                completed,
                str(e),
            )
            raise EnrollmentIncompleteError(
                "Enrollment could not be completed; retry to finish it",
                completed_steps=completed,
                payment_id=payment_id,
            ) from e

        logger.info(
            "Enrollment completed: student=%s, class=%s, payment=%s",
            request.student_email,
            request.class_id,
            payment_id,
        )
        return await self._load_enrollment(enrollment_id)

    async def reconcile(self) -> ReconcileResponse:
        """Finish every enrollment left incomplete by an earlier failure.

        Picks up payments without an enrollment, enrollments whose counter
        was never applied and selections left behind for pairs that are
        already enrolled. A record that fails again is reported
        and left for the next pass.

        Returns:
            Counts of the repaired steps and the failures.
        """
        report = ReconcileResponse()
        selections = SelectionService(self.db)

        orphan_payments = await self.db.execute(
            select(Payment.id, Payment.student_email, Payment.class_id)
            .outerjoin(
                Enrollment,
                and_(
                    Enrollment.student_email == Payment.student_email,
                    Enrollment.class_id == Payment.class_id,
                ),
            )
            .where(Enrollment.id.is_(None))
            .order_by(Payment.id.asc())
        )
        for payment_id, student_email, class_id in orphan_payments.all():
            try:
                _, created = await self._record_enrollment(student_email, class_id, payment_id)
                if created:
                    report.enrollments_created += 1
            except Exception as e:
                await self.db.rollback()
                logger.exception("Reconcile failed for payment %s", payment_id)
                report.failed.append({"payment_id": payment_id, "reason": str(e)})

        pending_counters = await self.db.execute(
            select(Enrollment.id, Enrollment.class_id)
            .where(Enrollment.counter_applied.is_(False))
            .order_by(Enrollment.id.asc())
        )
        for enrollment_id, class_id in pending_counters.all():
            try:
                if await self._apply_counter(enrollment_id, class_id):
                    report.counters_applied += 1
            except Exception as e:
                await self.db.rollback()
                logger.exception("Reconcile failed for enrollment %s", enrollment_id)
                report.failed.append({"enrollment_id": enrollment_id, "reason": str(e)})

        leftover_selections = await self.db.execute(
            select(Selection.student_email, Selection.class_id)
            .join(
                Enrollment,
                and_(
                    Enrollment.student_email == Selection.student_email,
                    Enrollment.class_id == Selection.class_id,
                ),
            )
            .distinct()
            .order_by(Selection.class_id.asc(), Selection.student_email.asc())
        )
        for student_email, class_id in leftover_selections.all():
            try:
                report.selections_removed += await selections.remove_for_pair(
                    student_email, class_id
                )
            except Exception as e:
                await self.db.rollback()
                logger.exception(
                    "Reconcile failed for selections of %s in class %s", student_email, class_id
                )
                report.failed.append(
                    {"student_email": student_email, "class_id": class_id, "reason": str(e)}
                )

        logger.info(
            "Reconcile finished: created=%d, counters=%d, selections=%d, failed=%d",
            report.enrollments_created,
            report.counters_applied,
            report.selections_removed,
            len(report.failed),
        )
        return report

    async def _record_payment(self, request: CompleteEnrollmentRequest, price: Decimal) -> int:
        """Insert the payment, or reuse the one already stored for the pair.

        The stored amount is the catalogue price, not the amount reported by
        the client, which may differ from it within the tolerance.

        Returns:
            The payment id.
        """
        payment = Payment(
            student_email=request.student_email,
            class_id=request.class_id,
            amount=price,
            currency=self.settings.currency,
            transaction_id=request.transaction_id,
        )
        self.db.add(payment)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            existing_id = await self._find_id(
                Payment.id, Payment, request.student_email, request.class_id
            )
            if existing_id is None:
                raise
            logger.info(
                "Payment already recorded: student=%s, class=%s, payment=%s",
                request.student_email,
                request.class_id,
                existing_id,
            )
            return existing_id

        logger.info(
            "Payment recorded: student=%s, class=%s, amount=%s",
            request.student_email,
            request.class_id,
            price,
        )
        return payment.id

    async def _record_enrollment(
        self,
        student_email: str,
        class_id: int,
        payment_id: int,
    ) -> tuple[int, bool]:
        """Insert the enrollment for a payment, or reuse the stored one.

        Returns:
            The enrollment id and whether it was created now.
        """
        enrollment = Enrollment(
            student_email=student_email,
            class_id=class_id,
            payment_id=payment_id,
            counter_applied=False,
        )
        self.db.add(enrollment)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            existing_id = await self._find_id(
                Enrollment.id, Enrollment, student_email, class_id
            )
            if existing_id is None:
                raise
            return existing_id, False
        return enrollment.id, True

    async def _apply_counter(self, enrollment_id: int, class_id: int) -> bool:
        """Increment the class counter once per enrollment.

        The counter_applied flag is claimed and the counter advanced in
        one transaction.

        Returns:
            True if the counter was advanced by this call.
        """
        result = await self.db.execute(
            update(Enrollment)
            .where(
                Enrollment.id == enrollment_id,
                Enrollment.counter_applied.is_(False),
            )
            .values(counter_applied=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.commit()
            return False

        await ClassService(self.db).increment_enrollment(class_id, commit=False)
        await self.db.commit()
        return True

    async def _find_id(self, id_column, model, student_email: str, class_id: int) -> int | None:
        result = await self.db.execute(
            select(id_column).where(
                model.student_email == student_email,
                model.class_id == class_id,
            )
        )
        return result.scalar_one_or_none()

    async def _load_enrollment(self, enrollment_id: int) -> EnrollmentResponse:
        result = await self.db.execute(
            select(Enrollment)
            .where(Enrollment.id == enrollment_id)
            .execution_options(populate_existing=True)
        )
        return to_enrollment_response(result.scalar_one())
