# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment registry service.

Read side of enrollments and payments. Records are written only by the
EnrollmentPipeline.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from speaksmart.domains.class_.service import ClassService
from speaksmart.infrastructure.database.models import Enrollment, Payment
from speaksmart.models.enrollment import EnrollmentResponse
from speaksmart.models.payment import PaymentResponse
from speaksmart.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Service for reading enrollments and payment history.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_for_student(self, student_email: str) -> list[EnrollmentResponse]:
        """List a student's enrollments with their classes, newest first.

        An empty email yields an empty list without querying.
        """
        if not student_email:
            return []

        result = await self.db.execute(
            select(Enrollment)
            .where(Enrollment.student_email == student_email)
            .order_by(Enrollment.enrolled_at.desc(), Enrollment.id.desc())
            .execution_options(populate_existing=True)
        )
        return [to_enrollment_response(e) for e in result.scalars().all()]

    async def list_payments_for_student(self, student_email: str) -> list[PaymentResponse]:
        """List a student's payments, newest first.

        An empty email yields an empty list without querying.
        """
        if not student_email:
            return []

        result = await self.db.execute(
            select(Payment)
            .where(Payment.student_email == student_email)
            .order_by(Payment.paid_at.desc(), Payment.id.desc())
        )
        return [to_payment_response(p) for p in result.scalars().all()]


def to_enrollment_response(enrollment: Enrollment) -> EnrollmentResponse:
    """Convert enrollment model to response."""
    return EnrollmentResponse(
        id=enrollment.id,
        student_email=enrollment.student_email,
        class_id=enrollment.class_id,
        payment_id=enrollment.payment_id,
        enrolled_at=ensure_utc(enrollment.enrolled_at),
        class_info=(
            ClassService._to_response(enrollment.class_)
            if enrollment.class_ is not None
            else None
        ),
    )


def to_payment_response(payment: Payment) -> PaymentResponse:
    """Convert payment model to response."""
    return PaymentResponse(
        id=payment.id,
        student_email=payment.student_email,
        class_id=payment.class_id,
        amount=payment.amount,
        currency=payment.currency,
        transaction_id=payment.transaction_id,
        paid_at=ensure_utc(payment.paid_at),
    )
