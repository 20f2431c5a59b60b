# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the enrollment registry reads."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from speaksmart.domains.enrollment import EnrollmentService
from speaksmart.infrastructure.database.models import Enrollment, Payment

STUDENT = "student@speaksmart.io"


@pytest.fixture
def enrollment_service(db_session) -> EnrollmentService:
    return EnrollmentService(db=db_session)


class TestEnrollmentService:
    """Tests for EnrollmentService."""

    @pytest.mark.asyncio
    async def test_empty_email_returns_empty(self, enrollment_service: EnrollmentService) -> None:
        assert await enrollment_service.list_for_student("") == []
        assert await enrollment_service.list_payments_for_student("") == []

    @pytest.mark.asyncio
    async def test_payments_newest_first(
        self,
        enrollment_service: EnrollmentService,
        db_session,
        make_class,
    ) -> None:
        """Test that payment history is ordered newest first."""
        older_class = await make_class(name="Older")
        newer_class = await make_class(name="Newer")
        now = datetime.now(timezone.utc)
        db_session.add_all([
            Payment(
                student_email=STUDENT,
                class_id=older_class.id,
                amount=Decimal("10.00"),
                currency="usd",
                paid_at=now - timedelta(days=1),
            ),
            Payment(
                student_email=STUDENT,
                class_id=newer_class.id,
                amount=Decimal("20.00"),
                currency="usd",
                paid_at=now,
            ),
            Payment(
                student_email="other@speaksmart.io",
                class_id=newer_class.id,
                amount=Decimal("20.00"),
                currency="usd",
            ),
        ])
        await db_session.commit()

        result = await enrollment_service.list_payments_for_student(STUDENT)

        assert [p.class_id for p in result] == [newer_class.id, older_class.id]
        assert result[0].paid_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_enrollments_include_class(
        self,
        enrollment_service: EnrollmentService,
        db_session,
        make_class,
    ) -> None:
        class_ = await make_class(name="Idioms")
        payment = Payment(student_email=STUDENT, class_id=class_.id, amount=Decimal("50.00"), currency="usd")
        db_session.add(payment)
        await db_session.commit()
        db_session.add(
            Enrollment(student_email=STUDENT, class_id=class_.id, payment_id=payment.id, counter_applied=True)
        )
        await db_session.commit()

        result = await enrollment_service.list_for_student(STUDENT)

        assert len(result) == 1
        assert result[0].class_info.name == "Idioms"
        assert result[0].payment_id == payment.id
