# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment request/response schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import EmailStr, Field

from speaksmart.models.class_ import ClassResponse
from speaksmart.models.common import APIModel


class CompleteEnrollmentRequest(APIModel):
    """Client confirmation that the gateway payment succeeded.

    Attributes:
        student_email: Paying student.
        class_id: Class paid for.
        amount: Amount paid, in major units.
        transaction_id: Gateway transaction reference.
    """

    student_email: EmailStr
    class_id: int
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    transaction_id: str | None = Field(default=None, max_length=255)


class EnrollmentResponse(APIModel):
    """Stored enrollment, with the class when loaded."""

    id: int
    student_email: str
    class_id: int
    payment_id: int
    enrolled_at: datetime
    class_info: ClassResponse | None = None


class ReconcileResponse(APIModel):
    """Outcome of a reconciliation pass."""

    enrollments_created: int = 0
    counters_applied: int = 0
    selections_removed: int = 0
    failed: list[dict] = Field(default_factory=list)
