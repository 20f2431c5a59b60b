# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment reservation and payment record schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from speaksmart.models.common import APIModel, Money


class ReservationRequest(APIModel):
    """Request to reserve a charge for a class.

    price is the amount the client displayed; it is checked against the
    catalogue price before anything is reserved.
    """

    class_id: int
    price: Decimal | None = Field(default=None, gt=0)


class ReservationResponse(APIModel):
    """Secret the client uses to confirm the payment with the gateway."""

    reservation_secret: str
    amount: Money
    currency: str


class PaymentResponse(APIModel):
    """Stored payment record."""

    id: int
    student_email: str
    class_id: int
    amount: Money
    currency: str
    transaction_id: str | None = None
    paid_at: datetime
