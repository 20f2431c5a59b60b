# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment endpoints.

- POST /payment-reservations - Reserve a charge for a class
- GET /payments/{student_email} - A student's payment history
"""

import logging

from fastapi import APIRouter, Request, status

from speaksmart.api.dependencies import DB, AppSettings, AuthUser, Gateway
from speaksmart.api.middleware.rate_limit import default_limit, limiter
from speaksmart.domains.auth import authorize_owner
from speaksmart.domains.enrollment import EnrollmentService
from speaksmart.domains.payment import PaymentService
from speaksmart.models.payment import PaymentResponse, ReservationRequest, ReservationResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/payment-reservations",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Reserve payment",
    description=(
        "Reserve a charge for an approved class at its catalogue price and "
        "return the secret the client confirms the payment with."
    ),
)
@limiter.limit(default_limit)
async def reserve_payment(
    request: Request,
    data: ReservationRequest,
    db: DB,
    gateway: Gateway,
    settings: AppSettings,
    current_user: AuthUser,
) -> ReservationResponse:
    """Reserve a payment.

    Args:
        request: HTTP request (used by the rate limiter).
        data: Class and displayed price.
        db: Database session.
        gateway: Payment gateway.
        settings: Application settings.
        current_user: Authenticated caller.

    Returns:
        Reservation secret and charged amount.
    """
    logger.info("Reserving payment for class %s by %s", data.class_id, current_user.email)

    service = PaymentService(db=db, gateway=gateway, settings=settings.payment)
    return await service.reserve_for_class(data)


@router.get(
    "/payments/{student_email}",
    response_model=list[PaymentResponse],
    summary="Payment history",
    description="A student's payments, newest first.",
)
async def list_payments(
    student_email: str,
    db: DB,
    current_user: AuthUser,
) -> list[PaymentResponse]:
    """List a student's payments."""
    authorize_owner(current_user, student_email)
    return await EnrollmentService(db=db).list_payments_for_student(student_email)
