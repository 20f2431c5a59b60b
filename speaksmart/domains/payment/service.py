# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment reservation service.

Reservations are priced from the catalogue, never from the client. The
client's displayed price is only compared against it.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from speaksmart.core.config.settings import PaymentSettings
from speaksmart.core.exceptions import ValidationError
from speaksmart.domains.class_.service import ClassNotApprovedError, ClassService
from speaksmart.infrastructure.database.models import Class
from speaksmart.infrastructure.payments import PaymentGateway
from speaksmart.models.payment import ReservationRequest, ReservationResponse

logger = logging.getLogger(__name__)


class PriceMismatchError(ValidationError):
    """Raised when a supplied price differs from the catalogue price."""

    pass


def check_price(supplied: Decimal, catalogue: Decimal, tolerance: Decimal) -> None:
    """Compare a client-supplied price with the catalogue price.

    Args:
        supplied: Price the client sent, in major units.
        catalogue: Price stored on the class.
        tolerance: Largest accepted absolute difference.

    Raises:
        PriceMismatchError: If the difference exceeds the tolerance.
    """
    if abs(Decimal(supplied) - Decimal(catalogue)) > tolerance:
        raise PriceMismatchError(
            "Price does not match the class price",
            {"supplied": str(supplied), "expected": str(catalogue)},
        )


def require_approved(class_: Class) -> None:
    """Raise ClassNotApprovedError unless the class is approved."""
    if class_.status != "approved":
        raise ClassNotApprovedError(f"Class is not open for enrollment: {class_.id}")


class PaymentService:
    """Service that prices and reserves class payments.

    Attributes:
        db: Async database session.
        gateway: Payment gateway adapter.
        settings: Payment settings (currency, tolerance).
    """

    def __init__(
        self,
        db: AsyncSession,
        gateway: PaymentGateway,
        settings: PaymentSettings,
    ) -> None:
        self.db = db
        self.gateway = gateway
        self.settings = settings

    async def reserve_for_class(self, request: ReservationRequest) -> ReservationResponse:
        """Reserve a charge for an approved class at its catalogue price.

        Args:
            request: Class and the price the client displayed.

        Returns:
            The reservation secret and the charged amount.

        Raises:
            ClassNotFoundError: If class not found.
            ClassNotApprovedError: If the class is still pending.
            PriceMismatchError: If the displayed price is stale.
            PaymentGatewayError: If the gateway fails or times out.
        """
        class_ = await ClassService(self.db).get_class_model(request.class_id)
        require_approved(class_)

        if request.price is not None:
            check_price(request.price, class_.price, self.settings.price_tolerance)

        reservation = await self.gateway.reserve(class_.price, self.settings.currency)

        logger.info(
            "Reserved payment: class=%s, amount=%s %s, reservation=%s",
            class_.id,
            class_.price,
            reservation.currency,
            reservation.reservation_id,
        )

        return ReservationResponse(
            reservation_secret=reservation.client_secret,
            amount=class_.price,
            currency=reservation.currency,
        )
