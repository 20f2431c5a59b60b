# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment gateway adapter.

Reserves a charge with the upstream gateway (Stripe PaymentIntents) and
returns the client secret the browser uses to finish the payment
out-of-band. Reservations are never retried automatically: gateway
rejections and timeouts surface as PaymentGatewayError.

Example:
    gateway = StripePaymentGateway(settings.payment)
    reservation = await gateway.reserve(Decimal("50"), "usd")
    reservation.client_secret
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import stripe

from speaksmart.core.config.settings import PaymentSettings
from speaksmart.core.exceptions import PaymentGatewayError, ValidationError

logger = logging.getLogger(__name__)

# Currencies the gateway charges in major units
ZERO_DECIMAL_CURRENCIES = frozenset({
    "bif", "clp", "djf", "gnf", "jpy", "kmf", "krw", "mga",
    "pyg", "rwf", "ugx", "vnd", "vuv", "xaf", "xof", "xpf",
})


@dataclass(frozen=True)
class Reservation:
    """A gateway pre-authorization of a charge.

    Attributes:
        client_secret: Opaque secret surfaced to the client.
        reservation_id: Gateway identifier of the reservation.
        amount_minor: Reserved amount in minor units.
        currency: Lower-case ISO currency code.
    """

    client_secret: str
    reservation_id: str
    amount_minor: int
    currency: str


def to_minor_units(amount: Decimal, currency: str) -> int:
    """Convert a major-unit amount to the gateway's minor units.

    Args:
        amount: Amount in major units (e.g. dollars).
        currency: ISO currency code.

    Returns:
        Integer amount in minor units (e.g. cents).

    Raises:
        ValidationError: If the amount is not positive.
    """
    amount = Decimal(amount)
    if amount <= 0:
        raise ValidationError("Amount must be positive", {"amount": str(amount)})

    factor = 1 if currency.lower() in ZERO_DECIMAL_CURRENCIES else 100
    return int((amount * factor).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentGateway(ABC):
    """Reserve-charge capability."""

    @abstractmethod
    async def reserve(self, amount: Decimal, currency: str) -> Reservation:
        """Reserve a charge.

        Args:
            amount: Amount in major units.
            currency: ISO currency code.

        Returns:
            The created reservation.

        Raises:
            ValidationError: If the amount is not positive.
            PaymentGatewayError: If the gateway rejects or times out.
        """


class StripePaymentGateway(PaymentGateway):
    """PaymentIntent-backed gateway.

    The Stripe client is synchronous; calls run in a worker thread and
    are bounded by the configured timeout.

    Attributes:
        _settings: Payment settings.
        _client: Lazily created Stripe client.
    """

    def __init__(
        self,
        settings: PaymentSettings,
        client: stripe.StripeClient | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            settings: Payment settings (key, timeout, method types).
            client: Preconfigured Stripe client, mainly for tests.
        """
        self._settings = settings
        self._client = client

    def _get_client(self) -> stripe.StripeClient:
        if self._client is None:
            self._client = stripe.StripeClient(
                self._settings.api_key.get_secret_value(),
                max_network_retries=0,
            )
        return self._client

    async def reserve(self, amount: Decimal, currency: str) -> Reservation:
        """Create a PaymentIntent for the amount.

        Args:
            amount: Amount in major units.
            currency: ISO currency code.

        Returns:
            Reservation with the intent's client secret.

        Raises:
            ValidationError: If the amount is not positive.
            PaymentGatewayError: If Stripe rejects the intent or times out.
        """
        currency = currency.lower()
        amount_minor = to_minor_units(amount, currency)
        client = self._get_client()

        try:
            intent = await asyncio.wait_for(
                asyncio.to_thread(
                    client.payment_intents.create,
                    params={
                        "amount": amount_minor,
                        "currency": currency,
                        "payment_method_types": list(self._settings.payment_method_types),
                    },
                ),
                timeout=self._settings.timeout,
            )
        except TimeoutError as e:
            logger.warning(
                "Payment reservation timed out: amount=%s %s", amount_minor, currency
            )
            raise PaymentGatewayError(
                "Payment gateway did not respond in time",
                timed_out=True,
            ) from e
        except stripe.StripeError as e:
            logger.warning(
                "Payment reservation rejected: amount=%s %s code=%s",
                amount_minor,
                currency,
                e.code,
            )
            raise PaymentGatewayError(
                e.user_message or "Payment gateway rejected the reservation",
                code=e.code,
            ) from e

        logger.info(
            "Payment reserved: intent=%s amount=%s %s", intent.id, amount_minor, currency
        )
        return Reservation(
            client_secret=intent.client_secret,
            reservation_id=intent.id,
            amount_minor=amount_minor,
            currency=currency,
        )
