# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment gateway adapters."""

from speaksmart.infrastructure.payments.gateway import (
    PaymentGateway,
    Reservation,
    StripePaymentGateway,
    to_minor_units,
)

__all__ = [
    "PaymentGateway",
    "Reservation",
    "StripePaymentGateway",
    "to_minor_units",
]
