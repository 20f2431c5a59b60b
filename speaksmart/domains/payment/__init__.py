# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payment reservation domain."""

from speaksmart.domains.payment.service import (
    PaymentService,
    PriceMismatchError,
    check_price,
    require_approved,
)

__all__ = ["PaymentService", "PriceMismatchError", "check_price", "require_approved"]
