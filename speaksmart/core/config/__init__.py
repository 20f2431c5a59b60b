# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for SpeakSmart.

Example:
    >>> from speaksmart.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.payment.currency
    'usd'
"""

from speaksmart.core.config.settings import (
    APISettings,
    CORSSettings,
    DatabaseSettings,
    JWTSettings,
    PaymentSettings,
    RateLimitSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "DatabaseSettings",
    "JWTSettings",
    "PaymentSettings",
    "RateLimitSettings",
    "CORSSettings",
    "APISettings",
]
