# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Rate limiting using slowapi.

Applied to credential issuance and payment reservations, the two
operations that are cheap to call and expensive to serve.

Example:
    @router.post("/payment-reservations")
    @limiter.limit(default_limit)
    async def reserve_payment(request: Request, ...):
        ...
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from speaksmart.core.config import get_settings

logger = logging.getLogger(__name__)


def get_client_identifier(request: Request) -> str:
    """Identify the client by authenticated email, falling back to IP.

    Args:
        request: HTTP request.

    Returns:
        Client identifier string.
    """
    user = getattr(request.state, "user", None)
    if user:
        return f"user:{user.email}"
    return f"ip:{get_remote_address(request)}"


def default_limit() -> str:
    """Per-client limit string from settings."""
    return f"{get_settings().rate_limit.requests_per_minute}/minute"


settings = get_settings()
limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri=settings.rate_limit.storage_uri,
    enabled=settings.rate_limit.enabled,
)
