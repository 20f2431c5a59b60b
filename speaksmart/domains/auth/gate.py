# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Credential gate and ownership check.

The gate turns a raw Authorization header into an Identity or fails
with UnauthorizedError. A missing or malformed header is rejected
before any signature verification is attempted.

Ownership is a second, separate check: authorize_owner() compares the
authenticated identity with the resource owner.

Example:
    gate = CredentialGate(JWTManager(settings.jwt))
    identity = gate.authenticate(request.headers.get("Authorization"))
    authorize_owner(identity, student_email)
"""

import logging

from pydantic import BaseModel

from speaksmart.core.exceptions import ForbiddenError, UnauthorizedError
from speaksmart.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    Role,
    TokenExpiredError,
)

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized access!"


class Identity(BaseModel):
    """Authenticated identity embedded in a credential."""

    email: str
    role: Role = "student"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def parse_bearer(raw_header: str | None) -> str:
    """Extract the token from a `Bearer <token>` header.

    Args:
        raw_header: Authorization header value.

    Returns:
        The token string.

    Raises:
        UnauthorizedError: If the header is absent or malformed.
    """
    if not raw_header:
        raise UnauthorizedError(UNAUTHORIZED_MESSAGE)

    parts = raw_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedError(UNAUTHORIZED_MESSAGE)

    return parts[1]


class CredentialGate:
    """Validates bearer credentials on protected operations.

    Attributes:
        _jwt_manager: Verifier for signed credentials.
    """

    def __init__(self, jwt_manager: JWTManager) -> None:
        self._jwt_manager = jwt_manager

    def authenticate(self, raw_header: str | None) -> Identity:
        """Authenticate a raw Authorization header.

        Args:
            raw_header: Header value, expected as `Bearer <token>`.

        Returns:
            Identity embedded at issuance.

        Raises:
            UnauthorizedError: If the header is missing, malformed, or the
                token fails verification.
        """
        token = parse_bearer(raw_header)

        try:
            payload = self._jwt_manager.decode_token(token)
        except TokenExpiredError:
            logger.debug("Credential expired")
            raise UnauthorizedError(UNAUTHORIZED_MESSAGE)
        except InvalidTokenError as e:
            logger.debug("Credential rejected: %s", str(e))
            raise UnauthorizedError(UNAUTHORIZED_MESSAGE)

        return Identity(email=payload.sub, role=payload.role)


def authorize_owner(identity: Identity, owner_email: str) -> None:
    """Require the identity to own the resource, or be an administrator.

    Args:
        identity: Authenticated identity.
        owner_email: Email of the resource owner.

    Raises:
        ForbiddenError: If the identity neither owns the resource nor is admin.
    """
    if identity.is_admin:
        return
    if identity.email.lower() != (owner_email or "").lower():
        logger.info(
            "Ownership check failed: identity=%s owner=%s", identity.email, owner_email
        )
        raise ForbiddenError("Forbidden access!")


def authorize_role(identity: Identity, *roles: Role) -> None:
    """Require one of the given roles (administrators always pass).

    Args:
        identity: Authenticated identity.
        roles: Accepted roles.

    Raises:
        ForbiddenError: If the identity has none of the roles.
    """
    if identity.is_admin or identity.role in roles:
        return
    raise ForbiddenError(f"Requires role: {', '.join(roles)}")
