# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Credential issuance service.

Anyone may ask for a credential, but only trusted requests get the
stored role: those from an authenticated administrator, or those that
present the issuer secret shared with the sign-in frontend. Every other
credential is a student credential, so knowing an instructor's or an
administrator's email is not enough to act as them.
"""

import logging
import secrets

from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession

from speaksmart.core.exceptions import ValidationError
from speaksmart.domains.auth.jwt import IssuedCredential, JWTManager
from speaksmart.domains.user.service import DEFAULT_ROLE, UserService

logger = logging.getLogger(__name__)

ISSUER_SECRET_HEADER = "X-Issuer-Secret"


def verify_issuer_secret(supplied: str | None, expected: SecretStr) -> bool:
    """Check a presented issuer secret in constant time.

    An empty configured secret never matches.
    """
    expected_value = expected.get_secret_value()
    if not expected_value or not supplied:
        return False
    return secrets.compare_digest(supplied.encode(), expected_value.encode())


class AuthService:
    """Issues signed credentials for an email identity.

    Attributes:
        db: Async database session.
        jwt_manager: Credential signer.
    """

    def __init__(self, db: AsyncSession, jwt_manager: JWTManager) -> None:
        self.db = db
        self.jwt_manager = jwt_manager

    async def issue_credential(self, email: str, trusted: bool = False) -> IssuedCredential:
        """Issue a credential for an email.

        Args:
            email: Identity to embed.
            trusted: Whether the request may carry the stored role.
                Untrusted requests always get a student credential.

        Returns:
            The signed credential and its lifetime.

        Raises:
            ValidationError: If the email is blank.
        """
        email = email.strip()
        if not email:
            raise ValidationError("Email is required")

        role = await UserService(self.db).get_role(email) if trusted else DEFAULT_ROLE
        credential = self.jwt_manager.create_access_token(email, role=role)

        logger.info("Issued credential: %s (%s, trusted=%s)", email, role, trusted)
        return credential
