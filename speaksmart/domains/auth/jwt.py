# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT credential management utilities.

Credentials are signed with a shared secret and carry the identity
(email, role) fixed at issuance, plus an expiry.

Example:
    >>> from speaksmart.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> credential = jwt_manager.create_access_token(email="s@example.com", role="student")
    >>> claims = jwt_manager.decode_token(credential.token)
"""

import logging
import secrets
from datetime import timedelta
from typing import Literal

from jose import ExpiredSignatureError, jwt
from pydantic import BaseModel

from speaksmart.core.config.settings import JWTSettings
from speaksmart.utils.datetime import utc_now

logger = logging.getLogger(__name__)

Role = Literal["student", "instructor", "admin"]


class TokenPayload(BaseModel):
    """JWT credential payload structure.

    Attributes:
        sub: Subject (user email).
        role: Role at issuance.
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID for token tracking.
    """

    sub: str
    role: Role = "student"
    exp: int
    iat: int
    jti: str


class IssuedCredential(BaseModel):
    """A freshly issued credential.

    Attributes:
        token: Signed JWT string.
        token_type: Always "Bearer".
        expires_in: Lifetime in seconds.
    """

    token: str
    token_type: str = "Bearer"
    expires_in: int


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT credential creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        """Initialize the JWT manager.

        Args:
            settings: JWT configuration settings.
        """
        self._settings = settings

    def create_access_token(self, email: str, role: Role = "student") -> IssuedCredential:
        """Issue a credential for an identity.

        Args:
            email: User email (identity key).
            role: User role.

        Returns:
            IssuedCredential with the signed token.
        """
        now = utc_now()
        exp = now + timedelta(minutes=self._settings.access_token_expire_minutes)

        payload = {
            "sub": email,
            "role": role,
            "exp": int(exp.timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }

        token = jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

        return IssuedCredential(
            token=token,
            expires_in=self._settings.access_token_expire_minutes * 60,
        )

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate a JWT credential.

        Args:
            token: JWT token string.

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
            return TokenPayload(
                sub=payload["sub"],
                role=payload.get("role", "student"),
                exp=payload["exp"],
                iat=payload["iat"],
                jti=payload["jti"],
            )

        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except Exception as e:
            logger.warning("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}")
