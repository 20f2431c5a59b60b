# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain package.

This package provides:
- JWT credential issuance and verification
- The credential gate for protected operations
- Ownership and role checks composed after the gate
"""

from speaksmart.domains.auth.gate import (
    CredentialGate,
    Identity,
    authorize_owner,
    authorize_role,
    parse_bearer,
)
from speaksmart.domains.auth.jwt import (
    InvalidTokenError,
    IssuedCredential,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)
from speaksmart.domains.auth.service import AuthService

__all__ = [
    "AuthService",
    "CredentialGate",
    "Identity",
    "authorize_owner",
    "authorize_role",
    "parse_bearer",
    "JWTManager",
    "TokenPayload",
    "IssuedCredential",
    "TokenExpiredError",
    "InvalidTokenError",
]
