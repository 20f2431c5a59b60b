# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Credential issuance schemas."""

from pydantic import EmailStr

from speaksmart.models.common import APIModel


class CredentialRequest(APIModel):
    """Identity to issue a credential for."""

    email: EmailStr


class CredentialResponse(APIModel):
    """Issued bearer credential."""

    token: str
    token_type: str = "Bearer"
    expires_in: int
