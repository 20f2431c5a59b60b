# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Credential issuance endpoint.

- POST /credentials - Issue a bearer credential for an email

The stored role is embedded only when the request is trusted: it comes
from an authenticated administrator or carries the X-Issuer-Secret
header. Otherwise the credential is a student credential.
"""

import logging

from fastapi import APIRouter, Request, status

from speaksmart.api.dependencies import DB, AppSettings, Credentials, OptionalUser
from speaksmart.api.middleware.rate_limit import default_limit, limiter
from speaksmart.domains.auth import AuthService
from speaksmart.domains.auth.service import ISSUER_SECRET_HEADER, verify_issuer_secret
from speaksmart.models.auth import CredentialRequest, CredentialResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/credentials",
    response_model=CredentialResponse,
    status_code=status.HTTP_200_OK,
    summary="Issue credential",
    description=(
        "Issue a signed bearer credential for an email. The stored role is "
        "embedded for administrators and for requests carrying the issuer "
        "secret; every other credential is a student credential."
    ),
)
@limiter.limit(default_limit)
async def issue_credential(
    request: Request,
    data: CredentialRequest,
    db: DB,
    jwt_manager: Credentials,
    settings: AppSettings,
    caller: OptionalUser,
) -> CredentialResponse:
    """Issue a credential.

    Args:
        request: HTTP request (rate limiter, issuer secret header).
        data: Email to embed.
        db: Database session.
        jwt_manager: Credential signer.
        settings: Application settings.
        caller: Identity of an already authenticated caller, if any.

    Returns:
        The signed credential.
    """
    trusted = (caller is not None and caller.is_admin) or verify_issuer_secret(
        request.headers.get(ISSUER_SECRET_HEADER), settings.jwt.issuer_secret
    )

    service = AuthService(db=db, jwt_manager=jwt_manager)
    credential = await service.issue_credential(data.email, trusted=trusted)

    return CredentialResponse(
        token=credential.token,
        token_type=credential.token_type,
        expires_in=credential.expires_in,
    )
