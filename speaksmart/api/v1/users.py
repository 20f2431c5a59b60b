# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User endpoints.

- PUT /users/{email} - Create or update a profile
- GET /users/{email} - Get a profile
- GET /users - List users (admin)

A user may only write their own profile; only administrators set roles.
"""

import logging

from fastapi import APIRouter, Depends

from speaksmart.api.dependencies import DB, require_admin, require_auth
from speaksmart.domains.auth import Identity, authorize_owner
from speaksmart.domains.user import UserService
from speaksmart.models.user import UserResponse, UserUpsertRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.put(
    "/{email}",
    response_model=UserResponse,
    summary="Upsert user",
    description="Create the profile on first login, update it afterwards.",
)
async def upsert_user(
    email: str,
    data: UserUpsertRequest,
    db: DB,
    current_user: Identity = Depends(require_auth),
) -> UserResponse:
    """Create or update a user profile."""
    authorize_owner(current_user, email)

    service = UserService(db=db)
    return await service.upsert_user(email, data, allow_role=current_user.is_admin)


@router.get(
    "/{email}",
    response_model=UserResponse,
    summary="Get user",
)
async def get_user(
    email: str,
    db: DB,
    current_user: Identity = Depends(require_auth),
) -> UserResponse:
    """Get a user profile. Users see themselves; admins see anyone."""
    authorize_owner(current_user, email)

    service = UserService(db=db)
    return await service.get_user(email)


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List users",
    description="List every user. Requires admin access.",
)
async def list_users(
    db: DB,
    current_user: Identity = Depends(require_admin),
) -> list[UserResponse]:
    """List all users."""
    service = UserService(db=db)
    return await service.list_users()
