# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions from the application's DatabaseProvider
- Get the authenticated identity
- Get the payment gateway and credential manager

The provider and gateway live on app.state; they are created by
create_app() and initialized in the lifespan.

Example:
    @router.get("/selections/{student_email}")
    async def list_selections(
        student_email: str,
        db: DB,
        current_user: AuthUser,
    ):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from speaksmart.api.middleware.auth import get_current_user
from speaksmart.core.config import Settings
from speaksmart.core.exceptions import StorageUnavailableError, UnauthorizedError
from speaksmart.domains.auth import Identity, JWTManager, authorize_role
from speaksmart.domains.auth.gate import UNAUTHORIZED_MESSAGE
from speaksmart.infrastructure.database import DatabaseProvider
from speaksmart.infrastructure.payments import PaymentGateway

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_database_provider(request: Request) -> DatabaseProvider:
    """Get the application's database provider.

    Raises:
        StorageUnavailableError: If the provider is not initialized.
    """
    provider: DatabaseProvider | None = getattr(request.app.state, "database", None)
    if provider is None or not provider.is_initialized:
        raise StorageUnavailableError("Database not initialized")
    return provider


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the request.

    Yields:
        AsyncSession bound to the application's engine.
    """
    provider = get_database_provider(request)
    async with provider.session() as session:
        yield session


def get_payment_gateway(request: Request) -> PaymentGateway:
    """Get the application's payment gateway."""
    return request.app.state.payment_gateway


def get_jwt_manager(request: Request) -> JWTManager:
    """Get the credential signer."""
    return request.app.state.jwt_manager


# =========================================================================
# Authentication Dependencies
# =========================================================================


def require_auth(request: Request) -> Identity:
    """Require an authenticated identity.

    Raises:
        UnauthorizedError: If the request carries no valid credential.
    """
    user = get_current_user(request)
    if user is None:
        raise UnauthorizedError(UNAUTHORIZED_MESSAGE)
    return user


def require_admin(request: Request) -> Identity:
    """Require an administrator.

    Raises:
        UnauthorizedError: If not authenticated.
        ForbiddenError: If not an administrator.
    """
    user = require_auth(request)
    authorize_role(user, "admin")
    return user


def require_instructor(request: Request) -> Identity:
    """Require an instructor or administrator.

    Raises:
        UnauthorizedError: If not authenticated.
        ForbiddenError: If neither instructor nor administrator.
    """
    user = require_auth(request)
    authorize_role(user, "instructor")
    return user


# Type aliases for common dependencies
DB = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Gateway = Annotated[PaymentGateway, Depends(get_payment_gateway)]
Credentials = Annotated[JWTManager, Depends(get_jwt_manager)]
OptionalUser = Annotated[Identity | None, Depends(get_current_user)]
AuthUser = Annotated[Identity, Depends(require_auth)]
AdminUser = Annotated[Identity, Depends(require_admin)]
InstructorUser = Annotated[Identity, Depends(require_instructor)]
