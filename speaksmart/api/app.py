# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the SpeakSmart API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from speaksmart import __version__
from speaksmart.api.middleware.auth import AuthMiddleware
from speaksmart.api.middleware.rate_limit import limiter
from speaksmart.api.routes import health
from speaksmart.api.v1 import router as v1_router
from speaksmart.core.config import Settings, get_settings
from speaksmart.core.exceptions import MarketplaceError
from speaksmart.domains.auth import CredentialGate, JWTManager
from speaksmart.infrastructure.database import DatabaseProvider
from speaksmart.infrastructure.payments import PaymentGateway, StripePaymentGateway
from speaksmart.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Initializes the record store on startup and closes it on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    database: DatabaseProvider = app.state.database
    logger.info(
        "Starting SpeakSmart API",
        extra={"environment": settings.environment, "debug": settings.debug},
    )

    # =========================================================================
    # Startup
    # =========================================================================
    try:
        await database.init()
        if settings.database.create_schema:
            await database.create_all()
        logger.info("Database connections initialized")
    except Exception as e:
        # Requests fail with 503 until the store is reachable
        logger.warning("Failed to initialize database connections: %s", str(e))

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================
    try:
        await database.close()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning("Error closing database connections: %s", str(e))

    logger.info("Shutting down SpeakSmart API")


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    """Render a marketplace error as {"error": true, "message": ...}."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)

    content: dict = {"error": True, "message": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors in the same shape as marketplace errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": True, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app(
    settings: Settings | None = None,
    database: DatabaseProvider | None = None,
    payment_gateway: PaymentGateway | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to get_settings().
        database: Record store provider; created from settings if omitted.
        payment_gateway: Gateway adapter; Stripe if omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="SpeakSmart API",
        description="Course marketplace backend",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        # Redirects from /path to /path/ drop the Authorization header
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    jwt_manager = JWTManager(settings.jwt)
    app.state.settings = settings
    app.state.database = database or DatabaseProvider(settings)
    app.state.payment_gateway = payment_gateway or StripePaymentGateway(settings.payment)
    app.state.jwt_manager = jwt_manager
    app.state.limiter = limiter
    limiter.enabled = settings.rate_limit.enabled

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================
    app.add_middleware(AuthMiddleware, gate=CredentialGate(jwt_manager))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
