# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

- GET / - Liveness banner
- GET /health - Record store reachability
"""

import logging
import time
from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from speaksmart import __version__
from speaksmart.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    database: ComponentHealth


async def check_database(request: Request) -> ComponentHealth:
    """Check the record store connection."""
    provider = getattr(request.app.state, "database", None)
    if provider is None:
        return ComponentHealth(status="unhealthy")

    start = time.time()
    reachable = await provider.check_connection()
    latency = (time.time() - start) * 1000

    if not reachable:
        logger.error("Database health check failed")
        return ComponentHealth(status="unhealthy")
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get("/", summary="Liveness banner")
async def root() -> dict[str, str]:
    """Report that the server is running."""
    return {"message": "SpeakSmart server is running"}


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    responses={503: {"model": HealthResponse}},
)
async def health(request: Request) -> HealthResponse | JSONResponse:
    """Report overall health; 503 when the record store is unreachable."""
    database = await check_database(request)
    response = HealthResponse(
        status="healthy" if database.status == "healthy" else "unhealthy",
        timestamp=utc_now(),
        version=__version__,
        environment=request.app.state.settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        database=database,
    )
    if response.status != "healthy":
        return JSONResponse(status_code=503, content=response.model_dump(mode="json"))
    return response
