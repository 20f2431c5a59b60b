# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class catalogue endpoints.

- POST /classes - Propose a class (instructor)
- GET /classes - List classes, optionally by status
- GET /classes/popular - Top approved classes by enrollments
- GET /classes/{class_id} - Get class details
- PATCH /classes/{class_id}/approve - Approve a class (admin)
- PUT /classes/{class_id} - Update a class (owner or admin)
- PATCH /classes/{class_id} - Update a class (owner or admin)

Listings are public. An unrecognised status filter returns an empty list.
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from speaksmart.api.dependencies import DB, require_admin, require_auth, require_instructor
from speaksmart.domains.auth import Identity, authorize_owner
from speaksmart.domains.class_ import ClassService
from speaksmart.models.class_ import ClassCreateRequest, ClassResponse, ClassUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession) -> ClassService:
    """Get class service instance."""
    return ClassService(db=db)


@router.post(
    "",
    response_model=ClassResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create class",
    description="Propose a new class. It starts pending with no enrollments.",
)
async def create_class(
    data: ClassCreateRequest,
    db: DB,
    current_user: Identity = Depends(require_instructor),
) -> ClassResponse:
    """Create a class owned by the calling instructor."""
    logger.info("Creating class %r by %s", data.name, current_user.email)
    return await _get_service(db).create_class(current_user.email, data)


@router.get(
    "",
    response_model=list[ClassResponse],
    summary="List classes",
    description=(
        "List classes. With status, only classes in that status; "
        "without it, every class with pending ones first."
    ),
)
async def list_classes(
    db: DB,
    status_filter: str | None = Query(None, alias="status"),
    sort: str | None = Query(None, description="Secondary sort field, '-' prefix for descending"),
) -> list[ClassResponse]:
    """List classes by status."""
    return await _get_service(db).list_by_status(status_filter, sort)


@router.get(
    "/popular",
    response_model=list[ClassResponse],
    summary="Popular classes",
    description="Up to six approved classes with the most enrollments.",
)
async def list_popular_classes(db: DB) -> list[ClassResponse]:
    """List the most popular approved classes."""
    return await _get_service(db).list_popular()


@router.get(
    "/{class_id}",
    response_model=ClassResponse,
    summary="Get class",
)
async def get_class(class_id: int, db: DB) -> ClassResponse:
    """Get a class by id."""
    return await _get_service(db).get_class(class_id)


@router.patch(
    "/{class_id}/approve",
    response_model=ClassResponse,
    summary="Approve class",
    description="Mark a class approved. Idempotent. Requires admin access.",
)
async def approve_class(
    class_id: int,
    db: DB,
    current_user: Identity = Depends(require_admin),
) -> ClassResponse:
    """Approve a class."""
    logger.info("Approving class %s by %s", class_id, current_user.email)
    return await _get_service(db).approve_class(class_id)


async def _update_class(
    class_id: int,
    data: ClassUpdateRequest,
    db: AsyncSession,
    current_user: Identity,
) -> ClassResponse:
    service = _get_service(db)
    class_ = await service.get_class_model(class_id)
    authorize_owner(current_user, class_.instructor_email)
    return await service.update_class(class_id, data, admin=current_user.is_admin)


@router.put(
    "/{class_id}",
    response_model=ClassResponse,
    summary="Update class",
    description="Merge the supplied fields into the class. Owner or admin only.",
)
async def replace_class(
    class_id: int,
    data: ClassUpdateRequest,
    db: DB,
    current_user: Identity = Depends(require_auth),
) -> ClassResponse:
    """Update a class."""
    return await _update_class(class_id, data, db, current_user)


@router.patch(
    "/{class_id}",
    response_model=ClassResponse,
    summary="Update class",
    description="Merge the supplied fields into the class. Owner or admin only.",
)
async def update_class(
    class_id: int,
    data: ClassUpdateRequest,
    db: DB,
    current_user: Identity = Depends(require_auth),
) -> ClassResponse:
    """Update a class."""
    return await _update_class(class_id, data, db, current_user)
