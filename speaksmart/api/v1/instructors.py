# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Instructor endpoints.

- GET /instructors - List instructors
- GET /instructors/popular - Top instructors by enrollments
- GET /instructors/{email}/classes - An instructor's own classes
"""

import logging

from fastapi import APIRouter, Depends

from speaksmart.api.dependencies import DB, require_auth
from speaksmart.domains.auth import Identity, authorize_owner
from speaksmart.domains.class_ import ClassService
from speaksmart.domains.user import UserService
from speaksmart.models.class_ import ClassResponse
from speaksmart.models.user import InstructorSummary

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[InstructorSummary],
    summary="List instructors",
)
async def list_instructors(db: DB) -> list[InstructorSummary]:
    """List every instructor."""
    return await UserService(db=db).list_instructors()


@router.get(
    "/popular",
    response_model=list[InstructorSummary],
    summary="Popular instructors",
    description="Up to six instructors ranked by students enrolled in their approved classes.",
)
async def list_popular_instructors(db: DB) -> list[InstructorSummary]:
    """List the most popular instructors."""
    return await UserService(db=db).list_popular_instructors()


@router.get(
    "/{email}/classes",
    response_model=list[ClassResponse],
    summary="Instructor classes",
    description="Every class owned by the instructor, pending ones included.",
)
async def list_instructor_classes(
    email: str,
    db: DB,
    current_user: Identity = Depends(require_auth),
) -> list[ClassResponse]:
    """List an instructor's classes. Owner or admin only."""
    authorize_owner(current_user, email)
    return await ClassService(db=db).list_for_instructor(email)
