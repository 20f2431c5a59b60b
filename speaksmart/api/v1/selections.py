# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Selection ledger endpoints.

- POST /selections - Select a class
- GET /selections/{student_email} - A student's selections
- GET /selections/item/{selection_id} - One selection
- DELETE /selections/{selection_id} - Remove a selection

Every operation is limited to the owning student (or an admin).
"""

import logging

from fastapi import APIRouter, Depends, status

from speaksmart.api.dependencies import DB, require_auth
from speaksmart.domains.auth import Identity, authorize_owner
from speaksmart.domains.selection import SelectionNotFoundError, SelectionService
from speaksmart.models.common import DeleteResult
from speaksmart.models.selection import SelectionCreateRequest, SelectionResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=SelectionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Select class",
)
async def select_class(
    data: SelectionCreateRequest,
    db: DB,
    current_user: Identity = Depends(require_auth),
) -> SelectionResponse:
    """Record that the student intends to take a class."""
    authorize_owner(current_user, data.student_email)
    return await SelectionService(db=db).select_class(data)


@router.get(
    "/item/{selection_id}",
    response_model=SelectionResponse,
    summary="Get selection",
)
async def get_selection(
    selection_id: int,
    db: DB,
    current_user: Identity = Depends(require_auth),
) -> SelectionResponse:
    """Get one selection."""
    selection = await SelectionService(db=db).get_selection(selection_id)
    authorize_owner(current_user, selection.student_email)
    return selection


@router.get(
    "/{student_email}",
    response_model=list[SelectionResponse],
    summary="List selections",
)
async def list_selections(
    student_email: str,
    db: DB,
    current_user: Identity = Depends(require_auth),
) -> list[SelectionResponse]:
    """List a student's selections."""
    authorize_owner(current_user, student_email)
    return await SelectionService(db=db).list_for_student(student_email)


@router.delete(
    "/{selection_id}",
    response_model=DeleteResult,
    summary="Remove selection",
)
async def remove_selection(
    selection_id: int,
    db: DB,
    current_user: Identity = Depends(require_auth),
) -> DeleteResult:
    """Remove a selection. Removing a missing selection is not an error."""
    service = SelectionService(db=db)
    try:
        selection = await service.get_selection(selection_id)
    except SelectionNotFoundError:
        return DeleteResult(deleted=False, deleted_count=0)

    authorize_owner(current_user, selection.student_email)
    removed = await service.remove(selection_id)
    return DeleteResult(deleted=removed, deleted_count=int(removed))
