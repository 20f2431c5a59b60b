# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Selection ledger service.

A selection records that a student intends to take a class. Several
selections for the same (student, class) pair may exist; all of them
are cleared once the student enrolls.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from speaksmart.core.exceptions import NotFoundError
from speaksmart.domains.class_.service import ClassNotFoundError, ClassService
from speaksmart.infrastructure.database.models import Selection
from speaksmart.models.selection import SelectionCreateRequest, SelectionResponse
from speaksmart.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


class SelectionNotFoundError(NotFoundError):
    """Raised when selection is not found."""

    pass


class SelectionService:
    """Service for the selection ledger.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def select_class(self, request: SelectionCreateRequest) -> SelectionResponse:
        """Record a selection.

        Class existence and approval are not checked here; payment and
        enrollment check them.

        Raises:
            ClassNotFoundError: If the store rejects the class reference.
        """
        selection = Selection(
            student_email=request.student_email,
            class_id=request.class_id,
        )
        self.db.add(selection)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ClassNotFoundError(f"Class not found: {request.class_id}") from e

        logger.info(
            "Selected class: student=%s, class=%s", request.student_email, request.class_id
        )

        return await self.get_selection(selection.id)

    async def list_for_student(self, student_email: str) -> list[SelectionResponse]:
        """List a student's selections, oldest first.

        An empty email yields an empty list without querying.
        """
        if not student_email:
            return []

        result = await self.db.execute(
            select(Selection)
            .where(Selection.student_email == student_email)
            .order_by(Selection.id.asc())
            .execution_options(populate_existing=True)
        )
        return [self._to_response(s) for s in result.scalars().all()]

    async def get_selection(self, selection_id: int) -> SelectionResponse:
        """Get a selection by id.

        Raises:
            SelectionNotFoundError: If selection not found.
        """
        result = await self.db.execute(
            select(Selection)
            .where(Selection.id == selection_id)
            .execution_options(populate_existing=True)
        )
        selection = result.scalar_one_or_none()
        if selection is None:
            raise SelectionNotFoundError(f"Selection not found: {selection_id}")
        return self._to_response(selection)

    async def remove(self, selection_id: int) -> bool:
        """Delete one selection.

        Returns:
            True if a selection was deleted.
        """
        result = await self.db.execute(delete(Selection).where(Selection.id == selection_id))
        await self.db.commit()

        removed = result.rowcount > 0
        if removed:
            logger.info("Removed selection: %s", selection_id)
        return removed

    async def remove_for_pair(
        self,
        student_email: str,
        class_id: int,
        commit: bool = True,
    ) -> int:
        """Delete every selection a student holds for a class.

        Removing nothing is not an error.

        Returns:
            Number of selections deleted.
        """
        result = await self.db.execute(
            delete(Selection).where(
                Selection.student_email == student_email,
                Selection.class_id == class_id,
            )
        )
        if commit:
            await self.db.commit()
        return result.rowcount

    @staticmethod
    def _to_response(selection: Selection) -> SelectionResponse:
        return SelectionResponse(
            id=selection.id,
            student_email=selection.student_email,
            class_id=selection.class_id,
            created_at=ensure_utc(selection.created_at),
            class_info=(
                ClassService._to_response(selection.class_)
                if selection.class_ is not None
                else None
            ),
        )
