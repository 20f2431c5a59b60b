# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class registry service.

This module provides the ClassService class for:
- Instructor class proposals and edits
- Administrator approval
- Catalogue listings by status and popularity
- The enrollment counter, advanced only by the enrollment pipeline
"""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from speaksmart.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from speaksmart.infrastructure.database.models import Class
from speaksmart.models.class_ import ClassCreateRequest, ClassResponse, ClassUpdateRequest
from speaksmart.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

VALID_STATUSES = frozenset({"pending", "approved"})
SORTABLE_FIELDS = frozenset({"created_at", "name", "price", "enrolled_count", "available_seats"})
DEFAULT_SORT = "created_at"
POPULAR_LIMIT = 6


class ClassNotFoundError(NotFoundError):
    """Raised when class is not found."""

    pass


class ClassNotApprovedError(ValidationError):
    """Raised when an operation needs an approved class."""

    pass


class ClassLockedError(ForbiddenError):
    """Raised when an instructor edits a class that is already approved."""

    pass


class ClassService:
    """Service for the class catalogue.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize class service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def create_class(
        self,
        instructor_email: str,
        request: ClassCreateRequest,
    ) -> ClassResponse:
        """Store a new class proposal.

        The class always starts pending with no enrollments, whatever the
        caller sends.

        Args:
            instructor_email: Owning instructor, from the credential.
            request: Class data.

        Returns:
            The stored class.
        """
        class_ = Class(
            name=request.name,
            image_url=request.image_url,
            instructor_email=instructor_email,
            instructor_name=request.instructor_name,
            available_seats=request.available_seats,
            price=request.price,
            status="pending",
            enrolled_count=0,
        )
        self.db.add(class_)
        await self.db.commit()
        await self.db.refresh(class_)

        logger.info("Created class: %s by %s", class_.id, instructor_email)

        return self._to_response(class_)

    async def get_class(self, class_id: int) -> ClassResponse:
        """Get a class by id.

        Raises:
            ClassNotFoundError: If class not found.
        """
        class_ = await self.get_class_model(class_id)
        return self._to_response(class_)

    async def get_class_model(self, class_id: int) -> Class:
        """Load the ORM row for a class.

        Raises:
            ClassNotFoundError: If class not found.
        """
        result = await self.db.execute(
            select(Class)
            .where(Class.id == class_id)
            .execution_options(populate_existing=True)
        )
        class_ = result.scalar_one_or_none()
        if class_ is None:
            raise ClassNotFoundError(f"Class not found: {class_id}")
        return class_

    async def list_by_status(
        self,
        status: str | None = None,
        sort: str | None = None,
    ) -> list[ClassResponse]:
        """List classes, optionally filtered by status.

        An unrecognised status yields an empty list. Without a status
        every class is returned, pending before approved.

        Args:
            status: pending or approved.
            sort: Secondary sort field; prefix with "-" for descending.
                Unknown fields fall back to creation time.

        Returns:
            List of classes.
        """
        if status is not None and status not in VALID_STATUSES:
            return []

        query = select(Class)
        if status is not None:
            query = query.where(Class.status == status)

        query = query.order_by(Class.status.desc(), *self._sort_clauses(sort))

        result = await self.db.execute(query.execution_options(populate_existing=True))
        return [self._to_response(c) for c in result.scalars().all()]

    async def list_popular(self, limit: int = POPULAR_LIMIT) -> list[ClassResponse]:
        """List the most enrolled approved classes.

        Ties on enrolled_count are broken by id, oldest first.
        """
        result = await self.db.execute(
            select(Class)
            .where(Class.status == "approved")
            .order_by(Class.enrolled_count.desc(), Class.id.asc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return [self._to_response(c) for c in result.scalars().all()]

    async def list_for_instructor(self, instructor_email: str) -> list[ClassResponse]:
        """List every class owned by an instructor, newest first."""
        result = await self.db.execute(
            select(Class)
            .where(Class.instructor_email == instructor_email)
            .order_by(Class.created_at.desc(), Class.id.desc())
            .execution_options(populate_existing=True)
        )
        return [self._to_response(c) for c in result.scalars().all()]

    async def approve_class(self, class_id: int) -> ClassResponse:
        """Mark a class approved.

        Idempotent: approving an approved class leaves it unchanged.

        Raises:
            ClassNotFoundError: If class not found.
        """
        result = await self.db.execute(
            update(Class)
            .where(Class.id == class_id)
            .values(status="approved", updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ClassNotFoundError(f"Class not found: {class_id}")
        await self.db.commit()

        logger.info("Approved class: %s", class_id)

        return await self.get_class(class_id)

    async def update_class(
        self,
        class_id: int,
        request: ClassUpdateRequest,
        admin: bool = False,
    ) -> ClassResponse:
        """Merge the supplied fields into a class.

        Fields absent from the request are left untouched. Instructors may
        only edit a class while it is pending, and only administrators
        write feedback.

        Args:
            class_id: Class identifier.
            request: Fields to change.
            admin: Whether the caller is an administrator.

        Returns:
            The updated class.

        Raises:
            ClassNotFoundError: If class not found.
            ClassLockedError: If a non-administrator edits an approved class.
        """
        class_ = await self.get_class_model(class_id)

        if not admin and class_.status == "approved":
            raise ClassLockedError("Approved classes can only be edited by an administrator")

        update_data = request.model_dump(exclude_unset=True)
        if not admin:
            update_data.pop("feedback", None)

        for field, value in update_data.items():
            setattr(class_, field, value)

        await self.db.commit()
        await self.db.refresh(class_)

        logger.info("Updated class: %s fields=%s", class_id, sorted(update_data))

        return self._to_response(class_)

    async def increment_enrollment(
        self,
        class_id: int,
        delta: int = 1,
        commit: bool = True,
    ) -> None:
        """Atomically add to a class's enrollment counter.

        Args:
            class_id: Class identifier.
            delta: Positive amount to add.
            commit: Commit immediately; pass False to join the caller's
                transaction.

        Raises:
            ValueError: If delta is not positive.
            ClassNotFoundError: If class not found.
        """
        if delta <= 0:
            raise ValueError("Enrollment counter only moves forward")

        result = await self.db.execute(
            update(Class)
            .where(Class.id == class_id)
            .values(enrolled_count=Class.enrolled_count + delta)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ClassNotFoundError(f"Class not found: {class_id}")

        if commit:
            await self.db.commit()

    def _sort_clauses(self, sort: str | None) -> list:
        field = sort or DEFAULT_SORT
        descending = field.startswith("-")
        field = field.lstrip("-")
        if field not in SORTABLE_FIELDS:
            field, descending = DEFAULT_SORT, False

        column = getattr(Class, field)
        return [column.desc() if descending else column.asc(), Class.id.asc()]

    @staticmethod
    def _to_response(class_: Class) -> ClassResponse:
        """Convert class model to response."""
        return ClassResponse(
            id=class_.id,
            name=class_.name,
            image_url=class_.image_url,
            instructor_email=class_.instructor_email,
            instructor_name=class_.instructor_name,
            available_seats=class_.available_seats,
            price=class_.price,
            status=class_.status,
            feedback=class_.feedback,
            enrolled_count=class_.enrolled_count,
            created_at=ensure_utc(class_.created_at),
            updated_at=ensure_utc(class_.updated_at),
        )
