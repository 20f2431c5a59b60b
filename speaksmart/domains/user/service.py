# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User service.

This module provides the UserService class for:
- Profile upsert on login/registration
- Role lookup for credential issuance
- Instructor listings, including the popularity ranking
"""

from __future__ import annotations

import logging

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from speaksmart.core.exceptions import NotFoundError
from speaksmart.infrastructure.database.models import Class, User
from speaksmart.models.user import InstructorSummary, UserResponse, UserUpsertRequest
from speaksmart.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "student"
POPULAR_INSTRUCTOR_LIMIT = 6


class UserNotFoundError(NotFoundError):
    """Raised when user is not found."""

    pass


class UserService:
    """Service for marketplace users.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def upsert_user(
        self,
        email: str,
        request: UserUpsertRequest,
        allow_role: bool = False,
    ) -> UserResponse:
        """Create or update a user profile.

        New users are students unless an administrator says otherwise.

        Args:
            email: User email.
            request: Profile fields; unset fields are left untouched.
            allow_role: Whether request.role may be written.

        Returns:
            The stored user.
        """
        update_data = request.model_dump(exclude_unset=True)
        if not allow_role or update_data.get("role") is None:
            update_data.pop("role", None)

        user = await self._get_user(email)
        if user is None:
            user = User(email=email, role=update_data.pop("role", DEFAULT_ROLE), **update_data)
            self.db.add(user)
            try:
                await self.db.commit()
            except IntegrityError:
                # Concurrent first login for the same email
                await self.db.rollback()
                user = await self._get_user(email)
                if user is None:
                    raise
                for field, value in update_data.items():
                    setattr(user, field, value)
                await self.db.commit()
            else:
                logger.info("Created user: %s (%s)", email, user.role)
        else:
            for field, value in update_data.items():
                setattr(user, field, value)
            await self.db.commit()

        await self.db.refresh(user)
        return self._to_response(user)

    async def get_user(self, email: str) -> UserResponse:
        """Get a user by email.

        Raises:
            UserNotFoundError: If user not found.
        """
        user = await self._get_user(email)
        if user is None:
            raise UserNotFoundError(f"User not found: {email}")
        return self._to_response(user)

    async def get_role(self, email: str) -> str:
        """Role to embed in a credential; unknown users are students."""
        result = await self.db.execute(select(User.role).where(User.email == email))
        return result.scalar_one_or_none() or DEFAULT_ROLE

    async def list_users(self) -> list[UserResponse]:
        """List all users, oldest first."""
        result = await self.db.execute(select(User).order_by(User.id.asc()))
        return [self._to_response(u) for u in result.scalars().all()]

    async def list_instructors(self) -> list[InstructorSummary]:
        """List every instructor by name with their approved-class totals."""
        return await self._instructor_summaries(order_by_popularity=False)

    async def list_popular_instructors(
        self,
        limit: int = POPULAR_INSTRUCTOR_LIMIT,
    ) -> list[InstructorSummary]:
        """List instructors by total enrollments across approved classes.

        Ties are broken by user id, oldest first.
        """
        return await self._instructor_summaries(order_by_popularity=True, limit=limit)

    async def _instructor_summaries(
        self,
        order_by_popularity: bool,
        limit: int | None = None,
    ) -> list[InstructorSummary]:
        enrolled = func.coalesce(func.sum(Class.enrolled_count), 0)
        class_count = func.count(Class.id)

        query = (
            select(User, enrolled.label("enrolled"), class_count.label("class_count"))
            .outerjoin(
                Class,
                and_(Class.instructor_email == User.email, Class.status == "approved"),
            )
            .where(User.role == "instructor")
            .group_by(User.id)
        )
        if order_by_popularity:
            query = query.order_by(enrolled.desc(), User.id.asc())
        else:
            query = query.order_by(User.name.asc(), User.id.asc())
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return [
            InstructorSummary(
                email=user.email,
                name=user.name,
                photo_url=user.photo_url,
                class_count=count,
                enrolled_students=total,
            )
            for user, total, count in result.all()
        ]

    async def _get_user(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    def _to_response(user: User) -> UserResponse:
        return UserResponse(
            id=user.id,
            email=user.email,
            name=user.name,
            photo_url=user.photo_url,
            role=user.role,
            created_at=ensure_utc(user.created_at),
        )
