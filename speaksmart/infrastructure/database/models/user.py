# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from speaksmart.infrastructure.database.models.base import Base, IntegerIdMixin, TimestampMixin


class User(Base, IntegerIdMixin, TimestampMixin):
    """Marketplace user, identified by email.

    Attributes:
        email: Identity key.
        name: Display name.
        photo_url: Avatar URL.
        role: One of student, instructor, admin.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    role: Mapped[str] = mapped_column(String(20), default="student", nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
