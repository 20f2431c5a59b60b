# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User request/response schemas."""

from datetime import datetime

from pydantic import Field

from speaksmart.models.common import APIModel, UserRole


class UserUpsertRequest(APIModel):
    """Profile fields written on login/registration.

    role is honoured only when the caller is an administrator.
    """

    name: str | None = Field(default=None, max_length=255)
    photo_url: str | None = Field(default=None, max_length=1024)
    role: UserRole | None = None


class UserResponse(APIModel):
    """Stored user profile."""

    id: int
    email: str
    name: str | None = None
    photo_url: str | None = None
    role: UserRole
    created_at: datetime | None = None


class InstructorSummary(APIModel):
    """Instructor with aggregate enrollment numbers over approved classes."""

    email: str
    name: str | None = None
    photo_url: str | None = None
    class_count: int = 0
    enrolled_students: int = 0
