# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Selection request/response schemas."""

from datetime import datetime

from pydantic import EmailStr

from speaksmart.models.class_ import ClassResponse
from speaksmart.models.common import APIModel


class SelectionCreateRequest(APIModel):
    """A student's intent to take a class."""

    student_email: EmailStr
    class_id: int


class SelectionResponse(APIModel):
    """Stored selection, with the selected class when loaded."""

    id: int
    student_email: str
    class_id: int
    created_at: datetime | None = None
    class_info: ClassResponse | None = None
