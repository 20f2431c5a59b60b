# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared pieces of the API schemas.

The wire format is camelCase (studentEmail, classId, ...); Python code
uses snake_case field names.
"""

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

ClassStatus = Literal["pending", "approved"]
UserRole = Literal["student", "instructor", "admin"]

# Prices travel as JSON numbers, not strings
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


class APIModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DeleteResult(APIModel):
    """Outcome of a delete operation."""

    deleted: bool
    deleted_count: int
