# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class request/response schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Self

from pydantic import Field, model_validator
from pydantic.alias_generators import to_camel

from speaksmart.models.common import APIModel, ClassStatus, Money


class ClassCreateRequest(APIModel):
    """Instructor proposal of a new class.

    The owning instructor is taken from the credential, never the body.
    """

    name: str = Field(min_length=1, max_length=255)
    image_url: str | None = Field(default=None, max_length=1024)
    instructor_name: str | None = Field(default=None, max_length=255)
    available_seats: int = Field(default=0, ge=0)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)


# Columns that are NOT NULL in the store
NON_NULLABLE_FIELDS = ("name", "available_seats", "price")


class ClassUpdateRequest(APIModel):
    """Partial class update; only fields present in the body are written.

    status is not updatable here; approval has its own operation.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    image_url: str | None = Field(default=None, max_length=1024)
    instructor_name: str | None = Field(default=None, max_length=255)
    available_seats: int | None = Field(default=None, ge=0)
    price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    feedback: str | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> Self:
        """Reject explicit nulls for fields every class must have."""
        for field in NON_NULLABLE_FIELDS:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{to_camel(field)} cannot be null")
        return self


class ClassResponse(APIModel):
    """Class record."""

    id: int
    name: str
    image_url: str | None = None
    instructor_email: str
    instructor_name: str | None = None
    available_seats: int
    price: Money
    status: ClassStatus
    feedback: str | None = None
    enrolled_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
