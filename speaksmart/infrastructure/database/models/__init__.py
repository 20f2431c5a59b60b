# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the marketplace record store."""

from speaksmart.infrastructure.database.models.base import Base
from speaksmart.infrastructure.database.models.marketplace import (
    Class,
    Enrollment,
    Payment,
    Selection,
)
from speaksmart.infrastructure.database.models.user import User

__all__ = [
    "Base",
    "User",
    "Class",
    "Selection",
    "Payment",
    "Enrollment",
]
