# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class registry domain."""

from speaksmart.domains.class_.service import (
    ClassLockedError,
    ClassNotApprovedError,
    ClassNotFoundError,
    ClassService,
)

__all__ = [
    "ClassService",
    "ClassNotFoundError",
    "ClassNotApprovedError",
    "ClassLockedError",
]
