# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User domain."""

from speaksmart.domains.user.service import UserNotFoundError, UserService

__all__ = ["UserService", "UserNotFoundError"]
