# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Selection ledger domain."""

from speaksmart.domains.selection.service import SelectionNotFoundError, SelectionService

__all__ = ["SelectionService", "SelectionNotFoundError"]
