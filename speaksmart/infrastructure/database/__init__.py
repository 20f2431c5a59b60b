# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Record store infrastructure.

Example:
    from speaksmart.infrastructure.database import DatabaseProvider

    provider = DatabaseProvider(settings)
    await provider.init()
    async with provider.session() as session:
        result = await session.execute(select(Class))
"""

from speaksmart.infrastructure.database.connection import DatabaseProvider

__all__ = ["DatabaseProvider"]
