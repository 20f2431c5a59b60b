# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Alembic environment for the marketplace schema.

The target URL is taken from `-x url=...` when given, otherwise from the
application settings (DB_URL, or the DB_* parts). SQLite targets run in
batch mode so ALTER TABLE based revisions work there too.

Usage:
    alembic upgrade head
    alembic -x url=sqlite+aiosqlite:///./local.db upgrade head
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from speaksmart.core.config import get_settings
from speaksmart.infrastructure.database.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def _target_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("url") or get_settings().database.url


def _configure(url: str, **kwargs) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        render_as_batch=url.startswith("sqlite"),
        **kwargs,
    )


def run_offline(url: str) -> None:
    """Emit the migration SQL instead of executing it."""
    _configure(url, url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection, url: str) -> None:
    _configure(url, connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_online(url: str) -> None:
    """Apply migrations over a short-lived async engine."""
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_sync, url)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline(_target_url())
else:
    asyncio.run(run_online(_target_url()))
