# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Record store connection management using SQLAlchemy async.

The DatabaseProvider owns the engine and sessionmaker for the process.
It is created and initialized once at application startup and closed
on shutdown; request handlers only ever see sessions.

Uses SQLAlchemy 2.0 async API with the asyncpg driver (aiosqlite in tests).

Example:
    provider = DatabaseProvider(settings)
    await provider.init()

    async with provider.session() as session:
        result = await session.execute(select(Class))
        classes = result.scalars().all()

    await provider.close()
"""

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from sqlalchemy import event, text
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from speaksmart.core.exceptions import StorageUnavailableError
from speaksmart.infrastructure.database.models.base import Base

if TYPE_CHECKING:
    from speaksmart.core.config.settings import Settings

logger = logging.getLogger(__name__)

# Driver errors that mean the store itself is unreachable
CONNECTIVITY_ERRORS = (OperationalError, InterfaceError, OSError, ConnectionError)


class DatabaseProvider:
    """Process-wide owner of the record store connection pool.

    Attributes:
        _settings: Application settings.
        _engine: Async engine, None until init() is called.
        _sessionmaker: Session factory bound to the engine.
    """

    def __init__(self, settings: "Settings") -> None:
        """Initialize the provider without connecting.

        Args:
            settings: Application settings containing database configuration.
        """
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_initialized(self) -> bool:
        """Whether init() has been called and close() has not."""
        return self._engine is not None

    async def init(self) -> None:
        """Create the connection pool.

        Safe to call more than once; later calls are no-ops.

        Raises:
            StorageUnavailableError: If engine creation fails.
        """
        if self._engine is not None:
            return

        url = self._settings.database.url
        try:
            if url.startswith("sqlite"):
                self._engine = create_async_engine(
                    url,
                    connect_args={"timeout": 30},
                    echo=False,
                )
                event.listen(self._engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
            else:
                self._engine = create_async_engine(
                    url,
                    pool_size=self._settings.database.pool_size,
                    max_overflow=self._settings.database.max_overflow,
                    pool_pre_ping=True,
                    pool_recycle=1800,
                    echo=self._settings.debug and self._settings.is_development,
                )
        except SQLAlchemyError as e:
            raise StorageUnavailableError("Failed to initialize database connection", e) from e

        self._sessionmaker = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Database provider initialized")

    async def close(self) -> None:
        """Dispose of the connection pool."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("Database provider closed")

    async def create_all(self) -> None:
        """Create every table that does not exist yet.

        Used by tests and local development; deployments run Alembic.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine.

        Raises:
            StorageUnavailableError: If the provider has not been initialized.
        """
        if self._engine is None:
            raise StorageUnavailableError("Database not initialized. Call init() first.")
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Get an async session.

        Services commit explicitly. Anything left uncommitted is rolled
        back on exit. Connectivity failures surface as
        StorageUnavailableError; no retry happens here.

        Yields:
            AsyncSession for database operations.

        Raises:
            StorageUnavailableError: If the store cannot be reached.
        """
        if self._sessionmaker is None:
            raise StorageUnavailableError("Database not initialized. Call init() first.")

        async with self._sessionmaker() as session:
            try:
                yield session
            except CONNECTIVITY_ERRORS as e:
                await _safe_rollback(session)
                logger.error("Record store unavailable: %s", e)
                raise StorageUnavailableError("Record store unavailable", e) from e
            except Exception:
                await _safe_rollback(session)
                raise

    async def check_connection(self) -> bool:
        """Check if the record store is reachable.

        Returns:
            True if the database is reachable, False otherwise.
        """
        if self._engine is None:
            return False

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except CONNECTIVITY_ERRORS:
            return False


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def _safe_rollback(session: AsyncSession) -> None:
    """Roll back, ignoring failures of an already broken connection."""
    try:
        await session.rollback()
    except CONNECTIVITY_ERRORS as e:
        logger.debug("Rollback after failure also failed: %s", e)
