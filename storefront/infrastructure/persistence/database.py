"""Database connection and session management.

This module provides async SQLAlchemy database connectivity with connection
pooling, session lifecycle management, schema creation and health checks.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

from storefront.domain.models import Base
from storefront.infrastructure.config import Settings
from storefront.infrastructure.persistence.events import register_model_events


logger = get_logger(__name__)


class Database:
    """Database connection manager with async SQLAlchemy support.

    Handles database engine creation, connection pooling, session factory
    management, and provides transactional session context managers.

    Connection Pool Configuration (server databases only, SQLite uses its default pool):
        - pool_size: Base number of persistent connections
        - max_overflow: Additional connections during traffic spikes
        - pool_pre_ping: Validates connections before use
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        register_model_events()

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.settings.database_url).get_backend_name() == "sqlite"

    def _engine_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"echo": self.settings.database_echo}
        if not self.is_sqlite:
            options.update(
                pool_size=self.settings.database_pool_size,
                max_overflow=self.settings.database_max_overflow,
                pool_pre_ping=True,
            )
        return options

    def get_engine(self) -> AsyncEngine:
        """Get or create the database engine (lazily, once)."""
        if self._engine is None:
            self._engine = create_async_engine(self.settings.database_url, **self._engine_options())
            if self.settings.otel_enabled:
                from storefront.infrastructure.telemetry import instrument_sqlalchemy  # noqa: PLC0415

                instrument_sqlalchemy(self._engine)
        return self._engine

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory.

        Sessions use expire_on_commit=False so loaded records stay readable
        after the unit of work commits, and autoflush=False so writes happen
        only on explicit flush.
        """
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.get_engine(),
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Provide a transactional session, committing on success and rolling back on error."""
        session_factory = self.get_session_factory()
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create any missing tables for the registered models."""
        async with self.get_engine().begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
        logger.info("database_schema_ready", tables=sorted(Base.metadata.tables))

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    async def health_check(self) -> bool:
        """Return True when a trivial query succeeds."""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("database_health_check_failed", error=str(e))
            return False
