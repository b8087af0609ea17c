"""
World API Backend — Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   `Database` owns one async engine with connection pooling. `create_app()`
       builds it from Settings and stores it on `app.state.database`; the
       `get_db_session` dependency hands every request its own AsyncSession
       that rolls back on error. Writers commit before the response is built.
Who:   Used by FastAPI dependencies (see dependencies.py), Alembic and tests.

Connection Pooling:
    pool_size / max_overflow:  from Settings (DB_POOL_SIZE, DB_MAX_OVERFLOW)
    pool_pre_ping:             validates connections before use
    pool_recycle=3600:         recycles connections every hour
    SQLite URLs skip all pool arguments (SQLAlchemy picks its own pool).
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from worldapi.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models share this metadata so Alembic and `Database.create_all()`
    see the complete schema.
    """
    pass


def _engine_options(settings: Settings) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if make_url(settings.database_url).get_backend_name() == "sqlite":
        return options
    options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
    )
    return options


class Database:
    """
    Engine plus session factory for one application instance.

    Lifecycle:
        1. Constructed by create_app() from Settings
        2. session() opens one AsyncSession per request
        3. dispose() closes pooled connections at shutdown
    """

    def __init__(self, settings: Settings):
        self.url = settings.database_url
        self.engine: AsyncEngine = create_async_engine(
            settings.database_url, **_engine_options(settings)
        )
        # expire_on_commit=False keeps ORM rows readable after the commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        """Create every table known to Base.metadata (development and tests)."""
        # Models register on import
        import worldapi.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Schema created on %s", make_url(self.url).render_as_string(hide_password=True))

    async def ping(self) -> None:
        """Run SELECT 1; raises whatever the driver raises when unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Gracefully close all connections in the pool."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Nothing is committed here. Teardown runs after the response has been
    sent, so write paths commit through WorldStore.commit() or
    SessionGate.save() while the outcome can still change the status code.

    How it works:
        1. Opens a session from the app's Database
        2. Yields it to the route (and the store built on top of it)
        3. On error: rolls back and re-raises for the global handlers
        4. Always: closes the session (returns the connection to the pool)
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
