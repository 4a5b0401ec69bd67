"""Database engine and session management (SQLAlchemy async)."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from crm_service.core.settings import get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

db_settings = get_db_settings()

engine = create_async_engine(db_settings.url, echo=db_settings.echo)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get an async database session outside of a request.

    Example:
        async with get_async_session() as session:
            result = await session.execute(select(Reminder))
    """
    async with AsyncSessionLocal() as session:
        yield session


async def create_tables() -> None:
    """Create every mapped table that does not exist yet."""
    # Register all models on Base.metadata
    import crm_service.features.models  # noqa: F401
    from crm_service.core.database import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", extra={"tables": sorted(Base.metadata.tables)})


async def init_database() -> None:
    """Verify connectivity and optionally create tables on startup.

    Raises:
        ConnectionError: If the database cannot be reached.
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:
        logger.exception("Database connection failed", extra={"url": engine.url.render_as_string()})
        msg = "Unable to connect to the database"
        raise ConnectionError(msg) from exc

    logger.info("Database connection established", extra={"driver": engine.url.drivername})

    if db_settings.create_tables:
        await create_tables()


async def close_database() -> None:
    """Dispose of the engine's connection pool."""
    logger.info("Closing database connection")
    await engine.dispose()


__all__ = [
    "AsyncSessionLocal",
    "close_database",
    "create_tables",
    "engine",
    "get_async_session",
    "init_database",
]
