"""Database dependencies for FastAPI route handlers.

Route handlers use ``Depends(get_db_session)``; CLI commands and scripts use
``crm_service.infra.database.get_async_session`` directly. Both share the same
session factory.

Usage:
    @router.get("/reminders")
    async def index(session: Annotated[AsyncSession, Depends(get_db_session)]):
        ...
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from crm_service.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for a request-scoped database session.

    Uncommitted work is rolled back when the request ends.
    """
    async with get_async_session() as session:
        yield session


__all__ = ["get_db_session"]
