"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app and HTTP client
    - Database Fixtures: in-memory SQLite engine, session and factories
    - Actor Fixtures: gateway headers for the acting user
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from fastapi import FastAPI
    from sqlalchemy.ext.asyncio import AsyncEngine

    from crm_service.features.reminders.models import Reminder
    from crm_service.features.tags.models import Tag
    from crm_service.features.tasks.models import Task

# Run without a database file or mock personas unless a test opts in
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_CREATE_TABLES", "false")
os.environ.setdefault("AUTH_MOCK_ENABLED", "false")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Async SQLAlchemy engine on a fresh in-memory SQLite database.

    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session with every table created; rolled back and dropped afterwards.

    Example:
        async def test_create(db_session):
            db_session.add(Reminder(...))
            await db_session.commit()
    """
    import crm_service.features.models  # noqa: F401
    from crm_service.core.database import Base

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def make_reminder(db_session: AsyncSession) -> Callable[..., Awaitable[Reminder]]:
    """Factory persisting a reminder; keyword arguments override defaults."""
    from crm_service.features.reminders.models import Reminder

    async def _make(**overrides: Any) -> Reminder:
        values: dict[str, Any] = {
            "title": "Call the client",
            "description": "Follow up on the proposal",
            "reminder_date": datetime(2026, 11, 2, 9, 30, tzinfo=UTC),
            "creator_id": 1,
            "status": "active",
            "sent": False,
        }
        values.update(overrides)
        reminder = Reminder(**values)
        db_session.add(reminder)
        await db_session.commit()
        await db_session.refresh(reminder)
        return reminder

    return _make


@pytest.fixture
def make_task(db_session: AsyncSession) -> Callable[..., Awaitable[Task]]:
    """Factory persisting a task; keyword arguments override defaults."""
    from crm_service.features.tasks.models import Task

    async def _make(**overrides: Any) -> Task:
        values: dict[str, Any] = {
            "title": "Prepare invoice",
            "description": "Monthly retainer",
            "project_id": 10,
            "creator_id": 1,
            "status": "new",
        }
        values.update(overrides)
        task = Task(**values)
        db_session.add(task)
        await db_session.commit()
        await db_session.refresh(task)
        return task

    return _make


@pytest.fixture
def make_tag(db_session: AsyncSession) -> Callable[..., Awaitable[Tag]]:
    """Factory persisting a tag row."""
    from crm_service.features.tags.models import Tag

    async def _make(**overrides: Any) -> Tag:
        values: dict[str, Any] = {
            "title": "urgent",
            "resource_type": "reminder",
            "resource_id": None,
            "creator_id": 1,
            "visibility": "user",
        }
        values.update(overrides)
        tag = Tag(**values)
        db_session.add(tag)
        await db_session.commit()
        await db_session.refresh(tag)
        return tag

    return _make


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app(db_session: AsyncSession) -> AsyncGenerator[FastAPI]:
    """FastAPI application whose request sessions are the test session."""
    from crm_service.app.main import create_app
    from crm_service.core.dependencies.database import get_db_session

    application = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    application.dependency_overrides[get_db_session] = override_db_session
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the app through ASGITransport.

    Example:
        async def test_index(client, actor_headers):
            response = await client.get("/api/v1/reminders", headers=actor_headers())
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ============================================================================
# Actor Fixtures
# ============================================================================


@pytest.fixture
def actor_headers() -> Callable[..., dict[str, str]]:
    """Build the gateway headers describing the acting user.

    Example:
        headers = actor_headers(user_id=2, acl=["crm.tasks.*.delete"])
    """

    def _headers(
        user_id: int = 1,
        role: str = "team",
        acl: list[str] | tuple[str, ...] = (),
        language: str | None = None,
    ) -> dict[str, str]:
        headers = {
            "X-User-Id": str(user_id),
            "X-User-Role": role,
            "Accept": "application/json",
        }
        if acl:
            headers["X-User-Acl"] = ",".join(acl)
        if language:
            headers["X-User-Language"] = language
        return headers

    return _headers
