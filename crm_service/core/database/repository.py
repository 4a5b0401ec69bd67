"""Minimal generic repository for SQLAlchemy models.

Provides basic CRUD operations with explicit session passing.
For complex queries, use the session directly - this is a convenience, not a cage.

Example:
    class ReminderRepository(BaseRepository[Reminder]):
        async def list_due(self, session: AsyncSession) -> Sequence[Reminder]:
            stmt = select(Reminder).where(Reminder.status == "due")
            return (await session.execute(stmt)).scalars().all()

    repo = BaseRepository(Reminder)
    reminder = await repo.get(session, reminder_id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError

from crm_service.core.database.exceptions import NotFoundError, RepositoryError
from crm_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute


@dataclass(slots=True, frozen=True)
class SearchResult[T]:
    """Paginated search result container.

    Attributes:
        items: List of items for current page
        total: Total count across all pages
        limit: Page size
        offset: Current offset
    """

    items: Sequence[T]
    total: int
    limit: int
    offset: int

    @property
    def page(self) -> int:
        """Current page number (1-indexed)."""
        return (self.offset // self.limit) + 1 if self.limit else 1

    @property
    def pages(self) -> int:
        """Total number of pages."""
        if self.limit == 0:
            return 1
        return (self.total + self.limit - 1) // self.limit

    @property
    def has_next(self) -> bool:
        return self.offset + len(self.items) < self.total


class BaseRepository[T]:
    """Minimal generic repository for CRUD operations.

    Provides:
        - get(session, id) -> T | None
        - get_or_raise(session, id) -> T (raises NotFoundError)
        - get_by(session, attr, value) -> T | None
        - search(session, statement, limit, offset) -> SearchResult[T]
        - count(session, statement) -> int
        - create(session, instance) -> T
        - update(session, instance, values) -> T
        - delete(session, instance) -> None

    Write methods raise RepositoryError instead of leaking SQLAlchemy errors.
    """

    __slots__ = ("model", "_logger", "_lazy")

    def __init__(self, model: type[T]) -> None:
        self.model = model
        # Standard logger for INFO/WARNING/ERROR
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        # Lazy logger for DEBUG
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    async def get(self, session: AsyncSession, id: Any) -> T | None:  # noqa: A002
        """Get entity by primary key."""
        instance = await session.get(self.model, id)
        self._lazy.debug(
            lambda: f"db.get: {self.model.__name__}({id}) -> {'found' if instance else 'not found'}"
        )
        return instance

    async def get_or_raise(self, session: AsyncSession, id: Any) -> T:  # noqa: A002
        """Get entity by primary key or raise NotFoundError."""
        instance = await self.get(session, id)
        if instance is None:
            self._logger.info(
                "Entity not found",
                extra={
                    "entity": self.model.__name__,
                    "id": str(id),
                    "operation": "db.get_or_raise",
                },
            )
            raise NotFoundError(self.model.__name__, {"id": id})
        return instance

    async def get_by(
        self,
        session: AsyncSession,
        attr: InstrumentedAttribute[Any],
        value: Any,
    ) -> T | None:
        """Get the first entity whose ``attr`` equals ``value``."""
        stmt = select(self.model).where(attr == value).limit(1)
        result = await session.execute(stmt)
        instance = result.scalars().first()
        self._lazy.debug(
            lambda: f"db.get_by: {self.model.__name__}.{attr.key}={value!r} -> {'found' if instance else 'not found'}"
        )
        return instance

    async def count(self, session: AsyncSession, statement: Select[tuple[T]]) -> int:
        """Count rows matched by a pre-built select statement."""
        count_stmt = select(func.count()).select_from(statement.order_by(None).subquery())
        return (await session.execute(count_stmt)).scalar_one()

    async def search(
        self,
        session: AsyncSession,
        statement: Select[tuple[T]],
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> SearchResult[T]:
        """Execute paginated search with total count.

        Takes a pre-built statement (with filters and ordering applied) and
        adds pagination.

        Example:
            stmt = select(Reminder).where(Reminder.resource_type == "client")
            result = await repo.search(session, stmt, limit=20, offset=0)
            print(f"Found {result.total} reminders, showing page {result.page}")
        """
        total = await self.count(session, statement)

        result = await session.execute(statement.limit(limit).offset(offset))
        items = result.scalars().all()

        search_result = SearchResult(items=items, total=total, limit=limit, offset=offset)
        self._lazy.debug(
            lambda: f"db.search: {self.model.__name__}(limit={limit}, offset={offset}) -> {len(items)}/{total} items, page {search_result.page}/{search_result.pages}"
        )
        return search_result

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Persist a new entity.

        Adds to session, flushes to get generated values (like id),
        and refreshes to ensure instance is up-to-date.

        Raises:
            RepositoryError: If the insert fails
        """
        try:
            session.add(instance)
            await session.flush()
            await session.refresh(instance)
        except SQLAlchemyError as exc:
            self._logger.exception(
                "Entity create failed",
                extra={"entity": self.model.__name__, "operation": "db.create"},
            )
            raise RepositoryError(f"Failed to create {self.model.__name__}") from exc

        entity_id = getattr(instance, "id", None)
        self._lazy.debug(lambda: f"db.create: {self.model.__name__}(id={entity_id})")
        return instance

    async def update(self, session: AsyncSession, instance: T, values: Mapping[str, Any]) -> T:
        """Assign ``values`` onto a tracked instance and flush.

        Raises:
            RepositoryError: If the flush fails
        """
        entity_id = getattr(instance, "id", None)
        for key, value in values.items():
            setattr(instance, key, value)
        try:
            await session.flush()
            await session.refresh(instance)
        except SQLAlchemyError as exc:
            self._logger.exception(
                "Entity update failed",
                extra={"entity": self.model.__name__, "id": str(entity_id), "operation": "db.update"},
            )
            raise RepositoryError(f"Failed to update {self.model.__name__}", {"id": entity_id}) from exc

        self._lazy.debug(lambda: f"db.update: {self.model.__name__}(id={entity_id}) fields={sorted(values)}")
        return instance

    async def delete(self, session: AsyncSession, instance: T) -> None:
        """Delete an entity.

        Raises:
            RepositoryError: If the delete fails
        """
        entity_id = getattr(instance, "id", None)
        try:
            await session.delete(instance)
            await session.flush()
        except SQLAlchemyError as exc:
            self._logger.exception(
                "Entity delete failed",
                extra={"entity": self.model.__name__, "id": str(entity_id), "operation": "db.delete"},
            )
            raise RepositoryError(f"Failed to delete {self.model.__name__}", {"id": entity_id}) from exc

        self._logger.info(
            "Entity deleted",
            extra={"entity": self.model.__name__, "id": str(entity_id), "operation": "db.delete"},
        )


__all__ = ["BaseRepository", "SearchResult"]
