"""Repository for the reminders feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Select, or_, select

from crm_service.core.database.repository import BaseRepository, SearchResult
from crm_service.features.reminders.models import Reminder

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from crm_service.core.schemas.auth import Actor
    from crm_service.features.reminders.schemas import ReminderFilters, ReminderInput


class ReminderRepository(BaseRepository[Reminder]):
    """Repository for Reminder model.

    Inherits from BaseRepository:
        - get(session, id) -> Reminder | None
        - search(session, statement, limit, offset) -> SearchResult[Reminder]
        - create / update / delete

    Feature-specific methods below.
    """

    def __init__(self) -> None:
        super().__init__(Reminder)

    def filtered(self, filters: ReminderFilters) -> Select[tuple[Reminder]]:
        """Select statement for the list filters, newest first."""
        stmt = select(Reminder)
        if filters.resource_type:
            stmt = stmt.where(Reminder.resource_type == filters.resource_type)
        if filters.resource_id is not None:
            stmt = stmt.where(Reminder.resource_id == filters.resource_id)
        if filters.search_query:
            term = f"%{filters.search_query.strip()}%"
            stmt = stmt.where(or_(Reminder.title.ilike(term), Reminder.description.ilike(term)))
        return stmt.order_by(Reminder.id.desc())

    async def search_reminders(
        self,
        session: AsyncSession,
        filters: ReminderFilters,
        *,
        limit: int,
        offset: int = 0,
    ) -> SearchResult[Reminder]:
        return await self.search(session, self.filtered(filters), limit=limit, offset=offset)

    async def count_reminders(self, session: AsyncSession, filters: ReminderFilters) -> int:
        return await self.count(session, self.filtered(filters))

    async def create_reminder(
        self,
        session: AsyncSession,
        data: ReminderInput,
        filters: ReminderFilters,
        actor: Actor,
    ) -> Reminder:
        """Insert a reminder for ``actor``, attached to the filtered resource if any."""
        reminder = Reminder(
            **data.to_values(),
            resource_type=filters.resource_type,
            resource_id=filters.resource_id,
            creator_id=actor.user_id,
            status="active",
            sent=False,
        )
        return await self.create(session, reminder)

    async def update_reminder(
        self,
        session: AsyncSession,
        reminder: Reminder,
        data: ReminderInput,
    ) -> Reminder:
        return await self.update(session, reminder, data.to_values())


_reminder_repository: ReminderRepository | None = None


def get_reminder_repository() -> ReminderRepository:
    """Get the ReminderRepository singleton."""
    global _reminder_repository
    if _reminder_repository is None:
        _reminder_repository = ReminderRepository()
    return _reminder_repository
