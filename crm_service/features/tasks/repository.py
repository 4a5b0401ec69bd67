"""Repository for the tasks feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Select, select

from crm_service.core.database.repository import BaseRepository, SearchResult
from crm_service.features.tasks.models import Task

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class TaskRepository(BaseRepository[Task]):
    """Repository for Task model."""

    def __init__(self) -> None:
        super().__init__(Task)

    def filtered(self, project_id: int | None = None) -> Select[tuple[Task]]:
        stmt = select(Task)
        if project_id is not None:
            stmt = stmt.where(Task.project_id == project_id)
        return stmt.order_by(Task.id.desc())

    async def search_tasks(
        self,
        session: AsyncSession,
        *,
        project_id: int | None = None,
        limit: int,
        offset: int = 0,
    ) -> SearchResult[Task]:
        return await self.search(session, self.filtered(project_id), limit=limit, offset=offset)


_task_repository: TaskRepository | None = None


def get_task_repository() -> TaskRepository:
    """Get the TaskRepository singleton."""
    global _task_repository
    if _task_repository is None:
        _task_repository = TaskRepository()
    return _task_repository
