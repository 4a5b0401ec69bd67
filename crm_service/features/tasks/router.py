"""Tasks controller: list and (bulk) delete."""
from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from crm_service.core.bulk import BulkActionRequest, require_bulk_permission
from crm_service.core.database import RepositoryError
from crm_service.core.dependencies import ActorDep, LocalizerDep
from crm_service.core.dependencies.database import get_db_session
from crm_service.core.exceptions import ConflictException
from crm_service.core.i18n import Localizer
from crm_service.core.permissions import PermissionAction, ResourceType, apply_permissions
from crm_service.core.responses import DestroyResponse, IndexResponse
from crm_service.core.settings import MAX_PAGE, PaginationSettings, get_pagination_settings
from crm_service.features.tags.repository import TagRepository, get_tag_repository
from crm_service.features.tasks.permissions import task_permissions
from crm_service.features.tasks.repository import TaskRepository, get_task_repository
from crm_service.features.tasks.schemas import TaskRead

router = APIRouter(prefix="/tasks", tags=["tasks"])

logger = logging.getLogger(__name__)

RESOURCE = "tasks"
TAG_RESOURCE_TYPE = "task"

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
RepoDep = Annotated[TaskRepository, Depends(get_task_repository)]
TagRepoDep = Annotated[TagRepository, Depends(get_tag_repository)]


@router.get("", summary="List tasks")
async def index(
    request: Request,
    session: SessionDep,
    repo: RepoDep,
    actor: ActorDep,
    localizer: LocalizerDep,
    pagination: Annotated[PaginationSettings, Depends(get_pagination_settings)],
    project_id: int | None = None,
    page_number: Annotated[int, Query(alias="page", ge=1, le=MAX_PAGE)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> Response:
    page_size = pagination.clamp(limit)
    result = await repo.search_tasks(
        session, project_id=project_id, limit=page_size, offset=(page_number - 1) * page_size
    )
    payload = {
        "page": {
            "meta_title": localizer("tasks"),
            "heading": localizer("tasks"),
            "no_results_message": localizer("no_results_found"),
            "mainmenu_tasks": "active",
        },
        "tasks": apply_permissions(
            task_permissions,
            PermissionAction.DELETE,
            actor,
            result.items,
            TaskRead,
            "permission_delete_task",
        ),
        "pagination": {
            "total": result.total,
            "page": result.page,
            "pages": result.pages,
            "limit": result.limit,
            "has_next": result.has_next,
        },
    }
    return IndexResponse(RESOURCE, payload).render(request)


async def _delete_selected(
    session: AsyncSession,
    repo: TaskRepository,
    tags: TagRepository,
    localizer: Localizer,
    bulk: BulkActionRequest,
) -> list[int]:
    task_ids = list(bulk.selected_ids)
    for task_id in task_ids:
        task = await repo.get(session, task_id)
        if task is None:
            raise ConflictException(
                detail=localizer("one_of_the_selected_items_nolonger_exists"), type="not-found"
            )
        try:
            await repo.delete(session, task)
        except RepositoryError as exc:
            raise ConflictException() from exc

    try:
        await tags.delete_for_resource(session, TAG_RESOURCE_TYPE, task_ids)
    except RepositoryError as exc:
        raise ConflictException() from exc

    await session.commit()
    logger.info(
        "Tasks deleted",
        extra={"task_ids": task_ids, "source": bulk.source, "operation": "endpoint.destroy_tasks"},
    )
    return task_ids


@router.delete("/{task_id}", summary="Delete a task")
async def destroy(
    request: Request,
    task_id: str,
    session: SessionDep,
    repo: RepoDep,
    tags: TagRepoDep,
    localizer: LocalizerDep,
    bulk: Annotated[
        BulkActionRequest,
        Depends(require_bulk_permission(ResourceType.TASKS, PermissionAction.DELETE, path_param="task_id")),
    ],
) -> Response:
    """Delete one task; a non-numeric id is answered by the gate as a malformed request."""
    task_ids = await _delete_selected(session, repo, tags, localizer, bulk)
    return DestroyResponse(RESOURCE, {"task_ids": task_ids}).render(request)


@router.post("/delete", summary="Delete selected tasks")
async def bulk_destroy(
    request: Request,
    session: SessionDep,
    repo: RepoDep,
    tags: TagRepoDep,
    localizer: LocalizerDep,
    bulk: Annotated[
        BulkActionRequest,
        Depends(require_bulk_permission(ResourceType.TASKS, PermissionAction.DELETE)),
    ],
) -> Response:
    """Delete every task checked in the submitted id set."""
    task_ids = await _delete_selected(session, repo, tags, localizer, bulk)
    return DestroyResponse(RESOURCE, {"task_ids": task_ids}).render(request)
