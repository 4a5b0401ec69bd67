"""Reminders controller: list, forms, create, read, update and delete."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from crm_service.core.bulk import BulkActionRequest, require_bulk_permission
from crm_service.core.database import NotFoundError, RepositoryError
from crm_service.core.dependencies import ActorDep, LocalizerDep, RequestDataDep
from crm_service.core.dependencies.database import get_db_session
from crm_service.core.exceptions import ConflictException, ForbiddenException
from crm_service.core.i18n import Localizer
from crm_service.core.permissions import PermissionAction, ResourceType, apply_permissions
from crm_service.core.permissions.dependencies import require_entity_permission
from crm_service.core.responses import (
    CreateResponse,
    DestroyResponse,
    EditResponse,
    IndexResponse,
    ShowResponse,
    StoreResponse,
    UpdateResponse,
)
from crm_service.core.schemas.auth import Actor
from crm_service.core.settings import (
    MAX_PAGE,
    AppSettings,
    PaginationSettings,
    get_app_settings,
    get_pagination_settings,
)
from crm_service.core.validation import (
    Validator,
    each_no_html,
    format_messages,
    is_array,
    is_date,
    no_html,
    nullable,
    required,
)
from crm_service.features.reminders.models import Reminder
from crm_service.features.reminders.pages import page_settings
from crm_service.features.reminders.permissions import reminder_permissions
from crm_service.features.reminders.repository import ReminderRepository, get_reminder_repository
from crm_service.features.reminders.schemas import ReminderFilters, ReminderInput, ReminderRead
from crm_service.features.tags.repository import TagRepository, get_tag_repository
from crm_service.features.tags.schemas import TagRead
from crm_service.infra.logging import get_lazy_logger

router = APIRouter(prefix="/reminders", tags=["reminders"])

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

RESOURCE = "reminders"
TAG_RESOURCE_TYPE = "reminder"
PERMISSION_FLAG = "permission_edit_delete_reminder"

REMINDER_RULES = Validator(
    {
        "reminder_title": [required, no_html],
        "reminder_description": [required],
        "reminder_date": [required, is_date],
        "tags": [nullable, is_array, each_no_html("tags_no_html")],
    }
)

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
RepoDep = Annotated[ReminderRepository, Depends(get_reminder_repository)]
TagRepoDep = Annotated[TagRepository, Depends(get_tag_repository)]
AppSettingsDep = Annotated[AppSettings, Depends(get_app_settings)]


def get_reminder_filters(
    reminderresource_type: str | None = None,
    reminderresource_id: str | None = None,
    search_query: str | None = None,
) -> ReminderFilters:
    """Read list filters from the query string; blank values mean "no filter"."""
    resource_id = reminderresource_id.strip() if reminderresource_id else ""
    return ReminderFilters(
        resource_type=(reminderresource_type or "").strip() or None,
        resource_id=int(resource_id) if resource_id.isdigit() else None,
        search_query=(search_query or "").strip() or None,
    )


FiltersDep = Annotated[ReminderFilters, Depends(get_reminder_filters)]


def validate_input(data: Mapping[str, Any], localizer: Localizer) -> ReminderInput:
    """Run the field rules, then build the typed input.

    Raises:
        ConflictException: Aggregated validation messages.
    """
    REMINDER_RULES.validate_or_abort(data, localizer)
    try:
        return ReminderInput.model_validate(dict(data))
    except ValidationError as exc:
        raise ConflictException(
            detail=format_messages([error["msg"] for error in exc.errors(include_url=False)]),
            type="validation-error",
        ) from exc


def _rows(reminders: list[Reminder], actor: Actor) -> list[ReminderRead]:
    return apply_permissions(
        reminder_permissions,
        PermissionAction.EDIT_DELETE,
        actor,
        reminders,
        ReminderRead,
        PERMISSION_FLAG,
    )


@router.get("", summary="List reminders")
async def index(
    request: Request,
    session: SessionDep,
    repo: RepoDep,
    actor: ActorDep,
    localizer: LocalizerDep,
    filters: FiltersDep,
    app_settings: AppSettingsDep,
    pagination: Annotated[PaginationSettings, Depends(get_pagination_settings)],
    source: str | None = None,
    page_number: Annotated[int, Query(alias="page", ge=1, le=MAX_PAGE)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> Response:
    """List reminders; a resource filter selects the "my reminders" page."""
    section: Literal["reminders", "myreminders"] = "myreminders" if filters.resource_type else "reminders"
    page_size = pagination.clamp(limit)

    result = await repo.search_reminders(
        session, filters, limit=page_size, offset=(page_number - 1) * page_size
    )

    payload = {
        "page": page_settings(
            section,
            localizer,
            base_url=f"{app_settings.api_prefix}/{RESOURCE}",
            filters=filters,
            source=source,
        ),
        "reminders": _rows(list(result.items), actor),
        "pagination": {
            "total": result.total,
            "page": result.page,
            "pages": result.pages,
            "limit": result.limit,
            "has_next": result.has_next,
        },
    }
    lazy_logger.debug(lambda: f"reminders.index: {section} {filters!r} -> {len(result.items)}/{result.total}")
    return IndexResponse(RESOURCE, payload).render(request)


@router.get("/create", summary="Reminder create form")
async def create(
    request: Request,
    session: SessionDep,
    tags: TagRepoDep,
    actor: ActorDep,
    localizer: LocalizerDep,
    filters: FiltersDep,
    app_settings: AppSettingsDep,
) -> Response:
    vocabulary = await tags.get_by_type(session, TAG_RESOURCE_TYPE, actor)
    payload = {
        "page": page_settings(
            "create", localizer, base_url=f"{app_settings.api_prefix}/{RESOURCE}", filters=filters
        ),
        "tags": vocabulary,
    }
    return CreateResponse(RESOURCE, payload).render(request)


@router.post("", summary="Create a reminder")
async def store(
    request: Request,
    session: SessionDep,
    repo: RepoDep,
    tags: TagRepoDep,
    actor: ActorDep,
    localizer: LocalizerDep,
    filters: FiltersDep,
    body: RequestDataDep,
) -> Response:
    """Create a reminder and its tags; returns the new row and the list total."""
    if not reminder_permissions.allows_create(actor):
        raise ForbiddenException(detail=localizer("permission_denied_for_this_item"))
    data = validate_input(body, localizer)

    try:
        reminder = await repo.create_reminder(session, data, filters, actor)
        await tags.add(session, TAG_RESOURCE_TYPE, reminder.id, data.tags, actor.user_id)
    except RepositoryError as exc:
        raise ConflictException() from exc

    count = await repo.count_reminders(session, filters)
    await session.commit()

    logger.info(
        "Reminder created",
        extra={"reminder_id": reminder.id, "user_id": actor.user_id, "operation": "endpoint.store_reminder"},
    )
    return StoreResponse(RESOURCE, {"reminders": _rows([reminder], actor), "count": count}).render(request)


@router.get("/{reminder_id}", summary="Show a reminder")
async def show(
    request: Request,
    reminder_id: int,
    actor: ActorDep,
    reminder: Annotated[
        Reminder,
        Depends(
            require_entity_permission(
                ResourceType.REMINDERS,
                PermissionAction.VIEW,
                path_param="reminder_id",
                not_found_key="reminder_not_found",
            )
        ),
    ],
) -> Response:
    return ShowResponse(RESOURCE, {"reminder": _rows([reminder], actor)[0]}).render(request)


@router.get("/{reminder_id}/edit", summary="Reminder edit form")
async def edit(
    request: Request,
    reminder_id: int,
    session: SessionDep,
    tags: TagRepoDep,
    actor: ActorDep,
    localizer: LocalizerDep,
    filters: FiltersDep,
    app_settings: AppSettingsDep,
    reminder: Annotated[
        Reminder,
        Depends(
            require_entity_permission(
                ResourceType.REMINDERS,
                PermissionAction.EDIT_DELETE,
                path_param="reminder_id",
                not_found_key="reminder_not_found",
            )
        ),
    ],
) -> Response:
    current_tags = await tags.get_by_resource(session, TAG_RESOURCE_TYPE, reminder.id)
    payload = {
        "page": page_settings(
            "edit", localizer, base_url=f"{app_settings.api_prefix}/{RESOURCE}", filters=filters
        ),
        "reminder": _rows([reminder], actor)[0],
        "tags": [TagRead.model_validate(tag) for tag in current_tags],
    }
    return EditResponse(RESOURCE, payload).render(request)


@router.api_route("/{reminder_id}", methods=["PUT", "PATCH"], summary="Update a reminder")
async def update(
    request: Request,
    reminder_id: int,
    session: SessionDep,
    repo: RepoDep,
    tags: TagRepoDep,
    actor: ActorDep,
    localizer: LocalizerDep,
    body: RequestDataDep,
    reminder: Annotated[
        Reminder,
        Depends(
            require_entity_permission(
                ResourceType.REMINDERS,
                PermissionAction.EDIT_DELETE,
                path_param="reminder_id",
                not_found_key="reminder_not_found",
            )
        ),
    ],
) -> Response:
    """Update a reminder and replace its tag set."""
    data = validate_input(body, localizer)
    try:
        reminder = await repo.update_reminder(session, reminder, data)
        await tags.delete_for_resource(session, TAG_RESOURCE_TYPE, reminder.id)
        await tags.add(session, TAG_RESOURCE_TYPE, reminder.id, data.tags, actor.user_id)
    except RepositoryError as exc:
        raise ConflictException() from exc

    await session.commit()

    logger.info(
        "Reminder updated",
        extra={"reminder_id": reminder.id, "user_id": actor.user_id, "operation": "endpoint.update_reminder"},
    )
    return UpdateResponse(RESOURCE, {"reminders": _rows([reminder], actor)}).render(request)


@router.delete("/{reminder_id}", summary="Delete a reminder")
async def destroy(
    request: Request,
    reminder_id: int,
    session: SessionDep,
    repo: RepoDep,
    tags: TagRepoDep,
    localizer: LocalizerDep,
    bulk: Annotated[
        BulkActionRequest,
        Depends(
            require_bulk_permission(
                ResourceType.REMINDERS, PermissionAction.EDIT_DELETE, path_param="reminder_id"
            )
        ),
    ],
) -> Response:
    """Delete a reminder and its tags."""
    for selected_id in bulk.selected_ids:
        # Deleted concurrently after the gate ran
        try:
            reminder = await repo.get_or_raise(session, selected_id)
        except NotFoundError as exc:
            raise ConflictException(detail=localizer("reminder_not_found"), type="not-found") from exc
        try:
            await tags.delete_for_resource(session, TAG_RESOURCE_TYPE, reminder.id)
            await repo.delete(session, reminder)
        except RepositoryError as exc:
            raise ConflictException() from exc

    await session.commit()

    logger.info(
        "Reminder deleted",
        extra={"reminder_id": reminder_id, "operation": "endpoint.destroy_reminder"},
    )
    return DestroyResponse(RESOURCE, {"reminder_id": reminder_id}).render(request)
