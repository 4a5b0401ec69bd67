"""Bulk-action permission gate.

Destructive routes accept either a single entity id in the path
(``DELETE /tasks/9``) or a checkbox id set in the body
(``{"ids": {"5": "on", "7": "on"}}`` / ``ids[5]=on&ids[7]=on``). Both shapes
are normalized into one immutable BulkActionRequest. Every selected id must
exist and be permitted before the route body runs; one failure rejects the
whole request.

Usage:
    @router.post("/delete")
    async def bulk_destroy(
        bulk: Annotated[
            BulkActionRequest,
            Depends(require_bulk_permission(ResourceType.TASKS, PermissionAction.DELETE)),
        ],
    ):
        for task_id in bulk.selected_ids:
            ...
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Annotated, Any, Literal

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from crm_service.core.dependencies.auth import ActorDep
from crm_service.core.dependencies.database import get_db_session
from crm_service.core.dependencies.i18n import LocalizerDep
from crm_service.core.dependencies.request import get_request_data
from crm_service.core.exceptions import ConflictException, ForbiddenException
from crm_service.core.permissions import PermissionAction, ResourceType, get_permission_checker
from crm_service.core.settings import get_app_settings
from crm_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

SELECTED = "on"


@dataclass(frozen=True, slots=True)
class BulkActionRequest:
    """Validated id set for one bulk action.

    Attributes:
        resource_type: Resource the ids belong to
        action: Permission that was checked for every selected id
        ids: Read-only mapping of id -> checkbox marker ("on" = selected)
        source: "route" for single-id routes, "body" for submitted id sets
    """

    resource_type: ResourceType
    action: PermissionAction
    ids: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    source: Literal["route", "body"] = "body"

    @property
    def selected_ids(self) -> tuple[int, ...]:
        """Selected ids in submission order; "05" and "5" name the same id."""
        return tuple(dict.fromkeys(int(key) for key, marker in self.ids.items() if marker == SELECTED))


def normalize_id_set(raw: Any) -> dict[str, str] | None:
    """Normalize a submitted id set; None when nothing usable was sent.

    Accepts a mapping of id -> marker or a plain list of ids (all selected).
    """
    if isinstance(raw, Mapping):
        return {str(key).strip(): str(value) for key, value in raw.items()}
    if isinstance(raw, list | tuple):
        return {str(item).strip(): SELECTED for item in raw}
    return None


def single_id_set(route_id: Any) -> dict[str, str] | None:
    """One-entry id set for a numeric route id, else None."""
    if route_id is None:
        return None
    text = str(route_id).strip()
    return {text: SELECTED} if text.isdigit() else None


def require_bulk_permission(
    resource_type: ResourceType,
    action: PermissionAction,
    *,
    path_param: str | None = None,
) -> Callable[..., Coroutine[Any, Any, BulkActionRequest]]:
    """Build a dependency enforcing ``action`` on every selected id.

    Args:
        resource_type: Resource whose checker decides.
        action: Permission required on each selected entity.
        path_param: Route parameter holding a single entity id, if any.

    Raises (from the dependency):
        ConflictException: No id set was sent, or a selected id does not exist.
        ForbiddenException: The actor lacks ``action`` on a selected id.
    """

    async def bulk_permission_gate(
        request: Request,
        session: Annotated[AsyncSession, Depends(get_db_session)],
        actor: ActorDep,
        localizer: LocalizerDep,
    ) -> BulkActionRequest:
        route_id = request.path_params.get(path_param) if path_param else None

        ids = single_id_set(route_id)
        source: Literal["route", "body"] = "route"
        if ids is None:
            try:
                data = await get_request_data(request)
            except ConflictException:
                # Unparseable body: handled as a missing id set below
                data = {}
            ids = normalize_id_set(data.get("ids"))
            source = "body"

        if ids is None:
            logger.error(
                "No items were sent with this request",
                extra={
                    "process_tag": f"[{resource_type}][bulk-{action}]",
                    "ref": get_app_settings().debug_ref,
                    "function": "bulk_permission_gate",
                    "path": request.url.path,
                    "method": request.method,
                    "route_id": route_id,
                },
            )
            raise ConflictException(type="malformed-request")

        checker = get_permission_checker(resource_type)
        for entity_id, marker in ids.items():
            if marker != SELECTED:
                continue

            entity = await checker.resolve(session, entity_id)
            if entity is None:
                logger.info(
                    "Bulk action rejected: item no longer exists",
                    extra={"resource": str(resource_type), "id": entity_id, "operation": f"bulk.{action}"},
                )
                raise ConflictException(
                    detail=localizer("one_of_the_selected_items_nolonger_exists"),
                    type="not-found",
                    extra={"id": entity_id},
                )

            if not checker.allows(action, entity, actor):
                logger.warning(
                    "Bulk action rejected: permission denied",
                    extra={
                        "resource": str(resource_type),
                        "id": entity_id,
                        "user_id": actor.user_id,
                        "operation": f"bulk.{action}",
                    },
                )
                raise ForbiddenException(
                    detail=f"{localizer('permission_denied_for_this_item')} - #{entity_id}",
                    extra={"id": entity_id},
                )

        bulk = BulkActionRequest(
            resource_type=resource_type,
            action=action,
            ids=MappingProxyType(dict(ids)),
            source=source,
        )
        lazy_logger.debug(
            lambda: f"bulk.gate: {resource_type}.{action} source={source} selected={list(bulk.selected_ids)}"
        )
        return bulk

    return bulk_permission_gate


__all__ = [
    "BulkActionRequest",
    "normalize_id_set",
    "require_bulk_permission",
    "single_id_set",
]
