"""Entity permission gate for single-entity routes (show/edit/update)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from crm_service.core.dependencies.auth import ActorDep
from crm_service.core.dependencies.database import get_db_session
from crm_service.core.dependencies.i18n import LocalizerDep
from crm_service.core.exceptions import ConflictException, ForbiddenException
from crm_service.core.permissions.registry import get_permission_checker

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from crm_service.core.permissions.base import PermissionAction, ResourceType

logger = logging.getLogger(__name__)


def require_entity_permission(
    resource_type: ResourceType,
    action: PermissionAction,
    *,
    path_param: str,
    not_found_key: str,
) -> Callable[..., Coroutine[Any, Any, Any]]:
    """Build a dependency that loads the routed entity and checks ``action``.

    The dependency returns the loaded entity.

    Raises (from the dependency):
        ConflictException: The entity does not exist (localized ``not_found_key``).
        ForbiddenException: The actor lacks ``action`` on the entity.
    """

    async def entity_permission_gate(
        request: Request,
        session: Annotated[AsyncSession, Depends(get_db_session)],
        actor: ActorDep,
        localizer: LocalizerDep,
    ) -> Any:
        entity_id = request.path_params.get(path_param)
        checker = get_permission_checker(resource_type)

        entity = await checker.resolve(session, entity_id)
        if entity is None:
            raise ConflictException(
                detail=localizer(not_found_key),
                type="not-found",
                extra={"id": entity_id},
            )

        if not checker.allows(action, entity, actor):
            logger.warning(
                "Permission denied",
                extra={
                    "resource": str(resource_type),
                    "id": entity_id,
                    "user_id": actor.user_id,
                    "operation": f"{resource_type}.{action}",
                },
            )
            raise ForbiddenException(
                detail=f"{localizer('permission_denied_for_this_item')} - #{entity_id}",
                extra={"id": entity_id},
            )
        return entity

    return entity_permission_gate


__all__ = ["require_entity_permission"]
