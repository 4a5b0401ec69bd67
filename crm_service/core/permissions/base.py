"""Per-resource permission checkers.

A checker answers "may this actor perform this action on this entity?".
Rules combine ownership, role and ACL grants of the form
``crm.<resource>.<id>.<action>``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel

from crm_service.core.acl import ACLChecker
from crm_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession

    from crm_service.core.database import BaseRepository
    from crm_service.core.schemas.auth import Actor

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


class PermissionAction(StrEnum):
    """Actions a checker can be asked about."""

    VIEW = "view"
    CREATE = "create"
    EDIT_DELETE = "edit-delete"
    DELETE = "delete"


class ResourceType(StrEnum):
    """Resource types with a registered permission checker."""

    REMINDERS = "reminders"
    TASKS = "tasks"


class PermissionChecker[T](ABC):
    """Base class for resource permission checkers.

    Subclasses declare the resource type, the actions they understand and
    implement ``allows`` for loaded entities. ``check`` also accepts a raw id
    and resolves it through the repository; unknown ids are never allowed.
    """

    resource_type: ClassVar[ResourceType]
    actions: ClassVar[frozenset[PermissionAction]]

    def __init__(self, repository: BaseRepository[T]) -> None:
        self.repository = repository

    def grant(self, entity_id: Any, action: PermissionAction) -> str:
        """ACL pattern granting ``action`` on one entity."""
        return f"crm.{self.resource_type}.{entity_id}.{action}"

    async def resolve(self, session: AsyncSession, ref: T | int | str) -> T | None:
        if isinstance(ref, self.repository.model):
            return ref
        try:
            entity_id = int(ref)
        except (TypeError, ValueError):
            return None
        return await self.repository.get(session, entity_id)

    async def check(
        self,
        session: AsyncSession,
        action: PermissionAction,
        ref: T | int | str | None,
        actor: Actor,
    ) -> bool:
        """Return whether ``actor`` may perform ``action`` on ``ref``.

        ``ref`` is an entity, a raw id, or None for type-level actions
        such as create.
        """
        if action not in self.actions:
            logger.warning(
                "Unsupported permission action",
                extra={"resource": str(self.resource_type), "action": str(action)},
            )
            return False

        if action == PermissionAction.CREATE:
            allowed = self.allows_create(actor)
        else:
            entity = await self.resolve(session, ref) if ref is not None else None
            allowed = entity is not None and self.allows(action, entity, actor)

        lazy_logger.debug(
            lambda: f"permission.check: {self.resource_type}.{action} ref={getattr(ref, 'id', ref)} "
            f"user={actor.user_id} -> {allowed}"
        )
        return allowed

    def allows_create(self, actor: Actor) -> bool:
        return not ACLChecker(actor).is_denied(f"crm.{self.resource_type}.create")

    @abstractmethod
    def allows(self, action: PermissionAction, entity: T, actor: Actor) -> bool:
        """Evaluate ``action`` against an already loaded entity."""


def apply_permissions[S: BaseModel](
    checker: PermissionChecker[Any],
    action: PermissionAction,
    actor: Actor,
    entities: Iterable[Any],
    schema: type[S],
    flag: str,
) -> list[S]:
    """Serialize entities with a transient permission flag per row.

    Example:
        rows = apply_permissions(checker, PermissionAction.EDIT_DELETE, actor,
                                 result.items, ReminderRead,
                                 "permission_edit_delete_reminder")
    """
    return [
        schema.model_validate(entity).model_copy(update={flag: checker.allows(action, entity, actor)})
        for entity in entities
    ]


__all__ = [
    "PermissionAction",
    "PermissionChecker",
    "ResourceType",
    "apply_permissions",
]
