"""Permission rules for tasks.

delete / view: admins, the task's creator, or an ACL grant
``crm.tasks.<id>.<action>``. Negated grants win over everything.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from crm_service.core.acl import ACLChecker
from crm_service.core.permissions import (
    PermissionAction,
    PermissionChecker,
    ResourceType,
    register_checker,
)
from crm_service.features.tasks.models import Task
from crm_service.features.tasks.repository import get_task_repository

if TYPE_CHECKING:
    from crm_service.core.schemas.auth import Actor


class TaskPermissions(PermissionChecker[Task]):
    resource_type = ResourceType.TASKS
    actions = frozenset({PermissionAction.VIEW, PermissionAction.DELETE})

    def allows(self, action: PermissionAction, entity: Task, actor: Actor) -> bool:
        grant = self.grant(entity.id, action)
        acl = ACLChecker(actor)
        if acl.is_denied(grant):
            return False
        return actor.is_admin or entity.creator_id == actor.user_id or acl.has_acl(grant)


task_permissions = register_checker(TaskPermissions(get_task_repository()))
