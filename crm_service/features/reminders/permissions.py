"""Permission rules for reminders.

- edit-delete / view: the reminder's creator, or an ACL grant
  ``crm.reminders.<id>.<action>``
- create: any actor not denied ``crm.reminders.create``
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
from crm_service.features.reminders.models import Reminder
from crm_service.features.reminders.repository import get_reminder_repository

if TYPE_CHECKING:
    from crm_service.core.schemas.auth import Actor


class ReminderPermissions(PermissionChecker[Reminder]):
    resource_type = ResourceType.REMINDERS
    actions = frozenset(
        {PermissionAction.VIEW, PermissionAction.CREATE, PermissionAction.EDIT_DELETE}
    )

    def allows(self, action: PermissionAction, entity: Reminder, actor: Actor) -> bool:
        grant = self.grant(entity.id, action)
        acl = ACLChecker(actor)
        if acl.is_denied(grant):
            return False
        return entity.creator_id == actor.user_id or acl.has_acl(grant)


reminder_permissions = register_checker(ReminderPermissions(get_reminder_repository()))
