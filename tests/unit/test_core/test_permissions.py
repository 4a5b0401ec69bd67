"""Tests for the resource permission checkers and their lookup table."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from crm_service.core.permissions import (
    PermissionAction,
    ResourceType,
    apply_permissions,
    get_permission_checker,
)
from crm_service.core.schemas.auth import Actor
from crm_service.features.reminders.permissions import reminder_permissions
from crm_service.features.reminders.schemas import ReminderRead
from crm_service.features.tasks.permissions import task_permissions

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

OWNER = Actor(user_id=1)
STRANGER = Actor(user_id=2)
ADMIN = Actor(user_id=9, role="admin")


@pytest.mark.unit
class TestRegistry:
    def test_lookup_by_resource_type(self) -> None:
        assert get_permission_checker(ResourceType.REMINDERS) is reminder_permissions
        assert get_permission_checker(ResourceType.TASKS) is task_permissions

    def test_lookup_accepts_plain_string(self) -> None:
        assert get_permission_checker("tasks") is task_permissions

    def test_unknown_type_raises_lookup_error(self) -> None:
        with pytest.raises(LookupError):
            get_permission_checker("invoices")

    def test_grant_pattern(self) -> None:
        assert task_permissions.grant(9, PermissionAction.DELETE) == "crm.tasks.9.delete"


@pytest.mark.unit
class TestReminderPermissions:
    async def test_creator_may_edit_and_view(self, make_reminder) -> None:
        reminder = await make_reminder(creator_id=1)

        assert reminder_permissions.allows(PermissionAction.EDIT_DELETE, reminder, OWNER)
        assert reminder_permissions.allows(PermissionAction.VIEW, reminder, OWNER)

    async def test_other_user_needs_a_grant(self, make_reminder) -> None:
        reminder = await make_reminder(creator_id=1)
        granted = Actor(user_id=2, acl=(f"crm.reminders.{reminder.id}.edit-delete",))

        assert not reminder_permissions.allows(PermissionAction.EDIT_DELETE, reminder, STRANGER)
        assert reminder_permissions.allows(PermissionAction.EDIT_DELETE, reminder, granted)

    async def test_admin_role_alone_is_not_enough(self, make_reminder) -> None:
        reminder = await make_reminder(creator_id=1)

        assert not reminder_permissions.allows(PermissionAction.EDIT_DELETE, reminder, ADMIN)

    async def test_negation_beats_ownership(self, make_reminder) -> None:
        reminder = await make_reminder(creator_id=1)
        denied = Actor(user_id=1, acl=(f"!crm.reminders.{reminder.id}.edit-delete",))

        assert not reminder_permissions.allows(PermissionAction.EDIT_DELETE, reminder, denied)

    def test_create_allowed_unless_denied(self) -> None:
        assert reminder_permissions.allows_create(STRANGER)
        assert not reminder_permissions.allows_create(
            Actor(user_id=3, role="client", acl=("!crm.reminders.create",))
        )

    async def test_check_resolves_raw_ids(self, db_session: AsyncSession, make_reminder) -> None:
        reminder = await make_reminder(creator_id=1)

        assert await reminder_permissions.check(
            db_session, PermissionAction.VIEW, str(reminder.id), OWNER
        )
        assert not await reminder_permissions.check(
            db_session, PermissionAction.VIEW, str(reminder.id), STRANGER
        )

    async def test_check_unknown_or_invalid_id_is_false(self, db_session: AsyncSession) -> None:
        assert not await reminder_permissions.check(db_session, PermissionAction.VIEW, 999, OWNER)
        assert not await reminder_permissions.check(db_session, PermissionAction.VIEW, "abc", OWNER)

    async def test_check_unsupported_action_is_false(
        self, db_session: AsyncSession, make_reminder, caplog: pytest.LogCaptureFixture
    ) -> None:
        reminder = await make_reminder(creator_id=1)

        allowed = await reminder_permissions.check(
            db_session, PermissionAction.DELETE, reminder, OWNER
        )

        assert not allowed
        assert "Unsupported permission action" in caplog.text

    async def test_check_create_needs_no_entity(self, db_session: AsyncSession) -> None:
        assert await reminder_permissions.check(db_session, PermissionAction.CREATE, None, OWNER)


@pytest.mark.unit
class TestTaskPermissions:
    async def test_admin_creator_and_grant_may_delete(self, make_task) -> None:
        task = await make_task(creator_id=1)
        granted = Actor(user_id=5, acl=("crm.tasks.*.delete",))

        assert task_permissions.allows(PermissionAction.DELETE, task, ADMIN)
        assert task_permissions.allows(PermissionAction.DELETE, task, OWNER)
        assert task_permissions.allows(PermissionAction.DELETE, task, granted)
        assert not task_permissions.allows(PermissionAction.DELETE, task, STRANGER)

    async def test_negation_beats_admin(self, make_task) -> None:
        task = await make_task(creator_id=1)
        denied_admin = Actor(user_id=9, role="admin", acl=(f"!crm.tasks.{task.id}.delete",))

        assert not task_permissions.allows(PermissionAction.DELETE, task, denied_admin)


@pytest.mark.unit
class TestApplyPermissions:
    async def test_sets_flag_per_row(self, make_reminder) -> None:
        own = await make_reminder(creator_id=1)
        other = await make_reminder(creator_id=2)

        rows = apply_permissions(
            reminder_permissions,
            PermissionAction.EDIT_DELETE,
            OWNER,
            [own, other],
            ReminderRead,
            "permission_edit_delete_reminder",
        )

        assert [(row.id, row.permission_edit_delete_reminder) for row in rows] == [
            (own.id, True),
            (other.id, False),
        ]
