"""API tests for the reminders controller."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from crm_service.features.reminders.models import Reminder
from crm_service.features.tags.models import Tag

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

URL = "/api/v1/reminders"

VALID = {
    "reminder_title": "Call the client",
    "reminder_description": "Discuss the renewal",
    "reminder_date": "2026-11-02T09:30:00",
    "tags": ["sales", " vip ", "sales"],
}


async def _count(session: AsyncSession, model: type) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.integration
class TestIndex:
    async def test_lists_newest_first_with_permission_flags(
        self, client: AsyncClient, actor_headers, make_reminder
    ) -> None:
        own = await make_reminder(creator_id=1)
        other = await make_reminder(creator_id=2)

        response = await client.get(URL, headers=actor_headers(user_id=1))

        assert response.status_code == 200
        body = response.json()
        assert [(r["id"], r["permission_edit_delete_reminder"]) for r in body["reminders"]] == [
            (other.id, False),
            (own.id, True),
        ]
        assert body["pagination"] == {"total": 2, "page": 1, "pages": 1, "limit": 20, "has_next": False}
        assert body["page"]["heading"] == "Reminders"

    async def test_resource_filter_selects_my_reminders(
        self, client: AsyncClient, actor_headers, make_reminder
    ) -> None:
        await make_reminder(resource_type="client", resource_id=4)
        await make_reminder(resource_type="client", resource_id=5)

        response = await client.get(
            URL,
            params={"reminderresource_type": "client", "reminderresource_id": "4", "source": "ext"},
            headers=actor_headers(),
        )

        body = response.json()
        assert len(body["reminders"]) == 1
        assert body["page"]["heading"] == "My Reminders"
        assert body["page"]["list_page_actions_size"] == "col-lg-12"
        assert "reminderresource_id=4" in body["page"]["add_modal_action_url"]

    async def test_blank_filters_mean_no_filter(self, client: AsyncClient, actor_headers, make_reminder) -> None:
        await make_reminder(resource_type="client", resource_id=4)
        await make_reminder()

        response = await client.get(
            URL, params={"reminderresource_type": "", "reminderresource_id": ""}, headers=actor_headers()
        )

        assert response.json()["pagination"]["total"] == 2
        assert response.json()["page"]["heading"] == "Reminders"

    async def test_pagination(self, client: AsyncClient, actor_headers, make_reminder) -> None:
        for index in range(3):
            await make_reminder(title=f"r{index}")

        response = await client.get(URL, params={"page": 2, "limit": 2}, headers=actor_headers())

        body = response.json()
        assert [r["title"] for r in body["reminders"]] == ["r0"]
        assert body["pagination"]["page"] == 2
        assert body["pagination"]["has_next"] is False

    async def test_page_beyond_limit_is_rejected(self, client: AsyncClient, actor_headers) -> None:
        from crm_service.core.settings import MAX_PAGE

        at_limit = await client.get(URL, params={"page": MAX_PAGE}, headers=actor_headers())
        beyond = await client.get(URL, params={"page": 10**19}, headers=actor_headers())

        assert at_limit.status_code == 200
        assert at_limit.json()["reminders"] == []
        assert beyond.status_code == 422

    async def test_localized_by_accept_language(self, client: AsyncClient, actor_headers) -> None:
        headers = {**actor_headers(), "Accept-Language": "es-ES,es;q=0.9"}

        response = await client.get(URL, headers=headers)

        assert response.json()["page"]["heading"] == "Recordatorios"
        assert response.headers["content-language"] == "es"

    async def test_actor_language_wins(self, client: AsyncClient, actor_headers) -> None:
        response = await client.get(URL, headers=actor_headers(language="es"))

        assert response.json()["page"]["heading"] == "Recordatorios"

    async def test_renders_template_for_browsers(
        self, client: AsyncClient, actor_headers, make_reminder
    ) -> None:
        await make_reminder(title="Browser visible")
        headers = {**actor_headers(), "Accept": "text/html"}

        response = await client.get(URL, headers=headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Browser visible" in response.text
        assert "<h1>Reminders</h1>" in response.text

    async def test_ajax_gets_json_even_when_html_accepted(self, client: AsyncClient, actor_headers) -> None:
        headers = {**actor_headers(), "Accept": "text/html", "X-Requested-With": "XMLHttpRequest"}

        response = await client.get(URL, headers=headers)

        assert response.headers["content-type"].startswith("application/json")


@pytest.mark.integration
class TestCreateForm:
    async def test_returns_visible_tag_vocabulary(self, client: AsyncClient, actor_headers, make_tag) -> None:
        await make_tag(title="shared", creator_id=9, visibility="public")
        await make_tag(title="mine", creator_id=1)
        await make_tag(title="theirs", creator_id=2)

        response = await client.get(f"{URL}/create", headers=actor_headers(user_id=1))

        assert response.status_code == 200
        assert response.json()["tags"] == ["mine", "shared"]
        assert response.json()["page"]["section"] == "create"


@pytest.mark.integration
class TestStore:
    async def test_creates_reminder_with_tags_and_count(
        self, client: AsyncClient, db_session: AsyncSession, actor_headers, make_reminder
    ) -> None:
        await make_reminder()
        await make_reminder()

        response = await client.post(URL, json=VALID, headers=actor_headers(user_id=2))

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 3 == await _count(db_session, Reminder)
        created = body["reminders"][0]
        assert created["title"] == "Call the client"
        assert created["creator_id"] == 2
        assert created["permission_edit_delete_reminder"] is True
        tags = (await db_session.execute(select(Tag.title).where(Tag.resource_id == created["id"]))).scalars()
        assert sorted(tags) == ["sales", "vip"]

    async def test_count_uses_resource_filters(
        self, client: AsyncClient, actor_headers, make_reminder
    ) -> None:
        await make_reminder(resource_type="client", resource_id=4)
        await make_reminder()

        response = await client.post(
            URL,
            params={"reminderresource_type": "client", "reminderresource_id": "4"},
            json=VALID,
            headers=actor_headers(),
        )

        body = response.json()
        assert body["count"] == 2
        assert body["reminders"][0]["resource_type"] == "client"
        assert body["reminders"][0]["resource_id"] == 4

    async def test_accepts_form_encoded_bodies(self, client: AsyncClient, actor_headers) -> None:
        form = {
            "reminder_title": "Form reminder",
            "reminder_description": "Sent from the modal",
            "reminder_date": "2026-11-02 09:30",
            "tags[]": ["a", "b"],
        }

        response = await client.post(URL, data=form, headers=actor_headers())

        assert response.status_code == 200
        assert response.json()["reminders"][0]["title"] == "Form reminder"

    @pytest.mark.parametrize("missing", ["reminder_title", "reminder_description", "reminder_date"])
    async def test_missing_required_field_is_conflict(
        self, client: AsyncClient, db_session: AsyncSession, actor_headers, missing: str
    ) -> None:
        payload = {key: value for key, value in VALID.items() if key != missing}

        response = await client.post(URL, json=payload, headers=actor_headers())

        assert response.status_code == 409
        assert response.json()["type"] == "validation-error"
        assert "field is required." in response.json()["detail"]
        assert await _count(db_session, Reminder) == 0

    async def test_all_messages_are_aggregated(self, client: AsyncClient, actor_headers) -> None:
        response = await client.post(URL, json={}, headers=actor_headers())

        assert response.json()["detail"] == (
            "<li>The title field is required.</li>"
            "<li>The description field is required.</li>"
            "<li>The date field is required.</li>"
        )

    async def test_tag_markup_is_rejected_before_persistence(
        self, client: AsyncClient, db_session: AsyncSession, actor_headers
    ) -> None:
        payload = {**VALID, "tags": ["fine", "<script>x</script>"]}

        response = await client.post(URL, json=payload, headers=actor_headers())

        assert response.status_code == 409
        assert response.json()["detail"] == "<li>Tags cannot contain HTML</li>"
        assert await _count(db_session, Reminder) == 0
        assert await _count(db_session, Tag) == 0

    async def test_invalid_date(self, client: AsyncClient, actor_headers) -> None:
        response = await client.post(URL, json={**VALID, "reminder_date": "someday"}, headers=actor_headers())

        assert response.status_code == 409
        assert response.json()["detail"] == "<li>The date is not a valid date.</li>"

    async def test_denied_create_is_forbidden(
        self, client: AsyncClient, db_session: AsyncSession, actor_headers
    ) -> None:
        headers = actor_headers(user_id=3, role="client", acl=["!crm.reminders.create"])

        response = await client.post(URL, json={}, headers=headers)

        assert response.status_code == 403
        assert await _count(db_session, Reminder) == 0


@pytest.mark.integration
class TestShow:
    async def test_owner_sees_reminder(self, client: AsyncClient, actor_headers, make_reminder) -> None:
        reminder = await make_reminder(creator_id=1)

        response = await client.get(f"{URL}/{reminder.id}", headers=actor_headers(user_id=1))

        assert response.status_code == 200
        assert response.json()["reminder"]["id"] == reminder.id

    async def test_missing_reminder_is_conflict(self, client: AsyncClient, actor_headers) -> None:
        response = await client.get(f"{URL}/404", headers=actor_headers())

        assert response.status_code == 409
        assert response.json()["type"] == "not-found"
        assert response.json()["detail"] == "The requested reminder could not be found"

    async def test_other_users_reminder_needs_grant(
        self, client: AsyncClient, actor_headers, make_reminder
    ) -> None:
        reminder = await make_reminder(creator_id=1)

        denied = await client.get(f"{URL}/{reminder.id}", headers=actor_headers(user_id=2))
        granted = await client.get(
            f"{URL}/{reminder.id}",
            headers=actor_headers(user_id=2, acl=[f"crm.reminders.{reminder.id}.view"]),
        )

        assert denied.status_code == 403
        assert denied.json()["detail"] == f"Permission denied for this item - #{reminder.id}"
        assert granted.status_code == 200


@pytest.mark.integration
class TestEdit:
    async def test_edit_is_idempotent(
        self, client: AsyncClient, db_session: AsyncSession, actor_headers, make_reminder
    ) -> None:
        from crm_service.features.tags.repository import TagRepository

        reminder = await make_reminder()
        await TagRepository().add(db_session, "reminder", reminder.id, ["a", "b"], creator_id=1)
        await db_session.commit()

        first = await client.get(f"{URL}/{reminder.id}/edit", headers=actor_headers())
        second = await client.get(f"{URL}/{reminder.id}/edit", headers=actor_headers())

        assert first.status_code == 200
        assert first.json() == second.json()
        assert [tag["title"] for tag in first.json()["tags"]] == ["a", "b"]
        assert first.json()["page"]["add_modal_action_method"] == "PUT"


@pytest.mark.integration
class TestUpdate:
    async def test_updates_fields_and_replaces_tags(
        self, client: AsyncClient, db_session: AsyncSession, actor_headers, make_reminder
    ) -> None:
        from crm_service.features.tags.repository import TagRepository

        reminder = await make_reminder()
        await TagRepository().add(db_session, "reminder", reminder.id, ["old"], creator_id=1)
        await db_session.commit()

        response = await client.put(
            f"{URL}/{reminder.id}",
            json={**VALID, "reminder_title": "Updated", "tags": ["new"]},
            headers=actor_headers(),
        )

        assert response.status_code == 200
        assert response.json()["reminders"][0]["title"] == "Updated"
        tags = await TagRepository().get_by_resource(db_session, "reminder", reminder.id)
        assert [tag.title for tag in tags] == ["new"]

    async def test_patch_is_accepted(self, client: AsyncClient, actor_headers, make_reminder) -> None:
        reminder = await make_reminder()

        response = await client.patch(f"{URL}/{reminder.id}", json=VALID, headers=actor_headers())

        assert response.status_code == 200

    async def test_invalid_update_leaves_reminder_unchanged(
        self, client: AsyncClient, db_session: AsyncSession, actor_headers, make_reminder
    ) -> None:
        reminder = await make_reminder(title="Keep me")

        response = await client.put(
            f"{URL}/{reminder.id}",
            json={**VALID, "reminder_description": ""},
            headers=actor_headers(),
        )

        assert response.status_code == 409
        await db_session.refresh(reminder)
        assert reminder.title == "Keep me"

    @pytest.mark.parametrize("missing", ["reminder_title", "reminder_description", "reminder_date"])
    async def test_update_missing_required_field(
        self, client: AsyncClient, db_session: AsyncSession, actor_headers, make_reminder, missing: str
    ) -> None:
        reminder = await make_reminder(title="Keep me", description="Keep this too")
        payload = {key: value for key, value in VALID.items() if key != missing}

        response = await client.put(f"{URL}/{reminder.id}", json=payload, headers=actor_headers())

        assert response.status_code == 409
        assert response.json()["type"] == "validation-error"
        await db_session.refresh(reminder)
        assert (reminder.title, reminder.description) == ("Keep me", "Keep this too")

    async def test_update_with_tag_markup_keeps_existing_tags(
        self, client: AsyncClient, db_session: AsyncSession, actor_headers, make_reminder
    ) -> None:
        from crm_service.features.tags.repository import TagRepository

        reminder = await make_reminder(title="Keep me")
        await TagRepository().add(db_session, "reminder", reminder.id, ["old", "older"], creator_id=1)
        await db_session.commit()

        response = await client.put(
            f"{URL}/{reminder.id}",
            json={**VALID, "reminder_title": "Changed", "tags": ["<script>x</script>"]},
            headers=actor_headers(),
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "<li>Tags cannot contain HTML</li>"
        await db_session.refresh(reminder)
        assert reminder.title == "Keep me"
        tags = await TagRepository().get_by_resource(db_session, "reminder", reminder.id)
        assert [tag.title for tag in tags] == ["old", "older"]

    async def test_update_without_permission(self, client: AsyncClient, actor_headers, make_reminder) -> None:
        reminder = await make_reminder(creator_id=1)

        response = await client.put(f"{URL}/{reminder.id}", json=VALID, headers=actor_headers(user_id=2))

        assert response.status_code == 403


@pytest.mark.integration
class TestDestroy:
    async def test_deletes_reminder_and_tags(
        self, client: AsyncClient, db_session: AsyncSession, actor_headers, make_reminder
    ) -> None:
        from crm_service.features.tags.repository import TagRepository

        reminder = await make_reminder(id=9)
        await TagRepository().add(db_session, "reminder", 9, ["a"], creator_id=1)
        await db_session.commit()

        response = await client.delete(f"{URL}/9", headers=actor_headers())

        assert response.status_code == 200
        assert response.json() == {"reminder_id": 9}
        assert await db_session.get(Reminder, reminder.id) is None
        assert await _count(db_session, Tag) == 0

    async def test_missing_reminder_is_conflict(self, client: AsyncClient, actor_headers) -> None:
        response = await client.delete(f"{URL}/77", headers=actor_headers())

        assert response.status_code == 409
        assert response.json()["detail"] == "One of the selected items no longer exists"

    async def test_other_users_reminder_is_forbidden(
        self, client: AsyncClient, db_session: AsyncSession, actor_headers, make_reminder
    ) -> None:
        await make_reminder(id=5, creator_id=1)

        response = await client.delete(f"{URL}/5", headers=actor_headers(user_id=2))

        assert response.status_code == 403
        assert response.json()["detail"] == "Permission denied for this item - #5"
        assert await db_session.get(Reminder, 5) is not None
