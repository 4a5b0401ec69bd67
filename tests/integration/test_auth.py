"""Actor resolution and error rendering through the full app stack."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from crm_service.core.settings import AuthSettings, get_auth_settings

if TYPE_CHECKING:
    from fastapi import FastAPI
    from httpx import AsyncClient


@pytest.mark.integration
class TestActorHeaders:
    async def test_missing_headers_are_unauthorized(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/reminders", headers={"X-Request-ID": "req-123"})

        assert response.status_code == 401
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        assert body["type"] == "unauthorized"
        assert body["status"] == 401
        assert body["instance"] == "/api/v1/reminders"
        assert body["request_id"] == "req-123"
        assert response.headers["x-request-id"] == "req-123"

    async def test_generated_request_id_is_echoed(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/tasks")

        assert response.headers["x-request-id"]
        assert response.json()["request_id"] == response.headers["x-request-id"]

    async def test_malformed_user_id(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/tasks", headers={"X-User-Id": "abc"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid user headers"

    async def test_unknown_role_is_rejected(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/tasks", headers={"X-User-Id": "4", "X-User-Role": "root"})

        assert response.status_code == 401


@pytest.mark.integration
class TestMockPersona:
    @pytest.fixture
    def use_persona(self, app: FastAPI):
        def _use(name: str) -> None:
            settings = AuthSettings(mock_enabled=True, mock_user=name)
            app.dependency_overrides[get_auth_settings] = lambda: settings

        return _use

    async def test_persona_stands_in_for_headers(
        self, client: AsyncClient, use_persona, make_task
    ) -> None:
        use_persona("team")
        await make_task(creator_id=2)

        response = await client.get("/api/v1/tasks", headers={"Accept": "application/json"})

        assert response.status_code == 200
        assert response.json()["tasks"][0]["permission_delete_task"] is True

    async def test_client_persona_cannot_create_reminders(self, client: AsyncClient, use_persona) -> None:
        use_persona("client")

        response = await client.post("/api/v1/reminders", json={})

        assert response.status_code == 403

    async def test_headers_win_over_persona(self, client: AsyncClient, use_persona, make_task) -> None:
        use_persona("admin")
        await make_task(creator_id=2)

        response = await client.get("/api/v1/tasks", headers={"X-User-Id": "5"})

        assert response.json()["tasks"][0]["permission_delete_task"] is False
