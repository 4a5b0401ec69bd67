"""Actor resolution settings.

Authentication happens upstream (gateway / reverse proxy), which forwards the
authenticated user as request headers. A mock persona can stand in for the
headers in local development.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MOCK_PERSONAS: dict[str, dict[str, Any]] = {
    "admin": {
        "user_id": 1,
        "role": "admin",
        "acl": ["crm.#"],
        "language": "en",
    },
    "team": {
        "user_id": 2,
        "role": "team",
        "acl": ["crm.reminders.create"],
        "language": "en",
    },
    "client": {
        "user_id": 3,
        "role": "client",
        "acl": ["!crm.reminders.create"],
        "language": "en",
    },
}


class AuthSettings(BaseSettings):
    """Upstream-authentication header names and mock actor.

    Environment variables use AUTH_ prefix.
    Example: AUTH_MOCK_ENABLED=true, AUTH_MOCK_USER=team
    """

    user_id_header: str = Field(default="X-User-Id", min_length=1)
    role_header: str = Field(default="X-User-Role", min_length=1)
    acl_header: str = Field(default="X-User-Acl", min_length=1)
    language_header: str = Field(default="X-User-Language", min_length=1)

    mock_enabled: bool = Field(
        default=False,
        description="Use a mock persona when no user headers are sent (NEVER in production)",
    )
    mock_user: str = Field(default="admin", description="Persona used when mocking")
    mock_users: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Custom personas keyed by name (JSON object)",
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def validate_mock_user(self) -> AuthSettings:
        if self.mock_enabled and self.mock_user not in self._available_personas():
            available = ", ".join(sorted(self._available_personas()))
            msg = f"Mock persona '{self.mock_user}' not found. Available personas: {available}"
            raise ValueError(msg)
        return self

    def _available_personas(self) -> dict[str, dict[str, Any]]:
        personas = {name: deepcopy(config) for name, config in DEFAULT_MOCK_PERSONAS.items()}
        for name, config in self.mock_users.items():
            personas[name] = deepcopy(config)
        return personas

    def get_mock_user_config(self) -> dict[str, Any]:
        """Get the configured mock persona."""
        return self._available_personas()[self.mock_user]
