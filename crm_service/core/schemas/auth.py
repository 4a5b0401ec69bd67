"""Actor schema.

The actor is the authenticated CRM user forwarded by the upstream gateway.

ACL Pattern Syntax:
    - crm.<resource>.<id>.<action> (e.g. "crm.reminders.12.edit-delete")
    - Wildcards: * (single segment), # (any depth)
    - Negation: ! prefix for explicit deny
    - Reserved word: me (the actor's own id)
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Role = Literal["admin", "team", "client"]


class Actor(BaseModel):
    """Current user, injected into routes via ``Depends(get_current_actor)``."""

    user_id: int = Field(ge=1, description="User ID")
    role: Role = Field(default="team", description="CRM role")
    acl: tuple[str, ...] = Field(
        default=(),
        max_length=200,
        description="ACL patterns granted to the user (e.g. 'crm.tasks.*.delete')",
    )
    language: str | None = Field(default=None, max_length=10, description="Preferred locale")

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    @field_validator("acl", mode="after")
    @classmethod
    def validate_acl(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate ACL patterns are not empty."""
        if any(not pattern.strip() for pattern in v):
            msg = "ACL patterns cannot be empty or whitespace"
            raise ValueError(msg)
        return v

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


__all__ = ["Actor", "Role"]
