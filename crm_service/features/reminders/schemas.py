"""Pydantic schemas for the reminders feature."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from crm_service.core.validation import parse_datetime


class ReminderRead(BaseModel):
    """Reminder as handed to responses, with its transient permission flag."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    reminder_date: datetime
    resource_type: str | None = None
    resource_id: int | None = None
    creator_id: int
    status: str
    sent: bool
    created_at: datetime
    updated_at: datetime
    permission_edit_delete_reminder: bool = False


class ReminderInput(BaseModel):
    """Reminder fields taken from an already validated request body."""

    title: str = Field(validation_alias="reminder_title", max_length=250)
    description: str = Field(validation_alias="reminder_description")
    reminder_date: datetime = Field(validation_alias="reminder_date")
    tags: list[str] = Field(default_factory=list)

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    @field_validator("reminder_date", mode="before")
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return parse_datetime(v) or v

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v: Any) -> Any:
        return [] if v in (None, "") else v

    def to_values(self) -> dict[str, Any]:
        """Column values for create/update."""
        return self.model_dump(exclude={"tags"})


class ReminderFilters(BaseModel):
    """Query-string filters of the reminders list."""

    model_config = ConfigDict(frozen=True)

    resource_type: str | None = None
    resource_id: int | None = None
    search_query: str | None = None
