"""Pydantic schemas for the tasks feature."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    due_date: datetime | None = None
    project_id: int | None = None
    creator_id: int
    status: str
    created_at: datetime
    updated_at: datetime
    permission_delete_task: bool = False
