"""Pydantic schemas for the tags feature."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TagRead(BaseModel):
    """Tag attached to a resource."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    resource_type: str
    resource_id: int | None = None
    visibility: str = "user"
