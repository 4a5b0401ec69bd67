"""SQLAlchemy models for the tags feature."""

from __future__ import annotations

from typing import Literal

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from crm_service.core.database import TimestampedBase

TagVisibility = Literal["user", "public"]


class Tag(TimestampedBase):
    """One tag attached to one resource instance.

    Tags are keyed by ``resource_type`` + ``resource_id`` rather than by
    foreign key, so any resource can carry them. Rows with an empty
    resource_id are vocabulary entries not attached to anything.
    """

    __tablename__ = "tags"
    __table_args__ = (Index("ix_tags_resource", "resource_type", "resource_id"),)

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    resource_type: Mapped[str] = mapped_column(String(50), nullable=False)
    resource_id: Mapped[int | None] = mapped_column(nullable=True)
    creator_id: Mapped[int | None] = mapped_column(nullable=True)
    visibility: Mapped[str] = mapped_column(String(10), nullable=False, default="user")

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, title={self.title!r}, {self.resource_type}#{self.resource_id})>"
