"""SQLAlchemy models for the tasks feature."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from crm_service.core.database import TimestampedBase


class Task(TimestampedBase):
    """Project task owned by its creator."""

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(250), nullable=False)
    description: Mapped[str | None] = mapped_column(Text(), nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    project_id: Mapped[int | None] = mapped_column(nullable=True, index=True)
    creator_id: Mapped[int] = mapped_column(nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="new")

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title!r}, project={self.project_id})>"
