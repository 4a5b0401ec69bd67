"""SQLAlchemy models for the reminders feature."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from crm_service.core.database import TimestampedBase


class Reminder(TimestampedBase):
    """Reminder owned by its creator, optionally attached to another resource.

    ``resource_type`` / ``resource_id`` point at the record the reminder
    belongs to (a client, a project, ...); both are empty for standalone
    reminders.
    """

    __tablename__ = "reminders"
    __table_args__ = (Index("ix_reminders_resource", "resource_type", "resource_id"),)

    title: Mapped[str] = mapped_column(String(250), nullable=False)
    description: Mapped[str] = mapped_column(Text(), nullable=False)
    reminder_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    resource_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    resource_id: Mapped[int | None] = mapped_column(nullable=True)
    creator_id: Mapped[int] = mapped_column(nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    sent: Mapped[bool] = mapped_column(Boolean(), nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Reminder(id={self.id}, title={self.title!r}, date={self.reminder_date})>"
