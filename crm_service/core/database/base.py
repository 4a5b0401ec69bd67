"""Declarative base and composable model mixins.

Examples:
    class Reminder(TimestampedBase):
        __tablename__ = "reminders"
        title: Mapped[str] = mapped_column(String(250))
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

# Predictable constraint names for Alembic autogenerate
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base with a consistent constraint naming convention."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class IntegerPKMixin:
    """Integer auto-increment primary key."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)


class TimestampMixin:
    """created_at / updated_at tracking.

    Python-side defaults keep tests on SQLite deterministic; server defaults
    cover rows inserted outside the ORM.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


class TimestampedBase(Base, IntegerPKMixin, TimestampMixin):
    """Abstract base for integer-keyed, timestamped tables."""

    __abstract__ = True


__all__ = ["NAMING_CONVENTION", "Base", "IntegerPKMixin", "TimestampMixin", "TimestampedBase"]
