"""Database settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """SQLAlchemy async engine configuration.

    Environment variables use DB_ prefix.
    Example: DB_URL="sqlite+aiosqlite:///./crm.db", DB_ECHO=true
    """

    url: str = Field(
        default="sqlite+aiosqlite:///./crm.db",
        min_length=1,
        description="SQLAlchemy async database URL",
    )
    echo: bool = Field(default=False, description="Echo SQL statements")
    create_tables: bool = Field(
        default=True,
        description="Create missing tables on startup (use Alembic in production)",
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")
