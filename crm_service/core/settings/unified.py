"""Unified settings composition for convenient access.

Usage:
    from crm_service.core.settings import get_settings

    settings = get_settings()
    print(settings.app.api_prefix)
    print(settings.db.url)

Each nested settings class still loads from its own environment prefix
(APP_, DB_, LOG_, ...). Code that needs a single domain should prefer the
individual get_*_settings() loaders.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .i18n import I18nSettings
from .logs import LoggingSettings
from .pagination import PaginationSettings


class Settings(BaseSettings):
    """Unified settings composing all domain settings."""

    model_config = SettingsConfigDict(frozen=True, extra="ignore")

    app: AppSettings = Field(default_factory=AppSettings)
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    i18n: I18nSettings = Field(default_factory=I18nSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the unified settings instance (cached)."""
    return Settings()
