"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the
process.

Usage:
    from crm_service.core.settings.loader import get_app_settings

    settings = get_app_settings()  # First call: loads and validates
    settings = get_app_settings()  # Subsequent calls: cached instance

Testing:
    clear_all_caches() forces a reload after monkeypatching the environment.
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .i18n import I18nSettings
from .logs import LoggingSettings
from .pagination import PaginationSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings."""
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_i18n_settings() -> I18nSettings:
    """Get cached i18n settings."""
    return I18nSettings()


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Get cached pagination settings."""
    return PaginationSettings()


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Get cached actor-resolution settings."""
    return AuthSettings()


def clear_all_caches() -> None:
    """Clear all settings caches (tests and hot reload)."""
    from .unified import get_settings

    get_app_settings.cache_clear()
    get_db_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_i18n_settings.cache_clear()
    get_pagination_settings.cache_clear()
    get_auth_settings.cache_clear()
    get_settings.cache_clear()
