"""Modular Pydantic Settings v2 configuration.

Import settings via cached loaders:
    from crm_service.core.settings import get_app_settings

Or use unified settings for access to all domains:
    from crm_service.core.settings import get_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .i18n import I18nSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_auth_settings,
    get_db_settings,
    get_i18n_settings,
    get_logging_settings,
    get_pagination_settings,
)
from .logs import LoggingSettings
from .pagination import MAX_PAGE, PaginationSettings
from .unified import Settings, get_settings

__all__ = [
    "MAX_PAGE",
    "AppSettings",
    "AuthSettings",
    "DatabaseSettings",
    "I18nSettings",
    "LoggingSettings",
    "PaginationSettings",
    "Settings",
    "clear_all_caches",
    "get_app_settings",
    "get_auth_settings",
    "get_db_settings",
    "get_i18n_settings",
    "get_logging_settings",
    "get_pagination_settings",
    "get_settings",
]
