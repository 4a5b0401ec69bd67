"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from crm_service.core.settings import get_app_settings
from crm_service.features.reminders.router import router as reminders_router
from crm_service.features.tasks.router import router as tasks_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from crm_service.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
    """
    app_settings = app_settings or get_app_settings()
    api_prefix = app_settings.api_prefix

    app.include_router(reminders_router, prefix=api_prefix)
    app.include_router(tasks_router, prefix=api_prefix)

    logger.info("Routers configured", extra={"api_prefix": api_prefix})
