"""Application lifespan management.

Startup: logging, then the database (connectivity check and optional table
creation). Shutdown runs in reverse order.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from crm_service.core.settings import get_app_settings, get_db_settings, get_logging_settings
from crm_service.infra.logging import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start and stop application services."""
    # Session module builds the engine at import time
    from crm_service.infra.database import close_database, init_database

    app_settings = get_app_settings()
    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={
            "service": app_settings.service_name,
            "version": app_settings.version,
            "environment": app_settings.environment,
        },
    )

    await init_database()
    logger.info("Database ready", extra={"create_tables": get_db_settings().create_tables})

    try:
        yield
    finally:
        logger.info("Application shutting down", extra={"service": app_settings.service_name})
        await close_database()
