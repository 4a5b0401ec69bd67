"""FastAPI application factory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crm_service.app.exception_handlers import configure_exception_handlers
from crm_service.app.lifespan import lifespan
from crm_service.app.middleware import I18nMiddleware, RequestIDMiddleware
from crm_service.app.router import setup_routers
from crm_service.core.settings import get_settings

if TYPE_CHECKING:
    from crm_service.core.settings import Settings

logger = logging.getLogger(__name__)


def configure_middleware(app: FastAPI, settings: Settings) -> None:
    """Add middleware; the last one added runs first.

    Order of execution: RequestID -> I18n -> CORS -> routes.
    """
    app_settings = settings.app
    i18n_settings = settings.i18n

    cors_origins = app_settings.cors_origins or ["*"]
    logger.info("Configuring CORS", extra={"origins": cors_origins})
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        # Wildcard origins cannot be combined with credentials
        allow_credentials=app_settings.cors_allow_credentials and cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )

    app.add_middleware(
        I18nMiddleware,
        default_locale=i18n_settings.default_locale,
        supported_locales=list(i18n_settings.supported_locales),
        query_param=i18n_settings.query_param,
        use_accept_language=i18n_settings.use_accept_language,
    )

    app.add_middleware(RequestIDMiddleware)


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Uses unified settings from core.settings for all configuration.
    Settings are loaded once and cached via LRU cache.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    app_settings = settings.app

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        docs_url=app_settings.docs_url,
        redoc_url=None,
        openapi_url=None if app_settings.disable_docs else "/openapi.json",
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    configure_exception_handlers(app)
    configure_middleware(app, settings)
    setup_routers(app, app_settings)

    return app
