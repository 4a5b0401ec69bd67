"""Logging configuration.

Features:
- dictConfig for the whole tree (formatters, filters, handlers)
- JSONL output for log shippers, plain text for local development
- Context injection (request_id, user_id, locale) on every handler
- Optional rotating file handler
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from crm_service.core.settings.logs import LoggingSettings

_LOGGING_INITIALIZED = False


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from crm_service.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    include_process_info: bool = False,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    capture_warnings: bool = True,
) -> None:
    """Configure the root logger through logging.config.dictConfig.

    Args:
        log_level: Root logger level.
        file_path: Path of the rotating JSONL file, or None to disable it.
        json_logs: Use the JSONL formatter for the console as well.
        console_enabled: Attach a stderr handler.
        include_context: Attach ContextInjectingFilter to every handler.
        include_process_info: Include process id/name in JSON records.
        file_max_bytes: Max file size before rotation.
        file_backup_count: Number of rotated files to keep.
        capture_warnings: Route ``warnings`` through logging.
    """
    path = Path(file_path) if file_path else None
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)

    handler_filters = ["context"] if include_context else []
    handlers: dict[str, Any] = {}

    if console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "json" if json_logs else "text",
            "filters": handler_filters,
            "stream": "ext://sys.stderr",
        }

    if path is not None:
        # Files are always JSONL
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json",
            "filters": handler_filters,
            "filename": str(path),
            "maxBytes": file_max_bytes,
            "backupCount": file_backup_count,
            "encoding": "utf-8",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": _build_formatters_config(include_process_info),
            "filters": {
                "context": {"()": "crm_service.infra.logging.context.ContextInjectingFilter"},
            },
            "handlers": handlers,
            "root": {"level": log_level.upper(), "handlers": list(handlers)},
            "loggers": {
                # SQL echo is controlled by DB_ECHO, not by the root level
                "sqlalchemy.engine": {"level": "WARNING"},
                "aiosqlite": {"level": "WARNING"},
            },
        }
    )
    logging.captureWarnings(capture_warnings)


def _build_formatters_config(include_process_info: bool) -> dict[str, Any]:
    return {
        "json": {
            "()": "crm_service.infra.logging.formatters.JSONFormatter",
            "static": {"service": "crm-service"},
            "include_process_info": include_process_info,
        },
        "text": {
            "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    }


__all__ = ["configure_logging", "setup_logging"]
