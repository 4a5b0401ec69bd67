"""Logging infrastructure.

Basic usage:
    from crm_service.infra.logging import get_lazy_logger, set_log_context
    import logging

    logger = logging.getLogger(__name__)
    lazy_logger = get_lazy_logger(__name__)

    set_log_context(request_id="abc-123", user_id=42)
    logger.info("Reminder created")  # carries request_id and user_id
    lazy_logger.debug(lambda: f"tags: {sorted(titles)}")  # only built at DEBUG
"""

from crm_service.infra.logging.config import configure_logging, setup_logging
from crm_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    set_log_context,
)
from crm_service.infra.logging.formatters import JSONFormatter
from crm_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "set_log_context",
    "setup_logging",
]
