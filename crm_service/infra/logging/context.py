"""Context management for structured logging.

Request-scoped fields (request id, user id, locale) are stored in a
ContextVar and copied onto every LogRecord by ContextInjectingFilter, so
handlers and formatters see them without explicit ``extra=`` arguments.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        ```python
        set_log_context(request_id="abc-123")
        logger.info("Processing request")  # record carries request_id
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def clear_log_context() -> None:
    """Drop every field from the current logging context."""
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Copy the contextvars log context onto each LogRecord.

    Attached to the root handlers through dictConfig:

        "filters": {
            "context": {"()": "crm_service.infra.logging.context.ContextInjectingFilter"}
        }
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            # Explicit extra= values win over context
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


__all__ = [
    "ContextInjectingFilter",
    "clear_log_context",
    "set_log_context",
]
