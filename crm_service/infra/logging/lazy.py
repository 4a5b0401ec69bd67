"""Lazy evaluation support for logging.

DEBUG messages are often built from f-strings over query results; wrapping
them in a lambda means the string is only built when DEBUG is enabled.
"""

from __future__ import annotations

import logging
from typing import Any


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that evaluates callable messages and args on demand.

    Example:
        ```python
        logger = get_lazy_logger(__name__)
        logger.debug(lambda: f"db.search -> {len(items)}/{total} items")
        ```
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return

        if callable(msg):
            msg = msg()
        if args:
            args = tuple(arg() if callable(arg) else arg for arg in args)

        super().log(level, msg, *args, **kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)


def get_lazy_logger(name: str) -> LazyLoggerAdapter:
    """Return a LazyLoggerAdapter around ``logging.getLogger(name)``."""
    return LazyLoggerAdapter(logging.getLogger(name), {})


__all__ = ["LazyLoggerAdapter", "get_lazy_logger"]
