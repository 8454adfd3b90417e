"""
Logger adapter carrying GridContext correlation fields and keyword context.

Provides GridLogger, used by the operation tracker, the HTTP middleware and
the health aggregator.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

from gridkernel.core.context.accessor import context_log_fields
from gridkernel.core.context.grid_context import GridContext


class GridLogger:
    """Logger that stamps every record with the bound or ambient context's ids."""

    def __init__(self, name: str, context: Optional[GridContext] = None):
        self.logger = logging.getLogger(name)
        self.context = context
        self.extra_context: Dict[str, Any] = {}

    @property
    def name(self) -> str:
        return self.logger.name

    def _log(self, level: int, msg: str, exc_info: Any = None, **kwargs):
        """Internal logging method with correlation fields and context."""
        if not self.logger.isEnabledFor(level):
            return

        extra: Dict[str, Any] = dict(context_log_fields(self.context))
        if self.extra_context or kwargs:
            merged = self.extra_context.copy()
            merged.update(kwargs)
            extra["extra_context"] = merged

        self.logger.log(level, msg, exc_info=exc_info, extra=extra, stacklevel=3)

    def debug(self, msg: str, **kwargs):
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs):
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs):
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs):
        self._log(logging.ERROR, msg, **kwargs)

    def exception(self, msg: str, **kwargs):
        """Log error with the active exception's traceback."""
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, msg, **kwargs)

    def critical(self, msg: str, **kwargs):
        self._log(logging.CRITICAL, msg, **kwargs)

    def add_context(self, **kwargs):
        """Add persistent context to this logger."""
        self.extra_context.update(kwargs)

    def clear_context(self):
        self.extra_context.clear()

    def with_context(self, **kwargs) -> "GridLogger":
        """Create a copy of this logger with additional context."""
        new_logger = GridLogger(self.logger.name, self.context)
        new_logger.extra_context = self.extra_context.copy()
        new_logger.extra_context.update(kwargs)
        return new_logger

    def bind(self, context: GridContext) -> "GridLogger":
        """Create a copy of this logger bound to an explicit context."""
        new_logger = GridLogger(self.logger.name, context)
        new_logger.extra_context = self.extra_context.copy()
        return new_logger

    @contextmanager
    def temp_context(self, **kwargs):
        """Context manager for temporary keyword context."""
        original_context = self.extra_context.copy()
        self.extra_context.update(kwargs)
        try:
            yield self
        finally:
            self.extra_context = original_context


def get_logger(name: str, context: Optional[GridContext] = None) -> GridLogger:
    """Get a GridLogger instance."""
    return GridLogger(name, context)
