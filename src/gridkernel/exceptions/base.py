"""
Base exception classes for gridkernel.

Provides the foundational GridKernelError class that all other exceptions inherit from.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass
class ExceptionContext:
    """Context information for gridkernel exceptions."""

    help_text: Optional[str] = None
    error_code: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)
    correlation_id: Optional[str] = None


def _ambient_correlation_id() -> Optional[str]:
    """Return the correlation id of the current readable context, if any."""
    from gridkernel.core.context.accessor import try_get_current_context

    current = try_get_current_context()
    if current is None or not current.is_initialized or current.is_disposed:
        return None
    return current.correlation_id


class GridKernelError(Exception):
    """Base exception for all gridkernel errors.

    Attributes:
        message: The error message
        help_text: Optional guidance on how to fix the cause
        error_code: Stable code for programmatic handling
        correlation_id: Correlation id of the operation that raised, when known
        context: Additional context information
    """

    def __init__(self, message: str, context: Optional[ExceptionContext] = None):
        self.message = message

        if context is not None:
            self.help_text = context.help_text
            self.error_code = context.error_code
            self.context = dict(context.context)
            self.correlation_id = context.correlation_id or _ambient_correlation_id()
        else:
            self.help_text = None
            self.error_code = None
            self.context = {}
            self.correlation_id = _ambient_correlation_id()

        self.timestamp = datetime.now(timezone.utc)
        super().__init__(message)

    def __str__(self) -> str:
        result = self.message

        if self.help_text:
            result += f"\n\nHelp: {self.help_text}"

        if self.context:
            context_items = [
                f"{k}: {v}" for k, v in self.context.items() if v is not None
            ]
            if context_items:
                result += f"\n\nContext: {', '.join(context_items)}"

        if self.correlation_id:
            result += f"\n\nCorrelation ID: {self.correlation_id}"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "correlation_id": self.correlation_id,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context,
            "help_text": self.help_text,
        }

    def add_context(self, **kwargs) -> "GridKernelError":
        """Add additional context to the exception."""
        self.context.update(kwargs)
        return self
