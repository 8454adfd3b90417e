"""
Argument validation helpers shared by the context, mappers and tracker.
"""

from typing import Any, Optional

from gridkernel.exceptions.context import ContextValidationError


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings."""
    return value is None or not str(value).strip()


def require_text(value: Any, field: str) -> str:
    """Return value unchanged if it is a non-blank string, else raise."""
    if not isinstance(value, str):
        raise ContextValidationError(field, "must be a string")
    if not value.strip():
        raise ContextValidationError(field)
    return value


def optional_text(value: Optional[str]) -> Optional[str]:
    """Normalize blank strings to None."""
    if is_blank(value):
        return None
    return value


def truncate(value: Optional[str], max_length: int) -> Optional[str]:
    """Cap a string at max_length characters."""
    if value is None or len(value) <= max_length:
        return value
    return value[:max_length]
