"""
Configuration-related exceptions.

All exceptions related to configuration parsing, validation, and management.
"""

from typing import Any, List, Optional

from .base import ExceptionContext, GridKernelError


class ConfigurationError(GridKernelError):
    """Base class for configuration-related errors."""

    def __init__(self, message: str, help_text: Optional[str] = None, error_code: str = "CONFIG_ERROR"):
        super().__init__(message, ExceptionContext(help_text=help_text, error_code=error_code))


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration contains invalid values."""

    def __init__(self, field: str, value: Any, expected: str):
        self.field = field
        self.value = value
        self.expected = expected
        message = f"Invalid configuration for '{field}': got {repr(value)}, expected {expected}"
        help_text = f"Check the configuration for '{field}' and ensure it matches: {expected}"
        super().__init__(message, help_text, error_code="CONFIG_INVALID")


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(self, field: str, config_location: Optional[str] = None):
        self.field = field
        message = f"Missing required configuration: '{field}'"
        help_text = f"Set '{field}' in the [node] table of the configuration file or via GRIDKERNEL_* environment variables"
        if config_location:
            help_text += f" (configuration file: {config_location})"
        super().__init__(message, help_text, error_code="CONFIG_MISSING")


class ConfigurationValidationError(ConfigurationError):
    """Raised when configuration fails validation."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        message = "Configuration validation failed:"
        for error in errors:
            message += f"\n  - {error}"
        help_text = "Check your configuration file and fix the validation errors listed above"
        super().__init__(message, help_text, error_code="CONFIG_VALIDATION")
