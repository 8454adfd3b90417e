"""
gridkernel Exception Hierarchy

Exception Hierarchy:
    GridKernelError (base)
    ├── ContextLifecycleError
    │   ├── ContextNotInitializedError
    │   ├── ContextAlreadyInitializedError
    │   ├── ContextDisposedError
    │   └── ContextNotAvailableError
    ├── ContextValidationError
    └── ConfigurationError
        ├── InvalidConfigurationError
        ├── MissingConfigurationError
        └── ConfigurationValidationError

Lifecycle errors are programmer errors and propagate unmodified. Validation
errors are raised immediately for blank or missing required arguments.
Transport parsing never raises for malformed input; it degrades to defaults.
"""

from .base import ExceptionContext, GridKernelError

# Configuration exceptions
from .config import (
    ConfigurationError,
    ConfigurationValidationError,
    InvalidConfigurationError,
    MissingConfigurationError,
)

# Context exceptions
from .context import (
    ContextAlreadyInitializedError,
    ContextDisposedError,
    ContextLifecycleError,
    ContextNotAvailableError,
    ContextNotInitializedError,
    ContextValidationError,
)

__all__ = [
    # Base
    "GridKernelError",
    "ExceptionContext",
    # Context
    "ContextLifecycleError",
    "ContextNotInitializedError",
    "ContextAlreadyInitializedError",
    "ContextDisposedError",
    "ContextNotAvailableError",
    "ContextValidationError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "ConfigurationValidationError",
]
