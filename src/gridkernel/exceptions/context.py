"""
Context lifecycle and validation exceptions.

Lifecycle errors signal programmer misuse (reading a context before the
boundary initialized it, initializing twice, holding a context past the end
of its scope). They are meant to be fixed at development time and are never
recovered from at runtime. Validation errors signal a caller passing blank
or missing required values.
"""

from typing import Optional

from .base import ExceptionContext, GridKernelError


class ContextLifecycleError(GridKernelError):
    """Base class for misuse of a GridContext lifecycle."""
    pass


class ContextNotInitializedError(ContextLifecycleError, RuntimeError):
    """Raised when a context property is read before initialization."""

    def __init__(self, attribute: Optional[str] = None):
        self.attribute = attribute
        message = "GridContext has not been initialized."
        if attribute:
            message = f"GridContext has not been initialized (while reading '{attribute}')."
        help_text = (
            "Ensure GridContextMiddleware is registered on the application, or that a "
            "transport mapper initializes the context before its properties are read. "
            "Background jobs and message handlers must initialize their own context "
            "through the job or messaging mappers."
        )
        super().__init__(
            message,
            ExceptionContext(help_text=help_text, error_code="CONTEXT_NOT_INITIALIZED"),
        )


class ContextAlreadyInitializedError(ContextLifecycleError, RuntimeError):
    """Raised when initialize() is called on an already initialized context."""

    def __init__(self):
        message = "GridContext has already been initialized."
        help_text = (
            "A GridContext can only be initialized once per scope. Ensure the "
            "boundary middleware or mapper runs exactly once for each request, job "
            "or message."
        )
        super().__init__(
            message,
            ExceptionContext(help_text=help_text, error_code="CONTEXT_ALREADY_INITIALIZED"),
        )


class ContextDisposedError(ContextLifecycleError, RuntimeError):
    """Raised when a context is used after its owning scope has ended."""

    def __init__(self, attribute: Optional[str] = None):
        self.attribute = attribute
        message = "GridContext has been disposed because its owning scope has ended."
        if attribute:
            message = (
                f"GridContext has been disposed because its owning scope has ended "
                f"(while reading '{attribute}')."
            )
        help_text = (
            "Context cannot be used after scope disposal. Fire-and-forget work that "
            "relies on the ambient context is not supported; background work must "
            "create and own its context, or derive a child context before the scope ends."
        )
        super().__init__(
            message,
            ExceptionContext(help_text=help_text, error_code="CONTEXT_DISPOSED"),
        )


class ContextNotAvailableError(ContextLifecycleError, LookupError):
    """Raised when no GridContext is bound to the current execution flow."""

    def __init__(self):
        message = "No GridContext is bound to the current execution context."
        help_text = (
            "For HTTP requests register GridContextMiddleware. For background work "
            "wrap the operation in use_context() with a context created by a mapper."
        )
        super().__init__(
            message,
            ExceptionContext(help_text=help_text, error_code="CONTEXT_NOT_AVAILABLE"),
        )


class ContextValidationError(GridKernelError, ValueError):
    """Raised when a required argument is missing or blank."""

    def __init__(self, field: str, reason: str = "must be a non-blank string"):
        self.field = field
        self.reason = reason
        message = f"Invalid value for '{field}': {reason}"
        super().__init__(
            message,
            ExceptionContext(error_code="CONTEXT_VALIDATION", context={"field": field}),
        )
