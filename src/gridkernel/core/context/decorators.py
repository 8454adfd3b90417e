"""
Decorators for tracking functions as operations of the ambient context.
"""

import functools
import inspect
from typing import Callable, Optional

from .accessor import get_current_context
from .operation import OperationTracker


def track_operation(operation: Optional[str] = None, metrics=None):
    """
    Decorator running the wrapped function inside an OperationTracker.

    The tracker is bound to the current ambient context, so the function
    must be called inside a scope (for example behind GridContextMiddleware
    or within use_context()). Works for plain and async functions.

    Args:
        operation: Name of the operation (defaults to function name)
        metrics: Optional metrics collector for the tracker
    """

    def decorator(func: Callable) -> Callable:
        op_name = operation or func.__name__

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                with OperationTracker(get_current_context(), op_name, metrics=metrics):
                    return await func(*args, **kwargs)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with OperationTracker(get_current_context(), op_name, metrics=metrics):
                return func(*args, **kwargs)

        return wrapper

    return decorator
