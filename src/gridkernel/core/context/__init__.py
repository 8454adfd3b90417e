"""
Scoped GridContext and everything bound to its lifecycle.

Usage:
    from gridkernel.core.context import GridContext, use_context, OperationTracker

    context = GridContext("catalog-api", "main-studio", "production")
    context.initialize(correlation_id="01J9Z3...")
    with use_context(context), OperationTracker(context, "LoadCatalog"):
        ...
    context.mark_disposed()
"""

from .grid_context import ContextState, GridContext
from .accessor import (
    context_scope,
    get_current_context,
    reset_current_context,
    set_current_context,
    try_get_current_context,
    use_context,
)
from .operation import OperationTracker
from .factory import ChildContextFactory
from .decorators import track_operation
from .serializer import deserialize, serialize

__all__ = [
    'ContextState',
    'GridContext',
    'context_scope',
    'get_current_context',
    'reset_current_context',
    'set_current_context',
    'try_get_current_context',
    'use_context',
    'OperationTracker',
    'ChildContextFactory',
    'track_operation',
    'serialize',
    'deserialize',
]
