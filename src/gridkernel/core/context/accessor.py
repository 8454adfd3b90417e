"""
Ambient access to the current GridContext.

The current context lives in a ContextVar, so it follows asyncio tasks and
contextvars.copy_context() rather than OS threads. Code that owns a scope
binds the context with use_context(); everything below it can read it with
get_current_context() without the context being passed explicitly.

Usage:
    from gridkernel.core.context import use_context, get_current_context

    with use_context(context):
        handle_request()

    def handle_request():
        correlation_id = get_current_context().correlation_id
"""

import contextvars
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from gridkernel.exceptions.context import ContextNotAvailableError

from ..clock import Clock
from ..identity import NodeIdentity
from ..ids import IdGenerator
from .grid_context import ContextState, GridContext

logger = logging.getLogger(__name__)

_current_context: contextvars.ContextVar[Optional[GridContext]] = contextvars.ContextVar(
    "gridkernel_current_context", default=None
)


def get_current_context() -> GridContext:
    """
    Get the GridContext bound to the current execution flow.

    Raises:
        ContextNotAvailableError: No context is bound
    """
    context = _current_context.get()
    if context is None:
        raise ContextNotAvailableError()
    return context


def try_get_current_context() -> Optional[GridContext]:
    """Get the bound GridContext, or None."""
    return _current_context.get()


def set_current_context(context: Optional[GridContext]) -> contextvars.Token:
    """Bind a context; pass the returned token to reset_current_context()."""
    return _current_context.set(context)


def reset_current_context(token: contextvars.Token) -> None:
    _current_context.reset(token)


@contextmanager
def use_context(context: GridContext) -> Iterator[GridContext]:
    """
    Bind a context for the duration of the block.

    The previously bound context (if any) is restored on exit. The context
    itself is left as it is; disposal stays with the scope owner.
    """
    token = _current_context.set(context)
    try:
        yield context
    finally:
        _current_context.reset(token)


@contextmanager
def context_scope(
    identity: NodeIdentity,
    *,
    clock: Optional[Clock] = None,
    id_generator: Optional[IdGenerator] = None,
) -> Iterator[GridContext]:
    """
    Own a fresh scope: create an uninitialized context, bind it, and
    mark it disposed when the block exits.

    Used by boundaries that are not HTTP requests, such as a job runner or a
    message consumer, which then initialize the context through a mapper.
    """
    context = GridContext.from_identity(identity, clock=clock, id_generator=id_generator)
    with use_context(context):
        try:
            yield context
        finally:
            context.mark_disposed()
            logger.debug(f"Context scope closed (node_id={identity.node_id})")


LOG_FIELDS = (
    "correlation_id",
    "operation_id",
    "causation_id",
    "tenant_id",
    "project_id",
    "node_id",
)


def context_log_fields(context: Optional[GridContext] = None) -> Dict[str, Any]:
    """
    Collect the correlation fields of a context for log output.

    Falls back to the ambient context. Returns an empty dict when there is
    no context or it is not currently readable, so logging never raises a
    lifecycle error.
    """
    if context is None:
        context = _current_context.get()
    if context is None or context.state is not ContextState.INITIALIZED:
        return {}
    fields = {}
    for name in LOG_FIELDS:
        value = getattr(context, name)
        if value is not None:
            fields[name] = value
    return fields
