"""
gridkernel: distributed context propagation for Grid nodes.

Every request, job or message handled by a node runs inside one scoped
GridContext that records which logical operation the code executes on
behalf of. The context is initialized from the inbound transport, carried
ambiently through the call stack, and propagated to downstream calls so
logs and traces across nodes can be correlated.

Architecture Overview:
- core.context: GridContext lifecycle, ambient accessor, operation tracking
- core.mappers: HTTP, job and messaging transport mappers
- core.transport: Outbound binders
- core.health: Composite health aggregation
- core.config: TOML configuration with environment overrides
- logging, metrics: Structured logging and Prometheus metrics
- web: Starlette/FastAPI middleware
"""

__version__ = "0.1.0"

from .core.identity import NodeIdentity
from .core.context import (
    ChildContextFactory,
    ContextState,
    GridContext,
    OperationTracker,
    context_scope,
    get_current_context,
    track_operation,
    try_get_current_context,
    use_context,
)
from .core.health import HealthAggregator, HealthProbe, HealthStatus
from .core.mappers import (
    GridContextInitValues,
    JobContextMapper,
    MessageContextValues,
    extract_from_headers,
    extract_from_message,
    initialize_from_headers,
    initialize_from_message,
)
from .exceptions import GridKernelError

__all__ = [
    "NodeIdentity",
    "GridContext",
    "ContextState",
    "ChildContextFactory",
    "OperationTracker",
    "context_scope",
    "get_current_context",
    "try_get_current_context",
    "use_context",
    "track_operation",
    "HealthAggregator",
    "HealthProbe",
    "HealthStatus",
    "GridContextInitValues",
    "MessageContextValues",
    "JobContextMapper",
    "extract_from_headers",
    "extract_from_message",
    "initialize_from_headers",
    "initialize_from_message",
    "GridKernelError",
]
