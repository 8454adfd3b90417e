"""
Scoped Grid context.

GridContext is the mutable, per-operation record of which logical request,
job or message the current code runs on behalf of. Exactly one instance is
owned by each scope (one HTTP request, one job execution, one handled
message). The boundary that owns the scope creates the context with the
node identity, initializes it exactly once from the inbound transport, and
marks it disposed when the scope ends.

Lifecycle:

    UNINITIALIZED --initialize()--> INITIALIZED --mark_disposed()--> DISPOSED
          \\___________________mark_disposed()___________________/

Reading request data before initialization, initializing twice, or touching
the context after disposal raises a ContextLifecycleError. Disposal is
checked first because it is the more specific and more recent fact.
"""

import threading
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from gridkernel.exceptions.context import (
    ContextAlreadyInitializedError,
    ContextDisposedError,
    ContextNotInitializedError,
)

from ..clock import Clock, get_default_clock
from ..identity import NodeIdentity
from ..ids import IdGenerator, get_default_id_generator
from ..validation import optional_text, require_text


class ContextState(str, Enum):
    """Lifecycle states of a GridContext."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    DISPOSED = "disposed"


class GridContext:
    """
    Per-scope correlation and identity container.

    Node identity (node_id, studio_id, environment) is fixed at construction
    and readable until disposal. Everything request-specific arrives through
    initialize() and is guarded by the lifecycle state.
    """

    def __init__(
        self,
        node_id: str,
        studio_id: str,
        environment: str,
        *,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
    ):
        self._identity = NodeIdentity(node_id, studio_id, environment)
        self._clock = clock or get_default_clock()
        self._id_generator = id_generator or get_default_id_generator()
        self._state = ContextState.UNINITIALIZED

        self._correlation_id: Optional[str] = None
        self._operation_id: Optional[str] = None
        self._causation_id: Optional[str] = None
        self._tenant_id: Optional[str] = None
        self._project_id: Optional[str] = None
        self._baggage: Dict[str, str] = {}
        self._cancellation: Optional[threading.Event] = None
        self._created_at_utc: Optional[datetime] = None

    @classmethod
    def from_identity(
        cls,
        identity: NodeIdentity,
        *,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> "GridContext":
        """Create an uninitialized context for the given node identity."""
        return cls(
            identity.node_id,
            identity.studio_id,
            identity.environment,
            clock=clock,
            id_generator=id_generator,
        )

    # Lifecycle flags are always readable

    @property
    def state(self) -> ContextState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        """True once initialize() succeeded, including after disposal."""
        return self._correlation_id is not None

    @property
    def is_disposed(self) -> bool:
        return self._state is ContextState.DISPOSED

    def _ensure_not_disposed(self, attribute: Optional[str] = None) -> None:
        if self._state is ContextState.DISPOSED:
            raise ContextDisposedError(attribute)

    def _ensure_readable(self, attribute: Optional[str] = None) -> None:
        self._ensure_not_disposed(attribute)
        if self._state is ContextState.UNINITIALIZED:
            raise ContextNotInitializedError(attribute)

    # Identity

    @property
    def identity(self) -> NodeIdentity:
        self._ensure_not_disposed("identity")
        return self._identity

    @property
    def node_id(self) -> str:
        self._ensure_not_disposed("node_id")
        return self._identity.node_id

    @property
    def studio_id(self) -> str:
        self._ensure_not_disposed("studio_id")
        return self._identity.studio_id

    @property
    def environment(self) -> str:
        self._ensure_not_disposed("environment")
        return self._identity.environment

    # Request data

    @property
    def correlation_id(self) -> str:
        self._ensure_readable("correlation_id")
        return self._correlation_id

    @property
    def operation_id(self) -> str:
        self._ensure_readable("operation_id")
        return self._operation_id

    @property
    def causation_id(self) -> Optional[str]:
        self._ensure_readable("causation_id")
        return self._causation_id

    @property
    def tenant_id(self) -> Optional[str]:
        self._ensure_readable("tenant_id")
        return self._tenant_id

    @property
    def project_id(self) -> Optional[str]:
        self._ensure_readable("project_id")
        return self._project_id

    @property
    def baggage(self) -> Mapping[str, str]:
        """Read-only view of the baggage; use add_baggage() to change it."""
        self._ensure_readable("baggage")
        return MappingProxyType(self._baggage)

    @property
    def cancellation(self) -> threading.Event:
        self._ensure_readable("cancellation")
        return self._cancellation

    @property
    def created_at_utc(self) -> datetime:
        self._ensure_readable("created_at_utc")
        return self._created_at_utc

    @property
    def is_cancellation_requested(self) -> bool:
        return self.cancellation.is_set()

    def initialize(
        self,
        correlation_id: str,
        causation_id: Optional[str] = None,
        tenant_id: Optional[str] = None,
        project_id: Optional[str] = None,
        baggage: Optional[Mapping[str, str]] = None,
        cancellation: Optional[threading.Event] = None,
        *,
        created_at_utc: Optional[datetime] = None,
    ) -> "GridContext":
        """
        Initialize the context with request-specific data.

        Args:
            correlation_id: Trace identifier shared by every hop of the operation
            causation_id: Operation id of the hop that caused this one
            tenant_id: Optional tenant routing identity
            project_id: Optional project routing identity
            baggage: Key/value pairs to carry; the mapping is copied
            cancellation: Cooperative cancellation signal of the owning scope
            created_at_utc: Creation time to keep, for a context restored from
                a snapshot; defaults to the clock's current time

        Returns:
            self, for chaining

        Raises:
            ContextDisposedError: The owning scope already ended
            ContextAlreadyInitializedError: initialize() already succeeded
            ContextValidationError: correlation_id is blank
        """
        self._ensure_not_disposed()
        if self._state is ContextState.INITIALIZED:
            raise ContextAlreadyInitializedError()

        require_text(correlation_id, "correlation_id")

        self._correlation_id = correlation_id
        self._operation_id = self._id_generator.new_id()
        self._causation_id = optional_text(causation_id)
        self._tenant_id = optional_text(tenant_id)
        self._project_id = optional_text(project_id)
        self._cancellation = cancellation if cancellation is not None else threading.Event()
        self._created_at_utc = created_at_utc or self._clock.utc_now()
        if baggage:
            self._baggage.update(baggage)

        self._state = ContextState.INITIALIZED
        return self

    def add_baggage(self, key: str, value: str) -> None:
        """Insert or replace one baggage entry."""
        require_text(key, "key")
        require_text(value, "value")
        self._ensure_readable("baggage")
        self._baggage[key] = value

    def mark_disposed(self) -> None:
        """
        Mark the context as disposed. Idempotent.

        Only the code that owns the scope boundary calls this, after the
        operation has fully unwound.
        """
        self._state = ContextState.DISPOSED

    def create_child_context(
        self,
        node_id: Optional[str] = None,
        *,
        operation_id: Optional[str] = None,
        extra_baggage: Optional[Mapping[str, str]] = None,
    ) -> "GridContext":
        """
        Derive an initialized context for an outbound call.

        The child keeps the correlation id, tenant, project, baggage (copied)
        and cancellation signal. It gets a fresh operation id, and its
        causation id is this context's operation id unless the caller passes
        the id of a more specific outbound operation.

        Args:
            node_id: Target node; defaults to this context's node
            operation_id: Id of the outbound operation causing the call;
                defaults to this context's operation_id
            extra_baggage: Entries added on top of the copied baggage
        """
        self._ensure_readable("create_child_context")

        merged_baggage = dict(self._baggage)
        if extra_baggage:
            merged_baggage.update(extra_baggage)

        child = GridContext(
            node_id or self._identity.node_id,
            self._identity.studio_id,
            self._identity.environment,
            clock=self._clock,
            id_generator=self._id_generator,
        )
        child.initialize(
            correlation_id=self._correlation_id,
            causation_id=operation_id or self._operation_id,
            tenant_id=self._tenant_id,
            project_id=self._project_id,
            baggage=merged_baggage,
            cancellation=self._cancellation,
        )
        return child

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of identity and correlation fields."""
        self._ensure_readable("to_dict")
        return {
            "correlation_id": self._correlation_id,
            "operation_id": self._operation_id,
            "causation_id": self._causation_id,
            "tenant_id": self._tenant_id,
            "project_id": self._project_id,
            "node_id": self._identity.node_id,
            "studio_id": self._identity.studio_id,
            "environment": self._identity.environment,
            "created_at_utc": self._created_at_utc.isoformat(),
            "baggage": dict(self._baggage),
        }

    def __repr__(self) -> str:
        if self._state is ContextState.INITIALIZED:
            return (
                f"GridContext(node_id={self._identity.node_id!r}, "
                f"correlation_id={self._correlation_id!r}, "
                f"operation_id={self._operation_id!r})"
            )
        return f"GridContext(node_id={self._identity.node_id!r}, state={self._state.value})"
