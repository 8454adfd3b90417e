"""
Operation tracking bound to a GridContext.

An OperationTracker times one unit of work (an HTTP request, a job run, an
outbound call) inside an initialized context, logs its start and its single
outcome, and optionally reports it to metrics.

Usage:
    with OperationTracker(context, "LoadCatalog") as operation:
        operation.add_metadata("catalog.size", len(items))
        load(items)
"""

from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Optional

from gridkernel.logging.loggers import GridLogger

from ..clock import Clock, get_default_clock
from ..ids import IdGenerator, get_default_id_generator
from ..validation import require_text
from .grid_context import GridContext


class OperationTracker:
    """
    Tracks the outcome and duration of one operation.

    Lifecycle: running, then exactly one of complete()/fail(). Later terminal
    calls are no-ops. dispose() completes an operation that is still running.
    """

    def __init__(
        self,
        context: GridContext,
        name: str,
        *,
        operation_id: Optional[str] = None,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        logger: Optional[GridLogger] = None,
        metadata: Optional[Mapping[str, Any]] = None,
        metrics=None,
    ):
        require_text(name, "name")
        # Reading the correlation id enforces an initialized, live context
        correlation_id = context.correlation_id

        self.context = context
        self.name = name
        self._clock = clock or get_default_clock()
        self.operation_id = operation_id or (id_generator or get_default_id_generator()).new_id()
        self._logger = logger or GridLogger(__name__, context)
        self._metrics = metrics
        self._metadata = dict(metadata) if metadata else {}

        self.started_at_utc: datetime = self._clock.utc_now()
        self.completed_at_utc: Optional[datetime] = None
        self.is_success: Optional[bool] = None
        self.error_message: Optional[str] = None
        self._disposed = False

        self._logger.info(
            f"Operation {name} started (correlation_id={correlation_id}, "
            f"operation_id={self.operation_id}, node_id={context.node_id})",
            operation=name,
        )

    @property
    def correlation_id(self) -> str:
        return self.context.correlation_id

    @property
    def causation_id(self) -> Optional[str]:
        return self.context.causation_id

    @property
    def tenant_id(self) -> Optional[str]:
        return self.context.tenant_id

    @property
    def project_id(self) -> Optional[str]:
        return self.context.project_id

    @property
    def metadata(self) -> Mapping[str, Any]:
        return MappingProxyType(self._metadata)

    @property
    def is_running(self) -> bool:
        return self.is_success is None

    @property
    def duration_ms(self) -> float:
        """Elapsed milliseconds, up to completion or up to now while running."""
        end = self.completed_at_utc or self._clock.utc_now()
        return (end - self.started_at_utc).total_seconds() * 1000

    def complete(self) -> None:
        """Mark the operation successful. No-op if already finished."""
        if self.is_success is not None:
            return

        self.is_success = True
        self.completed_at_utc = self._clock.utc_now()
        duration_ms = self.duration_ms

        self._logger.info(
            f"Operation {self.name} completed successfully in {duration_ms:.2f}ms "
            f"(correlation_id={self.context.correlation_id}, operation_id={self.operation_id})",
            operation=self.name,
            duration=duration_ms,
            status="success",
        )
        if self._metrics is not None:
            self._metrics.record_operation(self.name, duration_ms / 1000, True)

    def fail(self, message: str, exc: Optional[BaseException] = None) -> None:
        """
        Mark the operation failed. No-op if already finished.

        Args:
            message: Non-blank description of the failure
            exc: Exception that caused the failure, logged with its traceback
        """
        require_text(message, "message")
        if self.is_success is not None:
            return

        self.is_success = False
        self.completed_at_utc = self._clock.utc_now()
        self.error_message = message
        duration_ms = self.duration_ms

        exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else None
        self._logger.error(
            f"Operation {self.name} failed after {duration_ms:.2f}ms: {message} "
            f"(correlation_id={self.context.correlation_id}, operation_id={self.operation_id})",
            exc_info=exc_info,
            operation=self.name,
            duration=duration_ms,
            status="failed",
            error_type=type(exc).__name__ if exc is not None else None,
        )
        if self._metrics is not None:
            self._metrics.record_operation(self.name, duration_ms / 1000, False)

    def add_metadata(self, key: str, value: Any) -> None:
        require_text(key, "key")
        self._metadata[key] = value

    def dispose(self) -> None:
        """Release the tracker, completing it if still running. Idempotent."""
        if self._disposed:
            return
        if self.is_success is None:
            self.complete()
        self._disposed = True

    def __enter__(self) -> "OperationTracker":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_val is not None:
                self.fail(str(exc_val).strip() or exc_type.__name__, exc_val)
        finally:
            self.dispose()
        return False

    def __repr__(self) -> str:
        state = "running" if self.is_success is None else ("succeeded" if self.is_success else "failed")
        return f"OperationTracker(name={self.name!r}, operation_id={self.operation_id!r}, {state})"
