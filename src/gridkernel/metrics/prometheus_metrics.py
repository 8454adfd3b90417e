"""
Prometheus metrics collection for gridkernel.

Counts operations tracked by OperationTracker, context initializations per
transport, lifecycle errors and health probe outcomes. Each GridMetrics owns
its CollectorRegistry, so several instances (one per test, or one per
embedded node) never collide on metric names.
"""

import logging
import threading
from typing import Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
    start_http_server,
)

logger = logging.getLogger(__name__)


class GridMetrics:
    """Prometheus metrics collection for gridkernel"""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        # Operation metrics
        self.operations_total = Counter(
            'gridkernel_operations_total',
            'Total tracked operations',
            ['operation', 'status'],
            registry=self.registry,
        )

        self.operation_duration = Histogram(
            'gridkernel_operation_duration_seconds',
            'Tracked operation duration in seconds',
            ['operation'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0],
            registry=self.registry,
        )

        # Context metrics
        self.contexts_initialized_total = Counter(
            'gridkernel_contexts_initialized_total',
            'Contexts initialized from an inbound transport',
            ['transport'],
            registry=self.registry,
        )

        self.context_errors_total = Counter(
            'gridkernel_context_errors_total',
            'Context lifecycle errors by type',
            ['error_type'],
            registry=self.registry,
        )

        # Health metrics
        self.health_checks_total = Counter(
            'gridkernel_health_checks_total',
            'Health probe results',
            ['probe', 'status'],
            registry=self.registry,
        )

        self.health_status = Gauge(
            'gridkernel_health_status',
            'Last health status per probe (0=healthy, 1=degraded, 2=unhealthy)',
            ['probe'],
            registry=self.registry,
        )

        self.node_info = Info(
            'gridkernel_node',
            'Node identity',
            registry=self.registry,
        )

        self._http_server = None

    def set_node_info(self, node_id: str, studio_id: str, environment: str, version: str = "unknown"):
        self.node_info.info({
            'node_id': node_id,
            'studio_id': studio_id,
            'environment': environment,
            'version': version,
        })

    def record_operation(self, operation: str, duration: float, success: bool):
        """Record a finished operation; duration in seconds."""
        status = 'success' if success else 'error'
        self.operations_total.labels(operation=operation, status=status).inc()
        self.operation_duration.labels(operation=operation).observe(max(duration, 0.0))

    def record_context_initialized(self, transport: str):
        self.contexts_initialized_total.labels(transport=transport).inc()

    def record_context_error(self, error_type: str):
        self.context_errors_total.labels(error_type=error_type).inc()

    def record_health_check(self, probe: str, status):
        """Record a probe result; status is a HealthStatus."""
        self.health_checks_total.labels(probe=probe, status=status.name.lower()).inc()
        self.health_status.labels(probe=probe).set(int(status))

    def exposition(self) -> bytes:
        """Render the registry in Prometheus text format."""
        return generate_latest(self.registry)

    def start_metrics_server(self, port: int = 8000):
        """Start Prometheus metrics HTTP server"""
        if self._http_server is not None:
            logger.warning("Metrics server already running")
            return

        self._http_server = start_http_server(port, registry=self.registry)
        logger.info(f"Prometheus metrics server started on port {port}")

    def is_server_running(self) -> bool:
        return self._http_server is not None


class NoOpMetrics:
    """Metrics sink used when metrics are disabled."""

    def set_node_info(self, node_id: str, studio_id: str, environment: str, version: str = "unknown"):
        pass

    def record_operation(self, operation: str, duration: float, success: bool):
        pass

    def record_context_initialized(self, transport: str):
        pass

    def record_context_error(self, error_type: str):
        pass

    def record_health_check(self, probe: str, status):
        pass


# Global metrics instance
_metrics: Optional[GridMetrics] = None
_metrics_lock = threading.Lock()


def get_metrics() -> GridMetrics:
    """Get global metrics instance (thread-safe singleton)"""
    global _metrics

    if _metrics is None:
        with _metrics_lock:
            if _metrics is None:
                _metrics = GridMetrics()

    return _metrics


def initialize_metrics(port: int = 8000, enabled: bool = True, start_server: bool = True):
    """
    Initialize metrics with configuration.

    Returns the global GridMetrics, or a NoOpMetrics when disabled.
    """
    if not enabled:
        return NoOpMetrics()

    metrics = get_metrics()
    if start_server:
        metrics.start_metrics_server(port)
    return metrics
