"""
gridkernel metrics

Provides Prometheus metrics collection for operations, contexts and health.
"""

from .prometheus_metrics import GridMetrics, NoOpMetrics, get_metrics, initialize_metrics

__all__ = ['GridMetrics', 'NoOpMetrics', 'get_metrics', 'initialize_metrics']
