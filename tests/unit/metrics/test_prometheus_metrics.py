"""Tests for Prometheus metrics collection."""

from unittest.mock import patch

import pytest

from gridkernel.core.health import HealthStatus
from gridkernel.metrics import GridMetrics, NoOpMetrics, initialize_metrics
from gridkernel.metrics import prometheus_metrics


@pytest.fixture
def metrics():
    return GridMetrics()


def sample(metrics, name, **labels):
    return metrics.registry.get_sample_value(name, labels)


@pytest.mark.unit
class TestGridMetrics:
    """Test recording into an isolated registry."""

    def test_instances_do_not_collide(self):
        first = GridMetrics()
        second = GridMetrics()

        first.record_context_initialized("http")

        assert sample(first, "gridkernel_contexts_initialized_total", transport="http") == 1.0
        assert sample(second, "gridkernel_contexts_initialized_total", transport="http") is None

    def test_record_operation(self, metrics):
        metrics.record_operation("LoadCatalog", 0.2, True)
        metrics.record_operation("LoadCatalog", 0.3, False)

        assert sample(metrics, "gridkernel_operations_total", operation="LoadCatalog", status="success") == 1.0
        assert sample(metrics, "gridkernel_operations_total", operation="LoadCatalog", status="error") == 1.0
        assert sample(metrics, "gridkernel_operation_duration_seconds_count", operation="LoadCatalog") == 2.0
        assert sample(metrics, "gridkernel_operation_duration_seconds_sum", operation="LoadCatalog") == pytest.approx(0.5)

    def test_record_context_error(self, metrics):
        metrics.record_context_error("ContextDisposedError")

        assert sample(metrics, "gridkernel_context_errors_total", error_type="ContextDisposedError") == 1.0

    def test_record_health_check(self, metrics):
        metrics.record_health_check("database", HealthStatus.DEGRADED)

        assert sample(metrics, "gridkernel_health_checks_total", probe="database", status="degraded") == 1.0
        assert sample(metrics, "gridkernel_health_status", probe="database") == 1.0

    def test_node_info_in_exposition(self, metrics):
        metrics.set_node_info("catalog-api", "main-studio", "prod", "1.0.0")

        text = metrics.exposition().decode()

        assert 'node_id="catalog-api"' in text
        assert "gridkernel_node_info" in text

    @patch("gridkernel.metrics.prometheus_metrics.start_http_server")
    def test_start_server_once(self, mock_start, metrics):
        metrics.start_metrics_server(9100)
        metrics.start_metrics_server(9100)

        mock_start.assert_called_once_with(9100, registry=metrics.registry)
        assert metrics.is_server_running() is True


@pytest.mark.unit
class TestInitializeMetrics:
    def test_disabled_returns_noop(self):
        metrics = initialize_metrics(enabled=False)

        assert isinstance(metrics, NoOpMetrics)
        metrics.record_operation("x", 1.0, True)
        metrics.record_health_check("p", HealthStatus.HEALTHY)

    def test_enabled_without_server(self, monkeypatch):
        monkeypatch.setattr(prometheus_metrics, "_metrics", None)

        metrics = initialize_metrics(enabled=True, start_server=False)

        assert isinstance(metrics, GridMetrics)
        assert metrics is prometheus_metrics.get_metrics()
        assert metrics.is_server_running() is False
