"""Tests for JSON context snapshots."""

import json
from datetime import datetime, timezone

import pytest

from gridkernel.core.context import deserialize, serialize
from gridkernel.core.context.serializer import filter_safe_baggage
from gridkernel.exceptions import ContextNotInitializedError, ContextValidationError


@pytest.fixture
def context_with_secrets(initialized_context):
    initialized_context.add_baggage("api-key", "abc123")
    initialized_context.add_baggage("user-password", "hunter2")
    return initialized_context


@pytest.mark.unit
class TestSerialize:
    """Test context to JSON."""

    def test_camel_case_fields(self, initialized_context):
        data = json.loads(serialize(initialized_context))

        assert data["correlationId"] == "corr-1"
        assert data["operationId"] == "op-0001"
        assert data["causationId"] is None
        assert data["tenantId"] == "tenant-a"
        assert data["projectId"] == "project-x"
        assert data["nodeId"] == "catalog-api"
        assert data["studioId"] == "main-studio"
        assert data["environment"] == "test"
        assert data["createdAtUtc"].startswith("2024-01-15T12:00:00")
        assert data["baggage"] == {"region": "eu"}

    def test_sensitive_baggage_withheld_by_default(self, context_with_secrets):
        data = json.loads(serialize(context_with_secrets))

        assert data["baggage"] == {"region": "eu"}

    def test_full_baggage_on_request(self, context_with_secrets):
        data = json.loads(serialize(context_with_secrets, include_full_baggage=True))

        assert data["baggage"]["api-key"] == "abc123"
        assert data["baggage"]["user-password"] == "hunter2"

    def test_uninitialized_context_rejected(self, grid_context):
        with pytest.raises(ContextNotInitializedError):
            serialize(grid_context)

    def test_filter_safe_baggage_is_case_insensitive(self):
        assert filter_safe_baggage({"Auth-TOKEN": "x", "region": "eu"}) == {"region": "eu"}


@pytest.mark.unit
class TestDeserialize:
    """Test JSON to context."""

    def test_round_trip_starts_new_hop(self, initialized_context, id_generator):
        restored = deserialize(serialize(initialized_context), id_generator=id_generator)

        assert restored.is_initialized is True
        assert restored.correlation_id == "corr-1"
        assert restored.tenant_id == "tenant-a"
        assert restored.project_id == "project-x"
        assert restored.node_id == "catalog-api"
        assert dict(restored.baggage) == {"region": "eu"}
        assert restored.operation_id == "op-0002"
        assert restored.created_at_utc == initialized_context.created_at_utc

    def test_causation_preserved(self, initialized_context):
        child = initialized_context.create_child_context()

        restored = deserialize(serialize(child))

        assert restored.causation_id == initialized_context.operation_id

    def test_snake_case_input_accepted(self):
        text = json.dumps({
            "correlation_id": "corr-9",
            "node_id": "worker",
            "studio_id": "studio",
            "environment": "prod",
        })

        restored = deserialize(text)

        assert restored.correlation_id == "corr-9"
        assert restored.node_id == "worker"

    def test_missing_created_at_uses_clock(self, fixed_clock):
        text = json.dumps({
            "correlationId": "corr-9",
            "nodeId": "worker",
            "studioId": "studio",
            "environment": "prod",
        })

        restored = deserialize(text, clock=fixed_clock)

        assert restored.created_at_utc == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("text", [
        "not json",
        "{}",
        '{"correlationId": "", "nodeId": "n", "studioId": "s", "environment": "e"}',
        '{"correlationId": "   ", "nodeId": "n", "studioId": "s", "environment": "e"}',
        '{"correlationId": "c", "studioId": "s", "environment": "e"}',
        '{"correlationId": "c", "nodeId": "n", "studioId": "s"}',
    ])
    def test_malformed_input_returns_none(self, text):
        assert deserialize(text) is None

    @pytest.mark.parametrize("text", ["", "   "])
    def test_blank_input_rejected(self, text):
        with pytest.raises(ContextValidationError):
            deserialize(text)
