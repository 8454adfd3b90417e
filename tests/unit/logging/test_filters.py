"""Tests for GridContextFilter."""

import logging

import pytest

from gridkernel.core.context import use_context
from gridkernel.logging.filters import GridContextFilter


def make_record():
    return logging.LogRecord("gridkernel.test", logging.INFO, __file__, 1, "msg", (), None)


@pytest.mark.unit
class TestGridContextFilter:
    def test_adds_ambient_ids(self, initialized_context):
        record = make_record()

        with use_context(initialized_context):
            assert GridContextFilter().filter(record) is True

        assert record.correlation_id == "corr-1"
        assert record.operation_id == "op-0001"
        assert record.node_id == "catalog-api"
        assert not hasattr(record, "causation_id")

    def test_keeps_ids_already_on_record(self, initialized_context):
        record = make_record()
        record.correlation_id = "explicit"

        with use_context(initialized_context):
            GridContextFilter().filter(record)

        assert record.correlation_id == "explicit"

    def test_no_context_passes_record_unchanged(self):
        record = make_record()

        assert GridContextFilter().filter(record) is True
        assert not hasattr(record, "correlation_id")

    def test_disposed_context_is_ignored(self, initialized_context):
        record = make_record()
        initialized_context.mark_disposed()

        with use_context(initialized_context):
            assert GridContextFilter().filter(record) is True

        assert not hasattr(record, "correlation_id")
