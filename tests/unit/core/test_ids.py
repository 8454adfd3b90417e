"""Tests for ULID generation."""

import pytest
from ulid import ULID

from gridkernel.core.ids import ULID_LENGTH, UlidGenerator, new_id


@pytest.mark.unit
class TestUlidGenerator:
    def test_format(self):
        value = new_id()

        assert len(value) == ULID_LENGTH
        assert str(ULID.from_str(value)) == value

    def test_unique(self):
        generator = UlidGenerator()

        assert len({generator.new_id() for _ in range(1000)}) == 1000

    def test_sorted_by_time_source(self):
        times = iter([1000.0, 1000.5])
        generator = UlidGenerator(time_source=lambda: next(times))

        first = generator.new_id()
        second = generator.new_id()

        assert first < second

    def test_timestamp_taken_from_time_source(self):
        generator = UlidGenerator(time_source=lambda: 1_700_000_000.0)

        value = ULID.from_str(generator.new_id())

        assert value.milliseconds == 1_700_000_000_000
