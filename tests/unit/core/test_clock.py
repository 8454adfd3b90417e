"""Tests for the system clock."""

from datetime import datetime, timezone

import pytest

from gridkernel.core.clock import SystemClock, get_default_clock
from gridkernel.core.context import GridContext


@pytest.mark.unit
class TestSystemClock:
    def test_utc_now_is_aware(self, frozen_time):
        now = SystemClock().utc_now()

        assert now == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        assert now.tzinfo is not None

    def test_default_clock_is_shared(self):
        assert get_default_clock() is get_default_clock()
        assert isinstance(get_default_clock(), SystemClock)

    def test_context_uses_system_clock_by_default(self, identity, frozen_time):
        context = GridContext.from_identity(identity).initialize("corr-1")
        frozen_time.tick()

        assert context.created_at_utc == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
