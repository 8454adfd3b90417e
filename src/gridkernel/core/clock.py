"""
Time source abstraction.

Context creation times and operation durations are taken from a Clock so
tests can control them.
"""

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of the current UTC time."""

    def utc_now(self) -> datetime:
        ...


class SystemClock:
    """Clock backed by the system wall clock."""

    def utc_now(self) -> datetime:
        return datetime.now(timezone.utc)


_system_clock = SystemClock()


def get_default_clock() -> SystemClock:
    """Get the process-wide system clock."""
    return _system_clock
