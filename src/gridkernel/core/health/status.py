"""
Health status values, ordered by severity.
"""

from enum import IntEnum
from typing import Iterable


class HealthStatus(IntEnum):
    """Health of a component. Larger values are worse."""

    HEALTHY = 0
    DEGRADED = 1
    UNHEALTHY = 2

    @classmethod
    def worst(cls, statuses: Iterable["HealthStatus"]) -> "HealthStatus":
        """Most severe status in statuses; HEALTHY when there are none."""
        return max(statuses, default=cls.HEALTHY)
