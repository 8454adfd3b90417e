"""
Composite health aggregation.
"""

from .status import HealthStatus
from .probes import CallableProbe, HealthProbe, StaticProbe, probe_name
from .aggregator import HealthAggregator, HealthReport, ProbeResult

__all__ = [
    "HealthStatus",
    "HealthProbe",
    "CallableProbe",
    "StaticProbe",
    "probe_name",
    "HealthAggregator",
    "HealthReport",
    "ProbeResult",
]
