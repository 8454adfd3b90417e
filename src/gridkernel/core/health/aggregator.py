"""
Composite health aggregation.

HealthAggregator runs every probe concurrently and reports the worst
status. A probe that raises is counted as UNHEALTHY rather than failing the
whole check, so one broken dependency can never hide the others.

Cancellation: asyncio.CancelledError escaping a probe propagates only when
the caller actually asked for cancellation (the shared event is set, or the
aggregating task itself is being cancelled). A probe cancelling on its own,
for example through an internal timeout, is just another failure.
"""

import asyncio
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from gridkernel.logging.loggers import GridLogger

from .probes import HealthProbe, probe_name
from .status import HealthStatus

logger = GridLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one probe within an aggregated check."""

    name: str
    status: HealthStatus
    duration_ms: float = 0.0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "name": self.name,
            "status": self.status.name.lower(),
            "duration_ms": round(self.duration_ms, 3),
        }
        if self.error:
            result["error"] = self.error
        return result


@dataclass(frozen=True)
class HealthReport:
    """Overall status plus per-probe results, in probe order."""

    status: HealthStatus
    results: Tuple[ProbeResult, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.name.lower(),
            "checks": [result.to_dict() for result in self.results],
        }


def _task_is_cancelling() -> bool:
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


class HealthAggregator:
    """Aggregates an ordered, fixed set of probes into one status."""

    def __init__(self, probes: Iterable[HealthProbe], metrics=None):
        self.probes: Tuple[HealthProbe, ...] = tuple(probes)
        self._metrics = metrics

    async def check(self, cancellation: Optional[threading.Event] = None) -> HealthStatus:
        """Run all probes and return the worst status (HEALTHY if there are none)."""
        report = await self.check_detailed(cancellation)
        return report.status

    async def check_detailed(self, cancellation: Optional[threading.Event] = None) -> HealthReport:
        """Run all probes and return the full report."""
        if not self.probes:
            return HealthReport(HealthStatus.HEALTHY)

        if cancellation is None:
            cancellation = threading.Event()

        tasks = [
            asyncio.create_task(self._run_probe(probe, cancellation)) for probe in self.probes
        ]
        try:
            await asyncio.wait(tasks)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.wait(tasks)
            raise
        # Every task has finished; a cancelled probe re-raises here
        results = [task.result() for task in tasks]
        status = HealthStatus.worst(result.status for result in results)

        if status is not HealthStatus.HEALTHY:
            failing = [r.name for r in results if r.status is not HealthStatus.HEALTHY]
            logger.warning(
                f"Health check reported {status.name}",
                health_status=status.name.lower(),
                failing_probes=failing,
            )
        return HealthReport(status, tuple(results))

    async def _run_probe(self, probe: HealthProbe, cancellation: threading.Event) -> ProbeResult:
        name = probe_name(probe)
        started = time.perf_counter()
        error = None
        try:
            status = await probe.check(cancellation)
        except asyncio.CancelledError:
            if cancellation.is_set() or _task_is_cancelling():
                raise
            status = HealthStatus.UNHEALTHY
            error = "probe was cancelled"
        except Exception as e:
            status = HealthStatus.UNHEALTHY
            error = f"{type(e).__name__}: {e}"
            logger.warning(f"Health probe {name} raised {type(e).__name__}: {e}", probe=name)

        if not isinstance(status, HealthStatus):
            error = f"probe returned {status!r} instead of a HealthStatus"
            status = HealthStatus.UNHEALTHY

        duration_ms = (time.perf_counter() - started) * 1000
        if self._metrics is not None:
            self._metrics.record_health_check(name, status)
        return ProbeResult(name, status, duration_ms, error)
