"""
Background job to GridContext mapping.

Ad-hoc jobs are correlated by their job id; scheduled runs have no inbound
trace and start a fresh correlation id for every run.
"""

import threading
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from gridkernel.constants import (
    JOB_ID_KEY,
    JOB_NAME_KEY,
    JOB_PARAM_PREFIX,
    JOB_TYPE_KEY,
    SCHEDULED_JOB_TYPE,
    SCHEDULED_TIME_KEY,
)

from ..clock import Clock, get_default_clock
from ..context.grid_context import GridContext
from ..identity import NodeIdentity
from ..ids import IdGenerator, get_default_id_generator
from ..validation import require_text
from .values import GridContextInitValues


class JobContextMapper:
    """Builds job contexts for one node identity."""

    def __init__(
        self,
        identity: NodeIdentity,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        metrics=None,
    ):
        self.identity = identity
        self.clock = clock or get_default_clock()
        self.id_generator = id_generator or get_default_id_generator()
        self.metrics = metrics

    def extract_from_job(
        self,
        job_id: str,
        job_type: str,
        parameters: Optional[Mapping[str, Any]] = None,
        cancellation: Optional[threading.Event] = None,
    ) -> GridContextInitValues:
        """
        Values for an ad-hoc job run.

        The job id becomes the correlation id. Parameters are namespaced as
        job-param-<key> so they can never overwrite job-type or job-id.
        Parameters whose value is None are left out.
        """
        require_text(job_id, "job_id")
        require_text(job_type, "job_type")

        baggage: Dict[str, str] = {JOB_TYPE_KEY: job_type, JOB_ID_KEY: job_id}
        for key, value in (parameters or {}).items():
            if value is None:
                continue
            baggage[f"{JOB_PARAM_PREFIX}{key}"] = str(value)

        return GridContextInitValues(
            correlation_id=job_id,
            baggage=baggage,
            cancellation=cancellation,
        )

    def extract_from_scheduled_job(
        self,
        job_name: str,
        scheduled_time: datetime,
        cancellation: Optional[threading.Event] = None,
    ) -> GridContextInitValues:
        """Values for a scheduled run, with a freshly generated correlation id."""
        require_text(job_name, "job_name")

        return GridContextInitValues(
            correlation_id=self.id_generator.new_id(),
            baggage={
                JOB_TYPE_KEY: SCHEDULED_JOB_TYPE,
                JOB_NAME_KEY: job_name,
                SCHEDULED_TIME_KEY: scheduled_time.isoformat(),
            },
            cancellation=cancellation,
        )

    def _new_context(self) -> GridContext:
        return GridContext.from_identity(
            self.identity, clock=self.clock, id_generator=self.id_generator
        )

    def _apply(self, values: GridContextInitValues, context: GridContext) -> GridContext:
        values.apply_to(context)
        if self.metrics is not None:
            self.metrics.record_context_initialized("job")
        return context

    def map_from_job(
        self,
        job_id: str,
        job_type: str,
        parameters: Optional[Mapping[str, Any]] = None,
        cancellation: Optional[threading.Event] = None,
    ) -> GridContext:
        """New initialized context for an ad-hoc job run."""
        values = self.extract_from_job(job_id, job_type, parameters, cancellation)
        return self._apply(values, self._new_context())

    def map_from_scheduled_job(
        self,
        job_name: str,
        scheduled_time: datetime,
        cancellation: Optional[threading.Event] = None,
    ) -> GridContext:
        """New initialized context for a scheduled run."""
        values = self.extract_from_scheduled_job(job_name, scheduled_time, cancellation)
        return self._apply(values, self._new_context())

    def initialize_from_job(
        self,
        context: GridContext,
        job_id: str,
        job_type: str,
        parameters: Optional[Mapping[str, Any]] = None,
        cancellation: Optional[threading.Event] = None,
    ) -> GridContext:
        """Initialize a scope-owned context for an ad-hoc job run."""
        values = self.extract_from_job(job_id, job_type, parameters, cancellation)
        return self._apply(values, context)

    def initialize_from_scheduled_job(
        self,
        context: GridContext,
        job_name: str,
        scheduled_time: datetime,
        cancellation: Optional[threading.Event] = None,
    ) -> GridContext:
        values = self.extract_from_scheduled_job(job_name, scheduled_time, cancellation)
        return self._apply(values, context)
