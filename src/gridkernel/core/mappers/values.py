"""
Canonical values extracted from an inbound transport.
"""

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from ..context.grid_context import GridContext


def _freeze(baggage: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(baggage or {}))


@dataclass(frozen=True)
class GridContextInitValues:
    """Everything GridContext.initialize() needs, ready to apply."""

    correlation_id: str
    causation_id: Optional[str] = None
    tenant_id: Optional[str] = None
    project_id: Optional[str] = None
    baggage: Mapping[str, str] = field(default_factory=dict)
    cancellation: Optional[threading.Event] = None

    def __post_init__(self):
        object.__setattr__(self, "baggage", _freeze(self.baggage))

    def apply_to(self, context: GridContext) -> GridContext:
        """Initialize the context with these values."""
        return context.initialize(
            correlation_id=self.correlation_id,
            causation_id=self.causation_id,
            tenant_id=self.tenant_id,
            project_id=self.project_id,
            baggage=self.baggage,
            cancellation=self.cancellation,
        )


@dataclass(frozen=True)
class MessageContextValues:
    """Values read from message metadata; correlation_id is None when absent."""

    correlation_id: Optional[str] = None
    causation_id: Optional[str] = None
    tenant_id: Optional[str] = None
    project_id: Optional[str] = None
    baggage: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "baggage", _freeze(self.baggage))
