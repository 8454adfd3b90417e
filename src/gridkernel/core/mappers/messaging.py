"""
Message metadata to GridContext mapping.

Brokers disagree on property naming, so every field is looked up under
several keys in priority order; the first present, non-blank value wins.
"""

import threading
from typing import Any, Dict, Mapping, Optional, Sequence

from gridkernel.constants import (
    CAUSATION_ID_KEYS,
    CORRELATION_ID_KEYS,
    MESSAGE_BAGGAGE_PREFIX,
    PROJECT_ID_KEYS,
    TENANT_ID_KEYS,
)

from ..context.grid_context import GridContext
from ..ids import IdGenerator, get_default_id_generator
from .values import MessageContextValues


def _first(metadata: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = metadata.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _baggage(metadata: Mapping[str, Any]) -> Dict[str, str]:
    baggage: Dict[str, str] = {}
    prefix_length = len(MESSAGE_BAGGAGE_PREFIX)
    for key, value in metadata.items():
        if not key.lower().startswith(MESSAGE_BAGGAGE_PREFIX):
            continue
        name = key[prefix_length:]
        if not name or value is None:
            continue
        baggage[name] = str(value)
    return baggage


def extract_from_message(metadata: Mapping[str, Any]) -> MessageContextValues:
    """Read correlation fields and baggage-<key> entries from message metadata."""
    return MessageContextValues(
        correlation_id=_first(metadata, CORRELATION_ID_KEYS),
        causation_id=_first(metadata, CAUSATION_ID_KEYS),
        tenant_id=_first(metadata, TENANT_ID_KEYS),
        project_id=_first(metadata, PROJECT_ID_KEYS),
        baggage=_baggage(metadata),
    )


def initialize_from_message(
    context: GridContext,
    metadata: Mapping[str, Any],
    cancellation: Optional[threading.Event] = None,
    id_generator: Optional[IdGenerator] = None,
    metrics=None,
) -> GridContext:
    """Initialize the context from message metadata, generating a correlation id if absent."""
    values = extract_from_message(metadata)
    correlation_id = values.correlation_id or (id_generator or get_default_id_generator()).new_id()
    context.initialize(
        correlation_id=correlation_id,
        causation_id=values.causation_id,
        tenant_id=values.tenant_id,
        project_id=values.project_id,
        baggage=values.baggage,
        cancellation=cancellation,
    )
    if metrics is not None:
        metrics.record_context_initialized("messaging")
    return context
