"""
JSON snapshots of a GridContext.

Used to hand a context to an agent or worker that cannot receive transport
headers. Field names are camelCase on the wire. Baggage entries whose key
looks sensitive are withheld unless the caller asks for the full baggage.
"""

import logging
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from gridkernel.constants import SENSITIVE_BAGGAGE_FRAGMENTS

from ..clock import Clock
from ..ids import IdGenerator
from ..validation import require_text
from .grid_context import GridContext

logger = logging.getLogger(__name__)


class GridContextSnapshot(BaseModel):
    """Wire model of a serialized GridContext."""

    correlation_id: str = Field(..., min_length=1)
    operation_id: Optional[str] = None
    causation_id: Optional[str] = None
    tenant_id: Optional[str] = None
    project_id: Optional[str] = None
    node_id: str = Field(..., min_length=1)
    studio_id: str = Field(..., min_length=1)
    environment: str = Field(..., min_length=1)
    created_at_utc: Optional[datetime] = None
    baggage: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def filter_safe_baggage(baggage) -> Dict[str, str]:
    """Drop entries whose key contains a sensitive fragment."""
    return {
        key: value
        for key, value in baggage.items()
        if not any(fragment in key.lower() for fragment in SENSITIVE_BAGGAGE_FRAGMENTS)
    }


def serialize(context: GridContext, include_full_baggage: bool = False) -> str:
    """Serialize an initialized context to camelCase JSON."""
    snapshot = GridContextSnapshot(
        correlation_id=context.correlation_id,
        operation_id=context.operation_id,
        causation_id=context.causation_id,
        tenant_id=context.tenant_id,
        project_id=context.project_id,
        node_id=context.node_id,
        studio_id=context.studio_id,
        environment=context.environment,
        created_at_utc=context.created_at_utc,
        baggage=dict(context.baggage) if include_full_baggage else filter_safe_baggage(context.baggage),
    )
    return snapshot.model_dump_json(by_alias=True)


def deserialize(
    json_text: str,
    *,
    clock: Optional[Clock] = None,
    id_generator: Optional[IdGenerator] = None,
) -> Optional[GridContext]:
    """
    Rebuild an initialized context from JSON.

    The result is a new hop: it keeps the correlation and causation ids but
    gets its own operation id. Returns None when the text is not valid JSON
    or a required field (correlationId, nodeId, studioId, environment) is
    missing or empty.
    """
    require_text(json_text, "json_text")
    try:
        snapshot = GridContextSnapshot.model_validate_json(json_text)
    except ValidationError as e:
        logger.debug(f"Discarding malformed context snapshot: {e.error_count()} error(s)")
        return None

    context = GridContext(
        snapshot.node_id,
        snapshot.studio_id,
        snapshot.environment,
        clock=clock,
        id_generator=id_generator,
    )
    context.initialize(
        correlation_id=snapshot.correlation_id,
        causation_id=snapshot.causation_id,
        tenant_id=snapshot.tenant_id,
        project_id=snapshot.project_id,
        baggage=snapshot.baggage,
        created_at_utc=snapshot.created_at_utc,
    )
    return context
