"""
HTTP header to GridContext mapping.

Lookup is case-insensitive for any Mapping[str, str], including Starlette's
Headers. Inbound values are never trusted to be well-formed: malformed
traceparent or baggage input falls back to defaults instead of raising, and
every extracted string is capped at max_value_length characters.
"""

import threading
from typing import Dict, Mapping, Optional
from urllib.parse import unquote

from gridkernel.constants import (
    BAGGAGE_HEADER,
    BAGGAGE_HEADER_PREFIX,
    CAUSATION_ID_HEADER,
    CORRELATION_ID_HEADER,
    DEFAULT_MAX_HEADER_LENGTH,
    PROJECT_ID_HEADER,
    TENANT_ID_HEADER,
    TRACEPARENT_HEADER,
)

from ..context.grid_context import GridContext
from ..ids import IdGenerator, get_default_id_generator
from ..validation import is_blank, truncate
from .values import GridContextInitValues


def _normalize(headers: Mapping[str, str]) -> Dict[str, str]:
    return {name.lower(): value for name, value in headers.items()}


def _header(normalized: Dict[str, str], name: str, max_length: int) -> Optional[str]:
    value = normalized.get(name.lower())
    if is_blank(value):
        return None
    return truncate(value, max_length)


def parse_traceparent(value: Optional[str]) -> Optional[str]:
    """
    Return the trace-id segment of a W3C traceparent header.

    Format: version-traceid-spanid-flags. Anything with fewer than four
    segments or an empty trace id yields None.
    """
    if is_blank(value):
        return None
    parts = value.split("-")
    if len(parts) < 4 or not parts[1].strip():
        return None
    return parts[1]


def parse_baggage_header(value: Optional[str]) -> Dict[str, str]:
    """
    Parse a W3C baggage header: comma-separated key=value[;properties].

    Properties are ignored and values are URL-decoded. Entries without '=',
    with an empty key or with an empty value are skipped.
    """
    baggage: Dict[str, str] = {}
    if is_blank(value):
        return baggage

    for item in value.split(","):
        pair = item.split(";", 1)[0]
        if "=" not in pair:
            continue
        key, raw_value = pair.split("=", 1)
        key = key.strip()
        raw_value = raw_value.strip()
        if not key or not raw_value:
            continue
        baggage[key] = unquote(raw_value)
    return baggage


def extract_from_headers(
    headers: Mapping[str, str],
    cancellation: Optional[threading.Event] = None,
    max_value_length: int = DEFAULT_MAX_HEADER_LENGTH,
    id_generator: Optional[IdGenerator] = None,
) -> GridContextInitValues:
    """
    Extract initialization values from request headers.

    Correlation id: X-Correlation-Id, else the traceparent trace id, else a
    newly generated id. X-Baggage-<key> headers win over entries of the W3C
    baggage header with the same key.
    """
    normalized = _normalize(headers)

    correlation_id = _header(normalized, CORRELATION_ID_HEADER, max_value_length)
    if correlation_id is None:
        correlation_id = truncate(
            parse_traceparent(normalized.get(TRACEPARENT_HEADER)), max_value_length
        )
    if correlation_id is None:
        correlation_id = (id_generator or get_default_id_generator()).new_id()

    baggage: Dict[str, str] = {}
    for key, value in parse_baggage_header(normalized.get(BAGGAGE_HEADER)).items():
        baggage[truncate(key, max_value_length)] = truncate(value, max_value_length)

    prefix = BAGGAGE_HEADER_PREFIX.lower()
    for name, value in headers.items():
        if not name.lower().startswith(prefix):
            continue
        key = name[len(prefix):]
        if not key or is_blank(value):
            continue
        baggage[truncate(key, max_value_length)] = truncate(value, max_value_length)

    return GridContextInitValues(
        correlation_id=correlation_id,
        causation_id=_header(normalized, CAUSATION_ID_HEADER, max_value_length),
        tenant_id=_header(normalized, TENANT_ID_HEADER, max_value_length),
        project_id=_header(normalized, PROJECT_ID_HEADER, max_value_length),
        baggage=baggage,
        cancellation=cancellation,
    )


def initialize_from_headers(
    context: GridContext,
    headers: Mapping[str, str],
    cancellation: Optional[threading.Event] = None,
    max_value_length: int = DEFAULT_MAX_HEADER_LENGTH,
    id_generator: Optional[IdGenerator] = None,
) -> GridContext:
    """Extract values from headers and initialize the context with them."""
    values = extract_from_headers(headers, cancellation, max_value_length, id_generator)
    return values.apply_to(context)
