"""
Outbound transport binders.

Binders write a context onto an outgoing envelope: HTTP response headers
for the caller, request headers for a call to another node, message
properties, or job metadata. Envelopes written by the outbound binders are
read back by the matching mappers on the receiving side, with the sending
operation as the receiver's causation id.
"""

from typing import Any, MutableMapping
from urllib.parse import quote

from gridkernel.constants import (
    BAGGAGE_HEADER,
    CAUSATION_ID_HEADER,
    CAUSATION_ID_KEYS,
    CORRELATION_ID_HEADER,
    CORRELATION_ID_KEYS,
    CREATED_AT_KEY,
    ENVIRONMENT_KEY,
    MESSAGE_BAGGAGE_PREFIX,
    NODE_ID_HEADER,
    NODE_ID_KEY,
    PROJECT_ID_HEADER,
    PROJECT_ID_KEYS,
    STUDIO_ID_KEY,
    TENANT_ID_HEADER,
    TENANT_ID_KEYS,
)

from ..context.grid_context import GridContext


def bind_http_response_headers(
    headers: MutableMapping[str, str], context: GridContext
) -> MutableMapping[str, str]:
    """Echo the context's identity on a response so clients can trace the call."""
    headers[CORRELATION_ID_HEADER] = context.correlation_id
    headers[NODE_ID_HEADER] = context.node_id
    if context.causation_id is not None:
        headers[CAUSATION_ID_HEADER] = context.causation_id
    if context.tenant_id is not None:
        headers[TENANT_ID_HEADER] = context.tenant_id
    if context.project_id is not None:
        headers[PROJECT_ID_HEADER] = context.project_id
    return headers


def format_baggage_header(baggage) -> str:
    """Render baggage as a W3C baggage header value with URL-encoded values."""
    return ",".join(f"{key}={quote(value, safe='')}" for key, value in baggage.items())


def bind_outbound_http_headers(
    headers: MutableMapping[str, str], context: GridContext
) -> MutableMapping[str, str]:
    """Write request headers for a call to another node."""
    headers[CORRELATION_ID_HEADER] = context.correlation_id
    headers[CAUSATION_ID_HEADER] = context.operation_id
    if context.tenant_id is not None:
        headers[TENANT_ID_HEADER] = context.tenant_id
    if context.project_id is not None:
        headers[PROJECT_ID_HEADER] = context.project_id
    if context.baggage:
        headers[BAGGAGE_HEADER] = format_baggage_header(context.baggage)
    return headers


def _bind_properties(properties: MutableMapping[str, Any], context: GridContext) -> None:
    properties[CORRELATION_ID_KEYS[0]] = context.correlation_id
    properties[CAUSATION_ID_KEYS[0]] = context.operation_id
    properties[NODE_ID_KEY] = context.node_id
    properties[STUDIO_ID_KEY] = context.studio_id
    properties[ENVIRONMENT_KEY] = context.environment
    if context.tenant_id is not None:
        properties[TENANT_ID_KEYS[0]] = context.tenant_id
    if context.project_id is not None:
        properties[PROJECT_ID_KEYS[0]] = context.project_id
    for key, value in context.baggage.items():
        properties[f"{MESSAGE_BAGGAGE_PREFIX}{key}"] = value


def bind_message_properties(
    properties: MutableMapping[str, Any], context: GridContext
) -> MutableMapping[str, Any]:
    """Write message properties for a message published from this context."""
    _bind_properties(properties, context)
    return properties


def bind_job_metadata(
    metadata: MutableMapping[str, str], context: GridContext
) -> MutableMapping[str, str]:
    """Write job metadata for a job enqueued from this context."""
    _bind_properties(metadata, context)
    metadata[CREATED_AT_KEY] = context.created_at_utc.isoformat()
    return metadata
