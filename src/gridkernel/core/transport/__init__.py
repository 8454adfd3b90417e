"""
Outbound transport binders.
"""

from .binders import (
    bind_http_response_headers,
    bind_job_metadata,
    bind_message_properties,
    bind_outbound_http_headers,
    format_baggage_header,
)

__all__ = [
    "bind_http_response_headers",
    "bind_job_metadata",
    "bind_message_properties",
    "bind_outbound_http_headers",
    "format_baggage_header",
]
