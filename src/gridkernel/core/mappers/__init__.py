"""
Transport mappers: turn inbound HTTP headers, job descriptions and message
metadata into the canonical values a GridContext is initialized with.
"""

from .values import GridContextInitValues, MessageContextValues
from .http import (
    extract_from_headers,
    initialize_from_headers,
    parse_baggage_header,
    parse_traceparent,
)
from .job import JobContextMapper
from .messaging import extract_from_message, initialize_from_message

__all__ = [
    "GridContextInitValues",
    "MessageContextValues",
    "extract_from_headers",
    "initialize_from_headers",
    "parse_baggage_header",
    "parse_traceparent",
    "JobContextMapper",
    "extract_from_message",
    "initialize_from_message",
]
