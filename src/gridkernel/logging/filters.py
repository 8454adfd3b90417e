"""
Log record enrichment from the ambient GridContext.
"""

import logging

from gridkernel.core.context.accessor import context_log_fields


class GridContextFilter(logging.Filter):
    """Attach the ambient context's ids to every record passing through."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in context_log_fields().items():
            if not hasattr(record, name):
                setattr(record, name, value)
        return True
