"""
Identifier generation.

Operation ids and generated correlation ids are ULIDs: 48 bits of
millisecond timestamp followed by 80 random bits, rendered as 26 Crockford
base32 characters. They sort lexicographically in creation order (to the
millisecond), which keeps log lines for one trace naturally ordered.
"""

import time
from typing import Callable, Optional, Protocol

from ulid import ULID

ULID_LENGTH = 26


class IdGenerator(Protocol):
    """Produces unique, lexicographically sortable string identifiers."""

    def new_id(self) -> str:
        ...


class UlidGenerator:
    """Default IdGenerator backed by python-ulid and a time source in seconds."""

    def __init__(self, time_source: Optional[Callable[[], float]] = None):
        self._time_source = time_source or time.time

    def new_id(self) -> str:
        return str(ULID.from_timestamp(float(self._time_source())))


_default_generator = UlidGenerator()


def get_default_id_generator() -> UlidGenerator:
    """Get the process-wide id generator."""
    return _default_generator


def new_id() -> str:
    """Generate a new ULID with the default generator."""
    return _default_generator.new_id()
