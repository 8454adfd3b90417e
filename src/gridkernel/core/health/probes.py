"""
Health probe protocol and adapters.
"""

import inspect
import threading
from typing import Awaitable, Callable, Protocol, Union, runtime_checkable

from .status import HealthStatus

ProbeFunction = Callable[[threading.Event], Union[HealthStatus, Awaitable[HealthStatus]]]


@runtime_checkable
class HealthProbe(Protocol):
    """A single dependency or subsystem check."""

    async def check(self, cancellation: threading.Event) -> HealthStatus:
        ...


class CallableProbe:
    """Adapts a plain or async function into a named HealthProbe."""

    def __init__(self, name: str, func: ProbeFunction):
        self.name = name
        self._func = func

    async def check(self, cancellation: threading.Event) -> HealthStatus:
        result = self._func(cancellation)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"CallableProbe(name={self.name!r})"


class StaticProbe:
    """Probe that always reports the same status."""

    def __init__(self, status: HealthStatus, name: str = "static"):
        self.name = name
        self.status = status

    async def check(self, cancellation: threading.Event) -> HealthStatus:
        return self.status


def probe_name(probe) -> str:
    """Display name of a probe: its name attribute, else its class name."""
    name = getattr(probe, "name", None)
    if isinstance(name, str) and name.strip():
        return name
    return type(probe).__name__
