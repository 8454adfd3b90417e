"""
Pytest configuration and shared fixtures for gridkernel tests.
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from freezegun import freeze_time

from gridkernel.core.context.grid_context import GridContext
from gridkernel.core.identity import NodeIdentity


class FixedClock:
    """Clock returning a settable instant."""

    def __init__(self, now: datetime = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)):
        self.now = now

    def utc_now(self) -> datetime:
        return self.now

    def advance(self, milliseconds: float) -> None:
        self.now = self.now + timedelta(milliseconds=milliseconds)


class SequentialIdGenerator:
    """Id generator producing op-0001, op-0002, ..."""

    def __init__(self, prefix: str = "op"):
        self.prefix = prefix
        self.count = 0

    def new_id(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count:04d}"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def config_file(temp_dir):
    """Path for a configuration file inside a temporary directory."""
    return temp_dir / ".config" / "gridkernel" / "config.toml"


@pytest.fixture
def clean_environment(monkeypatch):
    """Remove GRIDKERNEL_* variables so host settings never leak into tests."""
    for name in list(os.environ):
        if name.startswith("GRIDKERNEL_"):
            monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def fixed_clock():
    return FixedClock()


@pytest.fixture
def id_generator():
    return SequentialIdGenerator()


@pytest.fixture
def identity():
    return NodeIdentity("catalog-api", "main-studio", "test")


@pytest.fixture
def grid_context(identity, fixed_clock, id_generator):
    """Uninitialized context for the test node."""
    return GridContext.from_identity(identity, clock=fixed_clock, id_generator=id_generator)


@pytest.fixture
def initialized_context(grid_context):
    """Context initialized as a root operation with tenant, project and baggage."""
    return grid_context.initialize(
        correlation_id="corr-1",
        tenant_id="tenant-a",
        project_id="project-x",
        baggage={"region": "eu"},
    )


@pytest.fixture
def frozen_time():
    """Freeze time for deterministic testing."""
    with freeze_time("2024-01-15 12:00:00") as frozen:
        yield frozen


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
