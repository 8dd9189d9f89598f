"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from resus.clock import TickSource  # noqa: E402
from resus.protocol import ProtocolEngine, RecordingAnnouncer  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (engine + clock + scorer)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class ScriptedRandom:
    """Random source returning a fixed sequence of draws (last value repeats)."""

    def __init__(self, *values: float):
        self.values = list(values) or [0.99]
        self.calls = 0

    def random(self) -> float:
        index = min(self.calls, len(self.values) - 1)
        self.calls += 1
        return self.values[index]


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def weight_kg():
    return 20.0


@pytest.fixture
def announcer():
    return RecordingAnnouncer()


@pytest.fixture
def clock():
    return TickSource()


@pytest.fixture
def engine(weight_kg, announcer, clock):
    """A live engine that has not been started."""
    return ProtocolEngine(weight_kg, announcer=announcer, clock=clock)


@pytest.fixture
def started_engine(engine):
    engine.start()
    return engine


@pytest.fixture
def always_fire():
    """Every draw is below every probability."""
    return ScriptedRandom(0.0)


@pytest.fixture
def never_fire():
    """Every draw is above every probability."""
    return ScriptedRandom(0.99)


@pytest.fixture
def scripted_random():
    """Factory for ScriptedRandom sources."""
    return ScriptedRandom
