"""
Pytest configuration and fixtures for Telemetry Store tests.
"""

import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from telemetry_store.models.reading import KitTelemetry  # noqa: E402
from telemetry_store.services.storage import TelemetryStore  # noqa: E402


class FakeClock:
    """Controllable millisecond clock."""

    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock():
    return FakeClock(100)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "store" / "telemetry.db"


@pytest_asyncio.fixture
async def store(db_path, clock):
    """Open file-backed store driven by the fake clock."""
    store = TelemetryStore(db_path, clock=clock)
    await store.open()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def memory_store(clock):
    store = TelemetryStore(":memory:", clock=clock)
    await store.open()
    yield store
    await store.close()


@pytest.fixture
def reading_a():
    """Sample kit reading."""
    return KitTelemetry(
        id=1,
        ppm=812.0,
        ph=6.1,
        tempC=23.5,
        humidity=61.0,
        waterTemp=20.25,
        waterLevel=74.0,
        pH_reducer=False,
        add_water=True,
        nutrients_adder=False,
        humidifier=True,
        ex_fan=False,
        isDefault=False,
    )


@pytest.fixture
def reading_b():
    """Second sample reading, differs from reading_a."""
    return KitTelemetry(
        id=2,
        ppm=790.5,
        ph=6.4,
        tempC=24.0,
        humidity=58.5,
        waterTemp=20.5,
        waterLevel=71.0,
        ex_fan=True,
    )
