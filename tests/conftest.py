"""
Common test fixtures and configuration.

Every test that touches storage gets its own SQLite file under tmp_path, a
pinned clock (2026-06-15 12:00 UTC) and a seeded random source, so dates,
variants and grid positions are reproducible.
"""
import logging
import random
from datetime import datetime, timezone

import pytest
import pytest_asyncio

from app.main import PlantMemoryApp
from app.shared.config.settings import Settings


def utc_millis(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> int:
    """Epoch milliseconds of a UTC wall-clock time."""
    return int(datetime(year, month, day, hour, minute, tzinfo=timezone.utc).timestamp() * 1000)


FIXED_NOW = utc_millis(2026, 6, 15)
CURRENT_YEAR = 2026


class FakeClock:
    """Settable epoch-millisecond clock."""

    def __init__(self, now: int = FIXED_NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


@pytest.fixture(autouse=True)
def setup_logging():
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fresh SQLite file, calendar dates in UTC."""
    return Settings(
        _env_file=None,
        ENVIRONMENT="testing",
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="text",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'journal.db'}",
        PLANT_MEMORY_TIMEZONE="UTC",
    )


@pytest_asyncio.fixture
async def app(settings, clock, rng):
    plant_memory = await PlantMemoryApp.create(
        settings, clock=clock, rng=rng, configure_logging=False
    )
    yield plant_memory
    await plant_memory.close()


@pytest.fixture
def repository(app):
    return app.repository


@pytest.fixture
def journal(app):
    return app.journal


@pytest.fixture
def event_bus(app):
    return app.event_bus
