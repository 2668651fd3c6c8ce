"""
Shared test configuration and fixtures.
"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
import pytest_asyncio

from domain.models.rates import BCV_LABEL, PARALLEL_LABEL, CacheSnapshot, Rate
from infrastructure.cache.base import PersistentCacheStore
from infrastructure.persistence.database import Database
from infrastructure.providers.base import RateSource


class InMemoryCacheStore(PersistentCacheStore):
    """Dict-backed store that records writes for assertions."""

    name = 'memory'

    def __init__(self, snapshot=None, fail_writes=False, clock=lambda: datetime.now(UTC)):
        super().__init__(clock)
        self.snapshot = snapshot
        self.fail_writes = fail_writes
        self.writes = []

    async def read(self):
        return self.snapshot

    async def write(self, rates):
        self.writes.append(list(rates))
        if self.fail_writes:
            return False
        self.snapshot = CacheSnapshot(rates=tuple(rates), timestamp=self._clock())
        return True


class StubRateSource(RateSource):
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = 0

    @property
    def name(self) -> str:
        return 'stub'

    async def fetch(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.result)


@pytest.fixture
def fresh_rates():
    return [
        Rate(BCV_LABEL, Decimal('36.52')),
        Rate(PARALLEL_LABEL, Decimal('39.10')),
    ]


@pytest.fixture
def cached_rates():
    return (
        Rate(BCV_LABEL, Decimal('36.10')),
        Rate(PARALLEL_LABEL, Decimal('38.75')),
    )


@pytest_asyncio.fixture
async def database(tmp_path):
    """Fresh SQLite database per test."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'cache.db'}")
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def make_store():
    return InMemoryCacheStore


@pytest.fixture
def make_source():
    return StubRateSource
