"""
Pytest configuration and shared fixtures.

This file adds the parent directory to the Python path so that tests
can import from the domain, repositories, services and api packages.
"""

import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Dict, Optional

import pytest

# Add the store-counter directory to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.product import Product  # noqa: E402
from repositories.store import FileMedium, PersistentStore  # noqa: E402
from services.counter_service import StoreCounter  # noqa: E402

# Fixed store-local zone (UTC-6, no DST) so window boundaries are deterministic
STORE_TZ = timezone(timedelta(hours=-6), "CST")


class FakeClock:
    """Callable clock returning a settable UTC instant."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class MemoryMedium:
    """In-memory storage medium with switchable failure modes."""

    def __init__(self, name: str = "memory") -> None:
        self.name = name
        self.data: Dict[str, str] = {}
        self.fail_writes = False
        self.fail_reads = False

    def read(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise OSError(f"{self.name} unavailable")
        return self.data.get(key)

    def write(self, key: str, text: str) -> None:
        if self.fail_writes:
            raise OSError(f"{self.name} is full")
        self.data[key] = text


def local(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """A store-local wall-clock time expressed as a UTC instant."""

    return datetime(year, month, day, hour, minute, tzinfo=STORE_TZ).astimezone(timezone.utc)


@pytest.fixture
def clock() -> FakeClock:
    # Wednesday 2025-01-15 10:00 store time
    return FakeClock(local(2025, 1, 15, 10, 0))


@pytest.fixture
def primary() -> MemoryMedium:
    return MemoryMedium("primary")


@pytest.fixture
def secondary() -> MemoryMedium:
    return MemoryMedium("secondary")


@pytest.fixture
def memory_store(primary: MemoryMedium, secondary: MemoryMedium) -> PersistentStore:
    return PersistentStore(primary, secondary)


@pytest.fixture
def file_store(tmp_path: Path) -> PersistentStore:
    return PersistentStore(
        FileMedium(tmp_path / "data", name="primary"),
        FileMedium(tmp_path / "data" / "backup", ttl=timedelta(days=365), name="backup"),
    )


@pytest.fixture
def counter(memory_store: PersistentStore, clock: FakeClock) -> StoreCounter:
    """A counter with the default catalog, no sales, and a fixed clock."""

    return StoreCounter.open(memory_store, tz=STORE_TZ, clock=clock)


@pytest.fixture
def coffee() -> Product:
    return Product(id="1", name="Coffee", cost=Decimal("1.50"), price=Decimal("4.00"), color="#8B4513")
