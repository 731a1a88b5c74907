"""Shared test fixtures and configuration."""
import pytest
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("GOOGLE_APPLICATION_CREDENTIALS", "{}")
os.environ.setdefault("SHEET_ID", "test-sheet-id")
os.environ.setdefault("LEDGER_TIMEZONE", "America/Toronto")

from app.main import app
from app.core.dependencies import get_kiosk_repository, get_order_service
from app.services.menu.repository import KioskRepository
from app.services.menu.in_memory_kiosks import InMemoryKioskProvider
from app.services.persistence.ledger import Ledger
from app.services.persistence.orders import OrderPersistenceService


class FakeLedger(Ledger):
    """In-memory ledger recording every append call."""

    def __init__(self, fail_at=None, error=None):
        self.calls = []
        self.fail_at = fail_at
        self.error = error or ConnectionError("quota exceeded")

    def append_rows(self, range_name, rows):
        if self.fail_at is not None and len(self.calls) == self.fail_at:
            raise self.error
        self.calls.append((range_name, rows))

    @property
    def rows(self):
        return [row for _, rows in self.calls for row in rows]


class StepClock:
    """Clock that advances one minute per reading."""

    def __init__(self, start):
        self.current = start
        self.readings = 0

    def __call__(self):
        now = self.current
        self.current += timedelta(minutes=1)
        self.readings += 1
        return now


# 2024-10-19 14:05 in Toronto (EDT, UTC-4)
FIXED_NOW = datetime(2024, 10, 19, 18, 5, tzinfo=timezone.utc)


@pytest.fixture
def fake_ledger():
    """Ledger that accepts every append."""
    return FakeLedger()


@pytest.fixture
def failing_ledger():
    """Build a ledger whose append call number ``fail_at`` (0-indexed) raises."""
    def _failing_ledger(fail_at, error=None):
        return FakeLedger(fail_at=fail_at, error=error)
    return _failing_ledger


@pytest.fixture
def clock():
    """Deterministic clock starting at FIXED_NOW."""
    return StepClock(FIXED_NOW)


@pytest.fixture
def order_service(fake_ledger, clock):
    """Order service writing to the fake ledger."""
    return OrderPersistenceService(ledger=fake_ledger, timezone="America/Toronto", clock=clock)


@pytest.fixture
def kiosk_repository():
    """Repository over the shipped kiosk catalogue."""
    return KioskRepository(InMemoryKioskProvider())


@pytest.fixture
def test_kiosks_path():
    """Return path to test kiosk YAML file."""
    return Path(__file__).parent / "fixtures" / "test_kiosks.yaml"


@pytest.fixture
def test_kiosk_repository(test_kiosks_path):
    """Repository over the test kiosk catalogue."""
    return KioskRepository(InMemoryKioskProvider(config_file=str(test_kiosks_path)))


@pytest.fixture
async def pacific_mall(kiosk_repository):
    return await kiosk_repository.get_kiosk("sheet-pacific-mall")


@pytest.fixture
def test_client(order_service, kiosk_repository):
    """Create FastAPI test client with overrides."""
    app.dependency_overrides[get_order_service] = lambda: order_service
    app.dependency_overrides[get_kiosk_repository] = lambda: kiosk_repository

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()
