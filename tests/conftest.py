"""Shared fixtures: in-memory store, deterministic clock and app client."""

from datetime import datetime, timedelta, timezone
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from clinic_backend.main import create_app
from clinic_backend.services.advisory import AdvisoryGateway
from clinic_backend.services.records import ClinicState, RecordManager
from clinic_backend.services.store import MemoryKeyValueStore
from clinic_backend.utils.config import Settings


class TickingClock:
    """Returns a new instant one millisecond later on every call."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(milliseconds=1)
        return value


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock(datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def manager(store: MemoryKeyValueStore, clock: TickingClock) -> RecordManager:
    return RecordManager(ClinicState(), store, clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        store_backend="memory",
        seed_sample_data=False,
        gemini_api_key="",
        gemini_use_stub=True,
    )


@pytest.fixture
def client(settings: Settings, store: MemoryKeyValueStore) -> Iterator[TestClient]:
    gateway = AdvisoryGateway(api_key="", model="test-model", use_stub=True)
    app = create_app(settings, store=store, gateway=gateway)
    with TestClient(app) as test_client:
        yield test_client
