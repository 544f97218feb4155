"""Shared fakes and fixtures for unit tests."""

import asyncio

import pytest

from nextava.config import Settings
from nextava.models import FetchFailed, StoreReadFailed, StoreWriteFailed
from nextava.services import FeedSource, InMemoryKeyValueStore

SAMPLE_CSV = (
    "ClinicID,Clinic Name,XRAY_AVA,US_AVA,VUS_AVA,BMD_AVA,MAMMO_AVA,NOTES_AVA,AVA_TIMESTAMP\r\n"
    'c-100,Downtown Imaging,Same day,"Next week, mornings",,,2 days,,2026-10-18T09:00:00Z\r\n'
    'c-200,Uptown Radiology,,,,,,"Closed for ""renovation""",\r\n'
    "c-300,Short Row,Walk-in\r\n"
    "c-100,Duplicate Clinic,Never,,,,,,\r\n"
)

# 2026-10-19T12:00:00Z
START_MS = 1_792_411_200_000


class FakeClock:
    """Manually advanced epoch-ms clock."""

    def __init__(self, now_ms: int = START_MS) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class FakeFeedSource(FeedSource):
    """Feed source returning canned text and counting downloads."""

    def __init__(self, text: str = SAMPLE_CSV, error: Exception | None = None, delay: float = 0.0) -> None:
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = 0

    async def fetch_text(self) -> str:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


class CountingStore(InMemoryKeyValueStore):
    """In-memory store that records reads and writes."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        super().__init__(quota_bytes=quota_bytes)
        self.gets = 0
        self.sets = 0

    async def get(self, key: str) -> str | None:
        self.gets += 1
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        self.sets += 1
        await super().set(key, value)


class FailingWriteStore(InMemoryKeyValueStore):
    async def set(self, key: str, value: str) -> None:
        raise StoreWriteFailed("quota exceeded")

    async def delete(self, key: str) -> bool:
        raise StoreWriteFailed("read-only")


class FailingReadStore(InMemoryKeyValueStore):
    async def get(self, key: str) -> str | None:
        raise StoreReadFailed("connection refused")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def source() -> FakeFeedSource:
    return FakeFeedSource()


@pytest.fixture
def failing_source() -> FakeFeedSource:
    return FakeFeedSource(error=FetchFailed("Failed to fetch data: HTTP 503", status_code=503))


@pytest.fixture
def store() -> CountingStore:
    return CountingStore()


@pytest.fixture
def settings() -> Settings:
    return Settings(csv_url="https://example.test/feed.csv", memory_tier=False)
