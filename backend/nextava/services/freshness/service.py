"""Freshness cache for the tokenized availability feed.

Lookup order:
1. In-process memory tier (optional)
2. Persistent store envelope, if younger than the TTL
3. Network refresh: fetch, tokenize, persist best-effort

Store problems never fail a request. A missing, unreadable or malformed
envelope is a miss, and a rejected write is logged and ignored. Only
``FetchFailed`` from the feed source propagates to callers.

Overlapping refreshes are coalesced: while one fetch is in flight, other
callers await its result instead of starting their own.
"""

import asyncio
import logging
import time
from typing import Callable

from pydantic import ValidationError

from nextava.config import Settings
from nextava.models import (
    CachedTable,
    CacheEnvelope,
    CacheSource,
    StoreReadFailed,
    StoreWriteFailed,
)
from nextava.services.feed import FeedSource
from nextava.services.store import KeyValueStore
from nextava.utils import EnvelopeMemoryCache, tokenize

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class FreshnessCache:
    """Time-bounded cache around fetch-and-tokenize of the feed."""

    def __init__(
        self,
        store: KeyValueStore,
        source: FeedSource,
        settings: Settings,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._source = source
        self._cache_key = settings.cache_key
        self._ttl_ms = settings.cache_ttl_ms
        self._coalesce = settings.coalesce_refresh
        self._clock = clock
        self._memory: EnvelopeMemoryCache | None = (
            EnvelopeMemoryCache(clock=clock, ttl_ms=self._ttl_ms)
            if settings.memory_tier
            else None
        )
        self._inflight: asyncio.Task | None = None

    @property
    def ttl_ms(self) -> int:
        return self._ttl_ms

    async def get_data(self) -> CachedTable:
        """Return the feed table, refreshing it when the cached copy is stale.

        Raises:
            FetchFailed: If a refresh was needed and the download failed.
        """
        if self._memory is not None:
            envelope = self._memory.get(self._cache_key)
            if envelope is not None:
                return self._to_table(envelope, CacheSource.MEMORY)

        envelope = await self._read_envelope()
        if envelope is not None and envelope.is_fresh(self._clock(), self._ttl_ms):
            logger.debug(f"[CACHE] Store hit, age={envelope.age_ms(self._clock())}ms")
            if self._memory is not None:
                self._memory.set(self._cache_key, envelope)
            return self._to_table(envelope, CacheSource.STORE)

        if not self._coalesce:
            return await self._refresh()

        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._refresh())
            self._inflight.add_done_callback(self._clear_inflight)
        else:
            logger.debug("[CACHE] Joining in-flight refresh")
        return await asyncio.shield(self._inflight)

    async def invalidate(self) -> bool:
        """Drop the cached envelope from both tiers.

        Returns:
            True if the store held an envelope.
        """
        if self._memory is not None:
            self._memory.delete(self._cache_key)
        try:
            return await self._store.delete(self._cache_key)
        except StoreWriteFailed as e:
            logger.warning(f"[CACHE] Could not invalidate store: {e}")
            return False

    def _clear_inflight(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None
        if not task.cancelled():
            # Mark the exception retrieved; awaiters already received it.
            task.exception()

    async def _refresh(self) -> CachedTable:
        logger.info("[CACHE] Refreshing feed")
        text = await self._source.fetch_text()
        rows = tokenize(text)
        envelope = CacheEnvelope(data=rows, timestamp=self._clock())
        await self._write_envelope(envelope)
        if self._memory is not None:
            self._memory.set(self._cache_key, envelope)
        logger.info(f"[CACHE] Refreshed {len(rows)} rows")
        return self._to_table(envelope, CacheSource.NETWORK)

    async def _read_envelope(self) -> CacheEnvelope | None:
        try:
            raw = await self._store.get(self._cache_key)
        except StoreReadFailed as e:
            logger.warning(f"[CACHE] Store read failed, treating as miss: {e}")
            return None
        if raw is None:
            return None
        try:
            return CacheEnvelope.model_validate_json(raw)
        except ValidationError:
            logger.warning("[CACHE] Discarding malformed envelope")
            return None

    async def _write_envelope(self, envelope: CacheEnvelope) -> None:
        try:
            await self._store.set(self._cache_key, envelope.model_dump_json())
        except StoreWriteFailed as e:
            # Caching is best-effort; the fresh data is still served.
            logger.warning(f"[CACHE] Could not cache data: {e}")

    @staticmethod
    def _to_table(envelope: CacheEnvelope, source: CacheSource) -> CachedTable:
        return CachedTable(
            data=envelope.data,
            timestamp=envelope.timestamp,
            source=source,
        )
