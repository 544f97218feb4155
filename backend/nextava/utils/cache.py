"""In-memory tier for cache envelopes.

Process-level copy of the most recent envelope(s) so a warm worker can skip
the persistent store entirely. Freshness is judged against the envelope's
own capture time, not the time it entered this tier.
"""

from collections import OrderedDict
from typing import Callable

from nextava.models import CacheEnvelope


class EnvelopeMemoryCache:
    """Small LRU of cache envelopes keyed by cache key."""

    def __init__(self, clock: Callable[[], int], ttl_ms: int, max_size: int = 8) -> None:
        self._cache: OrderedDict[str, CacheEnvelope] = OrderedDict()
        self._clock = clock
        self._ttl_ms = ttl_ms
        self._max_size = max_size

    def get(self, key: str) -> CacheEnvelope | None:
        envelope = self._cache.get(key)
        if envelope is None:
            return None
        if not envelope.is_fresh(self._clock(), self._ttl_ms):
            del self._cache[key]
            return None
        self._cache.move_to_end(key)
        return envelope

    def set(self, key: str, envelope: CacheEnvelope) -> None:
        if key in self._cache:
            self._cache.move_to_end(key)
        self._cache[key] = envelope
        if len(self._cache) > self._max_size:
            self._cache.popitem(last=False)

    def delete(self, key: str) -> bool:
        return self._cache.pop(key, None) is not None

    def __len__(self) -> int:
        return len(self._cache)
