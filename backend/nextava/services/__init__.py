"""NextAva Services.

Service layer components:
- Store: Redis-backed key-value store with an in-memory fallback
- Feed: httpx download of the published availability CSV
- Freshness: TTL cache around fetch-and-tokenize
- Resolver: clinic lookup by key column
- Pipeline: cache + resolver composed into a display payload
"""

from .store import (
    KeyValueStore,
    RedisKeyValueStore,
    InMemoryKeyValueStore,
    create_store,
)
from .feed import FeedSource, HttpFeedSource
from .freshness import FreshnessCache, now_ms
from .resolver import (
    Resolution,
    resolve,
    find_record,
    extract_availabilities,
    extract_notes,
)
from .pipeline import AvailabilityPipeline

__all__ = [
    # Store
    "KeyValueStore",
    "RedisKeyValueStore",
    "InMemoryKeyValueStore",
    "create_store",
    # Feed
    "FeedSource",
    "HttpFeedSource",
    # Freshness
    "FreshnessCache",
    "now_ms",
    # Resolver
    "Resolution",
    "resolve",
    "find_record",
    "extract_availabilities",
    "extract_notes",
    # Pipeline
    "AvailabilityPipeline",
]
