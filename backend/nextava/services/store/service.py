"""Persistent key-value store implementations.

This module provides an abstract string store interface used by the
freshness cache to persist envelopes, a Redis implementation for
deployments, and an in-memory implementation for tests and local runs.

Failures are reported as ``StoreReadFailed`` / ``StoreWriteFailed`` so the
cache can treat them as best-effort without knowing the backend.
"""

import logging
from abc import ABC, abstractmethod

import redis.asyncio as redis
from redis.exceptions import RedisError

from nextava.models import StoreReadFailed, StoreWriteFailed

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Abstract base class for string key-value stores."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Retrieve the stored string for ``key``.

        Args:
            key: The key to look up.

        Returns:
            The stored string if present, None otherwise.

        Raises:
            StoreReadFailed: If the backend could not be read.
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StoreWriteFailed: If the backend rejected the write.
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete ``key``.

        Returns:
            True if the key was deleted, False if it didn't exist.
        """
        pass

    async def close(self) -> None:
        """Release backend resources. No-op by default."""
        return None


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed store.

    Attributes:
        _client: The Redis async client instance.
        _expire_seconds: Optional Redis-side expiry applied on every write.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        expire_seconds: int | None = None,
    ) -> None:
        """Initialize the Redis store.

        Args:
            redis_url: Redis connection URL. Defaults to localhost:6379.
            expire_seconds: Redis key expiry. None keeps keys until replaced.
        """
        self._redis_url = redis_url
        self._expire_seconds = expire_seconds
        self._client: redis.Redis | None = None

    async def connect(self) -> None:
        """Create the Redis client if it does not exist yet."""
        if self._client is None:
            self._client = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _ensure_connected(self) -> redis.Redis:
        if self._client is None:
            await self.connect()
        return self._client  # type: ignore

    async def get(self, key: str) -> str | None:
        client = await self._ensure_connected()
        try:
            return await client.get(key)
        except (RedisError, UnicodeDecodeError) as e:
            raise StoreReadFailed(f"Redis GET {key} failed: {e}") from e

    async def set(self, key: str, value: str) -> None:
        client = await self._ensure_connected()
        try:
            await client.set(key, value, ex=self._expire_seconds)
        except RedisError as e:
            raise StoreWriteFailed(f"Redis SET {key} failed: {e}") from e

    async def delete(self, key: str) -> bool:
        client = await self._ensure_connected()
        try:
            return await client.delete(key) > 0
        except RedisError as e:
            raise StoreWriteFailed(f"Redis DEL {key} failed: {e}") from e


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store with an optional byte quota.

    The quota mimics browser storage limits: a write whose encoded size
    (all keys plus values, UTF-8) would exceed ``quota_bytes`` is rejected.
    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def _size_with(self, key: str, value: str) -> int:
        total = len(key.encode("utf-8")) + len(value.encode("utf-8"))
        for k, v in self._data.items():
            if k != key:
                total += len(k.encode("utf-8")) + len(v.encode("utf-8"))
        return total

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            size = self._size_with(key, value)
            if size > self._quota_bytes:
                raise StoreWriteFailed(
                    f"Quota exceeded writing {key}: {size} > {self._quota_bytes} bytes"
                )
        self._data[key] = value

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None


def create_store(redis_url: str | None) -> KeyValueStore:
    """Create the store for this deployment: Redis when configured."""
    if redis_url:
        logger.info("[STORE] Using Redis store")
        return RedisKeyValueStore(redis_url)
    logger.info("[STORE] REDIS_URL not set, using in-memory store")
    return InMemoryKeyValueStore()
