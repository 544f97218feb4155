"""Unit tests for the key-value store implementations."""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from nextava.models import StoreReadFailed, StoreWriteFailed
from nextava.services.store import (
    InMemoryKeyValueStore,
    RedisKeyValueStore,
    create_store,
)


class TestInMemoryKeyValueStore:
    def setup_method(self) -> None:
        self.store = InMemoryKeyValueStore()

    @pytest.mark.asyncio
    async def test_get_missing(self) -> None:
        assert await self.store.get("k") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self) -> None:
        await self.store.set("k", "v")
        assert await self.store.get("k") == "v"

    @pytest.mark.asyncio
    async def test_overwrite(self) -> None:
        await self.store.set("k", "v1")
        await self.store.set("k", "v2")
        assert await self.store.get("k") == "v2"

    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        await self.store.set("k", "v")
        assert await self.store.delete("k") is True
        assert await self.store.delete("k") is False
        assert await self.store.get("k") is None


class TestInMemoryQuota:
    @pytest.mark.asyncio
    async def test_write_within_quota(self) -> None:
        store = InMemoryKeyValueStore(quota_bytes=10)
        await store.set("key", "1234567")
        assert await store.get("key") == "1234567"

    @pytest.mark.asyncio
    async def test_write_over_quota_raises(self) -> None:
        store = InMemoryKeyValueStore(quota_bytes=10)
        with pytest.raises(StoreWriteFailed, match="Quota exceeded"):
            await store.set("key", "12345678")
        assert await store.get("key") is None

    @pytest.mark.asyncio
    async def test_replacing_value_does_not_double_count(self) -> None:
        store = InMemoryKeyValueStore(quota_bytes=10)
        await store.set("key", "1234567")
        await store.set("key", "7654321")
        assert await store.get("key") == "7654321"

    @pytest.mark.asyncio
    async def test_quota_counts_utf8_bytes(self) -> None:
        store = InMemoryKeyValueStore(quota_bytes=4)
        with pytest.raises(StoreWriteFailed):
            await store.set("k", "éé")


class TestRedisKeyValueStore:
    """Redis errors are translated to store errors."""

    def setup_method(self) -> None:
        self.store = RedisKeyValueStore("redis://localhost:6379", expire_seconds=600)
        self.client = AsyncMock()
        self.store._client = self.client

    @pytest.mark.asyncio
    async def test_get(self) -> None:
        self.client.get.return_value = '{"data": [], "timestamp": 1}'
        assert await self.store.get("k") == '{"data": [], "timestamp": 1}'
        self.client.get.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_set_applies_expiry(self) -> None:
        await self.store.set("k", "v")
        self.client.set.assert_awaited_once_with("k", "v", ex=600)

    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        self.client.delete.return_value = 1
        assert await self.store.delete("k") is True

    @pytest.mark.asyncio
    async def test_get_error(self) -> None:
        self.client.get.side_effect = RedisConnectionError("down")
        with pytest.raises(StoreReadFailed):
            await self.store.get("k")

    @pytest.mark.asyncio
    async def test_get_undecodable_value(self) -> None:
        self.client.get.side_effect = UnicodeDecodeError(
            "utf-8", b"\xff", 0, 1, "invalid start byte"
        )
        with pytest.raises(StoreReadFailed):
            await self.store.get("k")

    @pytest.mark.asyncio
    async def test_set_error(self) -> None:
        self.client.set.side_effect = RedisConnectionError("OOM")
        with pytest.raises(StoreWriteFailed):
            await self.store.set("k", "v")

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        await self.store.close()
        self.client.aclose.assert_awaited_once()
        assert self.store._client is None


class TestCreateStore:
    def test_in_memory_without_url(self) -> None:
        assert isinstance(create_store(None), InMemoryKeyValueStore)

    def test_redis_with_url(self) -> None:
        assert isinstance(create_store("redis://cache:6379/0"), RedisKeyValueStore)
