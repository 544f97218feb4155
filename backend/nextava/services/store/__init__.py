"""Persistent key-value store module."""

from .service import (
    InMemoryKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
    create_store,
)

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
    "create_store",
]
