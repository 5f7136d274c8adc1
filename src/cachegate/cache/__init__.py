"""Key-value store layer for cachegate.

Provides the store adapter used by the cache-aside engine:
- KeyValueStore: get/set/delete contract with per-entry TTL
- MemoryStore: in-process backend for development and tests
- RedisStore: Redis backend, expiry delegated to Redis
"""

from cachegate.cache.keys import CacheKeys
from cachegate.cache.redis import RedisStore, create_redis_client
from cachegate.cache.store import KeyValueStore, MemoryStore

__all__ = [
    "CacheKeys",
    "KeyValueStore",
    "MemoryStore",
    "RedisStore",
    "create_redis_client",
]
