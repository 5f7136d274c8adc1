"""Redis key-value store for cachegate.

Provides async Redis operations for caching serialized values with TTL.
Uses the redis-py async client for connection pooling. The client is
created and closed by the composition root (app lifespan, CLI command);
the store only borrows it.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, cast

import redis.asyncio as redis
from redis.exceptions import RedisError

from cachegate.cache.keys import CacheKeys
from cachegate.cache.store import KeyValueStore
from cachegate.core.errors import StoreUnavailable

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)


def create_redis_client(url: str, socket_timeout: float | None = 5.0) -> Redis:
    """Create a Redis client with its own connection pool."""
    return redis.from_url(  # type: ignore[no-untyped-call]
        url,
        decode_responses=False,  # We're storing bytes
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
    )


class RedisStore(KeyValueStore):
    """Key-value store backed by Redis.

    Each entry is a plain string key written with ``SET key value EX ttl``.
    Expiry is left entirely to Redis.
    """

    def __init__(self, client: Redis, keys: CacheKeys | None = None, owns_client: bool = False):
        self.client = client
        self.keys = keys or CacheKeys()
        self._owns_client = owns_client

    @classmethod
    def from_url(
        cls,
        url: str,
        prefix: str = CacheKeys.PREFIX,
        socket_timeout: float | None = 5.0,
    ) -> RedisStore:
        """Create a store that owns (and closes) its own client."""
        client = create_redis_client(url, socket_timeout=socket_timeout)
        return cls(client, CacheKeys(prefix), owns_client=True)

    async def get(self, key: str) -> bytes | None:
        try:
            value = await self.client.get(self.keys.entry(key))
        except RedisError as e:
            raise StoreUnavailable(f"Redis GET failed for '{key}': {e}") from e
        return cast(bytes | None, value)

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        try:
            await self.client.set(self.keys.entry(key), value, ex=ttl_seconds)
        except RedisError as e:
            raise StoreUnavailable(f"Redis SET failed for '{key}': {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            deleted = await self.client.delete(self.keys.entry(key))
        except RedisError as e:
            raise StoreUnavailable(f"Redis DEL failed for '{key}': {e}") from e
        return int(deleted) > 0

    async def ping(self) -> bool:
        """Check Redis connectivity."""
        try:
            await cast(Awaitable[bool], self.client.ping())
            return True
        except (RedisError, OSError) as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        """Close the client if this store created it."""
        if self._owns_client:
            await self.client.aclose()
