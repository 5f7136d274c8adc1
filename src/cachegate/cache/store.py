"""Key-value store interface.

Defines the contract the cache-aside engine uses to talk to an external
cache with per-entry TTL support:

- get: stored bytes or None (absence is a normal result)
- set: replace the entry, expiring ttl_seconds from now
- delete: whether an entry was removed (idempotent)

Implementations perform no local caching of their own.

- MemoryStore: process-local store for development and tests
- RedisStore (cachegate.cache.redis): production backend
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable


class KeyValueStore(ABC):
    """Abstract key-value store with TTL support."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Get the stored value if present and unexpired.

        Raises:
            StoreUnavailable: If the store cannot be reached
        """
        ...

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Store a value, replacing any existing entry.

        Args:
            key: Cache key
            value: Serialized value
            ttl_seconds: Seconds until the entry expires

        Raises:
            StoreUnavailable: If the store cannot be reached
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete an entry.

        Returns:
            True if deleted, False if not found

        Raises:
            StoreUnavailable: If the store cannot be reached
        """
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Check store connectivity."""
        ...

    async def close(self) -> None:
        """Release connections held by the store."""
        return None


class MemoryStore(KeyValueStore):
    """In-process store backed by a dict.

    Expiry is evaluated lazily against a monotonic clock. Suitable for
    single-instance development and tests; use RedisStore when several
    gateway instances must share entries.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: dict[str, tuple[bytes, float]] = {}
        self._clock = clock

    async def get(self, key: str) -> bytes | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)

    async def delete(self, key: str) -> bool:
        entry = self._entries.pop(key, None)
        return entry is not None and entry[1] > self._clock()

    async def ping(self) -> bool:
        return True

    def ttl(self, key: str) -> float | None:
        """Seconds remaining for an entry, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        remaining = entry[1] - self._clock()
        return remaining if remaining > 0 else None

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for _, expires_at in self._entries.values() if expires_at > now)
