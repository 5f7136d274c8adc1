"""Global pytest configuration and fixtures.

Provides an in-memory store with a call log and a counting resolver so
engine and API tests can assert which I/O a request performed.
"""

from __future__ import annotations

from typing import Any

import pytest

from cachegate.cache.store import MemoryStore
from cachegate.core.engine import CacheAsideEngine
from cachegate.core.errors import StoreUnavailable
from cachegate.resolvers.base import BackingSourceResolver, ResolutionFailed


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: tests that need Docker")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SpyStore(MemoryStore):
    """MemoryStore that records every call and can be made to fail."""

    def __init__(self, clock: FakeClock | None = None) -> None:
        super().__init__(clock=clock or FakeClock())
        self.calls: list[tuple[str, str]] = []
        self.fail_reads = False
        self.fail_writes = False
        self.closed = False

    async def get(self, key: str) -> bytes | None:
        self.calls.append(("get", key))
        if self.fail_reads:
            raise StoreUnavailable("store is down")
        return await super().get(key)

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        self.calls.append(("set", key))
        if self.fail_writes:
            raise StoreUnavailable("store is read-only")
        await super().set(key, value, ttl_seconds)

    async def delete(self, key: str) -> bool:
        self.calls.append(("delete", key))
        if self.fail_writes:
            raise StoreUnavailable("store is read-only")
        return await super().delete(key)

    async def close(self) -> None:
        self.closed = True


class CountingResolver(BackingSourceResolver):
    """Resolver returning canned values and counting calls per key."""

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self.values = values or {}
        self.calls: list[str] = []
        self.closed = False

    async def resolve(self, key: str, payload: Any = None) -> Any:
        self.calls.append(key)
        if key not in self.values:
            raise ResolutionFailed(key, "upstream returned 404", status_code=404)
        return self.values[key]

    async def close(self) -> None:
        self.closed = True


POSTS = [{"id": 1, "title": "hello"}, {"id": 2, "title": "world"}]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> SpyStore:
    return SpyStore(clock)


@pytest.fixture
def resolver() -> CountingResolver:
    return CountingResolver({"posts": POSTS, "users/1": {"id": 1, "name": "Leanne"}})


@pytest.fixture
def engine(store: SpyStore, resolver: CountingResolver) -> CacheAsideEngine:
    return CacheAsideEngine(store, resolver, max_ttl=3600)
