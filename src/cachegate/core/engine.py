"""Cache-aside decision engine.

Orchestrates the read path (lookup -> miss -> resolve -> populate -> return)
and the invalidate path over an injected key-value store and backing source
resolver. The engine holds no mutable state between calls; each call is an
independent unit of work whose only suspension points are store I/O and
resolver I/O.

Known race: there is no single-flight guarantee. Two concurrent misses on
the same key may both call the resolver and both write to the store, and
the last write wins, TTL included. An invalidation that lands while a fetch
is resolving does not stop that fetch from populating afterwards.

Example:
    engine = CacheAsideEngine(store=MemoryStore(), resolver=HttpResolver(url))

    result = await engine.fetch_or_populate("posts", 60)
    result.source  # "fresh" on first call, "cache" until the TTL elapses

    await engine.invalidate("posts")  # InvalidateResult.REMOVED
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import orjson

from cachegate.core import codec
from cachegate.core.errors import (
    CachePopulationFailed,
    StoreUnavailable,
    UpstreamFailure,
)
from cachegate.core.validation import validate_key, validate_ttl
from cachegate.observability.logging import bind_cache_key
from cachegate.observability.metrics import (
    record_cache_hit,
    record_cache_miss,
    record_invalidation,
    record_population_failure,
    record_resolve,
)
from cachegate.resolvers.base import ResolutionFailed

if TYPE_CHECKING:
    from cachegate.cache.store import KeyValueStore
    from cachegate.resolvers.base import BackingSourceResolver

logger = logging.getLogger(__name__)


class Source(str, Enum):
    """Where a fetched value came from."""

    CACHE = "cache"
    FRESH = "fresh"


@dataclass(frozen=True)
class AutoResolve:
    """Resolve misses through the backing source resolver."""


@dataclass(frozen=True)
class CallerSupplied:
    """Store the caller's payload verbatim on a miss."""

    payload: Any


PayloadMode = AutoResolve | CallerSupplied

AUTO_RESOLVE = AutoResolve()


@dataclass(frozen=True)
class FetchResult:
    """Outcome of fetch_or_populate.

    ``warning`` is set only on fresh results whose store write failed.
    """

    source: Source
    value: Any
    warning: CachePopulationFailed | None = None

    @property
    def cached(self) -> bool:
        return self.source is Source.CACHE

    def to_dict(self) -> dict[str, Any]:
        """Boundary shape: ``{source, data}``."""
        return {"source": self.source.value, "data": self.value}

    @classmethod
    def cached_value(cls, value: Any) -> FetchResult:
        return cls(Source.CACHE, value)

    @classmethod
    def fresh_value(cls, value: Any, warning: CachePopulationFailed | None = None) -> FetchResult:
        return cls(Source.FRESH, value, warning)


class InvalidateResult(str, Enum):
    """Outcome of invalidate. NOT_FOUND is a normal result, not an error."""

    REMOVED = "removed"
    NOT_FOUND = "not_found"

    @property
    def removed(self) -> bool:
        return self is InvalidateResult.REMOVED

    def to_dict(self, key: str) -> dict[str, Any]:
        """Boundary shape: ``{success, data}`` or ``{success, message}``."""
        if self.removed:
            return {"success": True, "data": {"key": key}}
        return {"success": False, "message": "not found"}


class CacheAsideEngine:
    """Cache-aside engine over an injected store and resolver.

    The store and resolver are owned by the caller, which is responsible for
    opening them before use and closing them afterwards.
    """

    def __init__(
        self,
        store: KeyValueStore,
        resolver: BackingSourceResolver,
        max_ttl: int | None = None,
    ):
        self.store = store
        self.resolver = resolver
        self.max_ttl = max_ttl

    async def fetch_or_populate(
        self,
        key: str,
        ttl_seconds: int | str,
        payload_mode: PayloadMode = AUTO_RESOLVE,
    ) -> FetchResult:
        """Return the cached value for a key, populating the cache on a miss.

        Args:
            key: Cache key
            ttl_seconds: TTL applied when the entry is populated. A hit never
                refreshes the TTL.
            payload_mode: AutoResolve to call the resolver on a miss, or
                CallerSupplied to store the given payload verbatim.

        Returns:
            FetchResult with source CACHE or FRESH

        Raises:
            InvalidRequest: Bad key or TTL; nothing was read or written
            StoreUnavailable: The store could not be read
            UpstreamFailure: The resolver failed; nothing was written
        """
        key = validate_key(key)
        ttl = validate_ttl(ttl_seconds, self.max_ttl)

        with bind_cache_key(key):
            return await self._fetch(key, ttl, payload_mode)

    async def _fetch(self, key: str, ttl: int, payload_mode: PayloadMode) -> FetchResult:
        cached = await self.store.get(key)
        if cached is not None:
            try:
                value = codec.decode(cached)
            except orjson.JSONDecodeError:
                logger.warning(f"Discarding undecodable cache entry for '{key}'")
            else:
                record_cache_hit()
                logger.debug(f"Cache hit: {key}")
                return FetchResult.cached_value(value)

        record_cache_miss()
        logger.debug(f"Cache miss: {key}")

        if isinstance(payload_mode, CallerSupplied):
            value = payload_mode.payload
        else:
            value = await self._resolve(key)

        warning = await self._populate(key, value, ttl)
        return FetchResult.fresh_value(value, warning)

    async def invalidate(self, key: str) -> InvalidateResult:
        """Remove a cached entry.

        Raises:
            InvalidRequest: Bad key; nothing was deleted
            StoreUnavailable: The store could not be reached
        """
        key = validate_key(key)

        with bind_cache_key(key):
            if await self.store.delete(key):
                result = InvalidateResult.REMOVED
            else:
                result = InvalidateResult.NOT_FOUND

            record_invalidation(result.value)
            logger.info(f"Invalidated '{key}': {result.value}")
        return result

    async def _resolve(self, key: str) -> Any:
        """Call the resolver once, translating failures to UpstreamFailure."""
        start = time.perf_counter()
        try:
            value = await self.resolver.resolve(key)
        except ResolutionFailed as e:
            record_resolve("error", time.perf_counter() - start)
            logger.warning(f"Upstream resolution failed for '{key}': {e.reason}")
            raise UpstreamFailure(str(e), status_code=e.status_code) from e
        except Exception as e:
            record_resolve("error", time.perf_counter() - start)
            logger.exception(f"Resolver raised unexpectedly for '{key}'")
            raise UpstreamFailure(f"Failed to resolve '{key}': {e}") from e

        record_resolve("ok", time.perf_counter() - start)
        return value

    async def _populate(self, key: str, value: Any, ttl: int) -> CachePopulationFailed | None:
        """Write a fresh value; failures are reported, never raised."""
        try:
            data = codec.encode(value)
        except TypeError as e:
            warning = CachePopulationFailed(f"Value for '{key}' is not serializable: {e}")
        else:
            try:
                await self.store.set(key, data, ttl)
            except StoreUnavailable as e:
                warning = CachePopulationFailed(f"Could not cache '{key}': {e.message}")
            else:
                logger.debug(f"Cached '{key}' for {ttl}s")
                return None

        record_population_failure()
        logger.warning(warning.message)
        return warning
