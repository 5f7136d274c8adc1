"""Runtime wiring for cachegate.

The composition root: builds the configured store and resolver, hands them
to a CacheAsideEngine and closes whatever it created on exit. Used by the
FastAPI lifespan and by the CLI commands.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

from cachegate.cache.redis import RedisStore
from cachegate.cache.store import KeyValueStore, MemoryStore
from cachegate.config import Settings
from cachegate.core.engine import CacheAsideEngine
from cachegate.resolvers.base import BackingSourceResolver
from cachegate.resolvers.http import HttpResolver

logger = logging.getLogger(__name__)


def create_store(app_settings: Settings) -> KeyValueStore:
    """Create a key-value store based on configuration."""
    backend = app_settings.store_backend.lower()

    if backend in {"memory", "inmemory", "in_memory"}:
        return MemoryStore()

    if backend == "redis":
        return RedisStore.from_url(
            app_settings.redis_url,
            prefix=app_settings.key_prefix,
            socket_timeout=app_settings.redis_socket_timeout,
        )

    raise ValueError("Unsupported store_backend. Supported values: memory, redis.")


def create_resolver(app_settings: Settings) -> BackingSourceResolver:
    """Create the upstream HTTP resolver."""
    return HttpResolver(app_settings.upstream_base_url, timeout=app_settings.upstream_timeout)


@asynccontextmanager
async def open_engine(
    app_settings: Settings,
    store: KeyValueStore | None = None,
    resolver: BackingSourceResolver | None = None,
) -> AsyncIterator[CacheAsideEngine]:
    """Yield an engine, closing the store and resolver this call created.

    A store or resolver passed in stays owned by the caller and is left open.
    """
    async with AsyncExitStack() as stack:
        if store is None:
            store = create_store(app_settings)
            stack.push_async_callback(store.close)
        if resolver is None:
            resolver = create_resolver(app_settings)
            stack.push_async_callback(resolver.close)

        logger.info(
            f"Cache engine ready (store={type(store).__name__}, resolver={type(resolver).__name__})"
        )
        yield CacheAsideEngine(store, resolver, max_ttl=app_settings.max_ttl_seconds)

    logger.info("Cache engine closed")