"""Shared FastAPI dependencies for cachegate routers.

The engine, store and settings live on ``app.state``; they are created by
the application lifespan and looked up per request here.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Path, Request

from cachegate.cache.store import KeyValueStore
from cachegate.config import Settings
from cachegate.core.engine import CacheAsideEngine


def get_engine(request: Request) -> CacheAsideEngine:
    """FastAPI dependency returning the application's engine."""
    engine: CacheAsideEngine = request.app.state.engine
    return engine


def get_store(request: Request) -> KeyValueStore:
    """FastAPI dependency returning the application's store."""
    store: KeyValueStore = request.app.state.store
    return store


def get_app_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was built with."""
    app_settings: Settings = request.app.state.settings
    return app_settings


# Type aliases for cleaner router signatures
EngineDep = Annotated[CacheAsideEngine, Depends(get_engine)]
StoreDep = Annotated[KeyValueStore, Depends(get_store)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
CacheKeyPath = Annotated[str, Path(description="Opaque cache key")]
