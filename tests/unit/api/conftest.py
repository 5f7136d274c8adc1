"""Fixtures for API tests.

The app is built around the shared SpyStore and CountingResolver so tests
can inspect store contents and resolver calls after each request.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from cachegate.api.app import create_app
from cachegate.config import Settings
from tests.conftest import CountingResolver, SpyStore


@pytest.fixture
def app_settings() -> Settings:
    return Settings(
        store_backend="memory",
        default_ttl_seconds=60,
        max_ttl_seconds=3600,
        enable_metrics=True,
        cors_origins="*",
    )


@pytest.fixture
def app(app_settings: Settings, store: SpyStore, resolver: CountingResolver) -> FastAPI:
    return create_app(app_settings, store=store, resolver=resolver, configure_logs=False)


@pytest.fixture
def client(app: FastAPI, store: SpyStore) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        assert app.state.store is store
        yield test_client
