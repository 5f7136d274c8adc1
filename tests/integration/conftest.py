"""Integration test fixtures using Docker.

Provides a containerized Redis for exercising RedisStore and the HTTP API
against a real server. Tests are skipped when Docker is unavailable.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
import redis.asyncio as redis
from redis.exceptions import RedisError

from cachegate.cache.redis import RedisStore, create_redis_client
from tests.integration.docker_utils import (
    REDIS_IMAGE,
    DockerService,
    get_docker_client,
    run_container,
)


@pytest.fixture(scope="session")
def docker_client():
    """Create a Docker client or skip if Docker is unavailable."""
    try:
        client = get_docker_client()
        client.ping()
    except Exception as exc:
        pytest.skip(f"Docker not available: {exc}")
    yield client
    client.close()


@pytest.fixture(scope="session")
def redis_container(docker_client) -> Iterator[DockerService]:
    """Start Redis container for the test session."""
    with run_container(docker_client, REDIS_IMAGE, ports={"6379/tcp": None}) as service:
        yield service


@pytest.fixture(scope="session")
def redis_url(redis_container: DockerService) -> str:
    """Get the Redis URL for the test container."""
    return redis_container.url("redis", 6379, "/0")


@pytest_asyncio.fixture
async def redis_client(redis_url: str) -> AsyncIterator[redis.Redis]:
    """Create a Redis client for tests."""
    client = create_redis_client(redis_url)
    await _wait_for_redis(client)
    yield client
    await client.flushdb()  # Clean up after each test
    await client.aclose()


@pytest_asyncio.fixture
async def redis_store(redis_client: redis.Redis) -> RedisStore:
    """RedisStore borrowing the test client."""
    return RedisStore(redis_client)


async def _wait_for_redis(client: redis.Redis, timeout: float = 30.0) -> None:
    deadline = time.monotonic() + timeout
    while True:
        try:
            await client.ping()
            return
        except (RedisError, OSError):
            if time.monotonic() > deadline:
                raise
            await asyncio.sleep(0.5)
