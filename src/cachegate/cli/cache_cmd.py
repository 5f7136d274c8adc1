"""CLI commands that run the cache engine once.

Usage:
    cachegate fetch posts
    cachegate fetch posts --ttl 60
    cachegate fetch k1 --ttl 30 --payload '{"x": 1}'
    cachegate invalidate posts

Both commands use the configured store and upstream (CACHEGATE_STORE_BACKEND,
REDIS_URL, UPSTREAM_BASE_URL). Results and errors are printed as JSON.
"""

from __future__ import annotations

import asyncio
from typing import Any

import orjson
import typer

from cachegate.config import settings
from cachegate.core.engine import AUTO_RESOLVE, CallerSupplied, FetchResult, PayloadMode
from cachegate.core.errors import CacheGatewayError, InvalidRequest
from cachegate.core.validation import validate_payload
from cachegate.observability import configure_logging
from cachegate.runtime import open_engine


def _echo_json(body: dict[str, Any]) -> None:
    typer.echo(orjson.dumps(body, option=orjson.OPT_INDENT_2).decode())


def _fail(error: CacheGatewayError) -> typer.Exit:
    """Print the error body and build the matching exit."""
    _echo_json(error.to_dict())
    return typer.Exit(code=2 if isinstance(error, InvalidRequest) else 1)


def _parse_payload(payload: str | None) -> PayloadMode:
    if payload is None:
        return AUTO_RESOLVE
    try:
        value = orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise InvalidRequest(f"payload is not valid JSON: {e}") from e
    return CallerSupplied(validate_payload(value))


async def _fetch(key: str, ttl: str, payload_mode: PayloadMode) -> FetchResult:
    async with open_engine(settings) as engine:
        return await engine.fetch_or_populate(key, ttl, payload_mode)


async def _invalidate(key: str) -> dict[str, Any]:
    async with open_engine(settings) as engine:
        result = await engine.invalidate(key)
    return result.to_dict(key)


def fetch(
    key: str = typer.Argument(..., help="Cache key to fetch"),
    ttl: str | None = typer.Option(
        None,
        "--ttl",
        "-t",
        help="Time to live in seconds (defaults to CACHEGATE_DEFAULT_TTL)",
    ),
    payload: str | None = typer.Option(
        None,
        "--payload",
        help="JSON value to cache on a miss instead of calling the upstream",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log engine activity to stderr",
    ),
) -> None:
    """Fetch KEY from the cache, populating it on a miss."""
    if verbose:
        configure_logging(json_format=False, level="DEBUG")

    try:
        payload_mode = _parse_payload(payload)
        result = asyncio.run(
            _fetch(key, ttl if ttl is not None else str(settings.default_ttl_seconds), payload_mode)
        )
    except CacheGatewayError as e:
        raise _fail(e) from e

    if result.warning is not None:
        from rich.console import Console

        Console(stderr=True).print(
            f"[yellow]Warning:[/yellow] {result.warning.kind.value}: {result.warning.message}"
        )
    _echo_json(result.to_dict())


def invalidate(
    key: str = typer.Argument(..., help="Cache key to remove"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log engine activity to stderr",
    ),
) -> None:
    """Remove KEY from the cache."""
    if verbose:
        configure_logging(json_format=False, level="DEBUG")

    try:
        body = asyncio.run(_invalidate(key))
    except CacheGatewayError as e:
        raise _fail(e) from e

    _echo_json(body)
