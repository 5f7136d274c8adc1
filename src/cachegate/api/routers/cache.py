"""Cache endpoints.

- GET    /cache/{key}?ttl=60   fetch, resolving from the backing source on a miss
- POST   /cache/{key}?ttl=60   fetch, storing the JSON request body on a miss
- DELETE /cache/{key}          invalidate

Keys may contain slashes ("users/1"). The TTL is passed through to the
engine unparsed so that its validation rules apply to HTTP callers too.
"""

from __future__ import annotations

from typing import Annotated, Any

import orjson
from fastapi import APIRouter, Query, Request
from fastapi.responses import ORJSONResponse

from cachegate.api.deps import CacheKeyPath, EngineDep, SettingsDep
from cachegate.api.errors import BadRequestError
from cachegate.config import Settings
from cachegate.core.engine import (
    AUTO_RESOLVE,
    CacheAsideEngine,
    CallerSupplied,
    FetchResult,
    PayloadMode,
)
from cachegate.core.validation import validate_payload

router = APIRouter(prefix="/cache", tags=["cache"])

TtlQuery = Annotated[
    str | None,
    Query(description="Time-to-live in seconds applied when the entry is populated"),
]


def _fetch_response(result: FetchResult) -> ORJSONResponse:
    headers = {"X-Cache": "HIT" if result.cached else "MISS"}
    if result.warning is not None:
        headers["X-Cache-Warning"] = result.warning.kind.value
    return ORJSONResponse(content=result.to_dict(), headers=headers)


async def _read_payload(request: Request) -> Any:
    body = await request.body()
    if not body.strip():
        raise BadRequestError("Request body must contain a JSON payload to cache")
    try:
        payload = orjson.loads(body)
    except orjson.JSONDecodeError:
        raise BadRequestError("Request body is not valid JSON")
    return validate_payload(payload)


async def _fetch(
    engine: CacheAsideEngine,
    app_settings: Settings,
    key: str,
    ttl: str | None,
    payload_mode: PayloadMode,
) -> ORJSONResponse:
    result = await engine.fetch_or_populate(
        key,
        ttl if ttl is not None else app_settings.default_ttl_seconds,
        payload_mode,
    )
    return _fetch_response(result)


@router.get("/{key:path}", summary="Fetch a value, resolving it on a cache miss")
async def fetch(
    key: CacheKeyPath,
    engine: EngineDep,
    app_settings: SettingsDep,
    ttl: TtlQuery = None,
) -> ORJSONResponse:
    """Return ``{source, data}``; ``source`` is "cache" on a hit, "fresh" otherwise."""
    return await _fetch(engine, app_settings, key, ttl, AUTO_RESOLVE)


@router.post("/{key:path}", summary="Fetch a value, caching the request body on a miss")
async def fetch_with_payload(
    key: CacheKeyPath,
    request: Request,
    engine: EngineDep,
    app_settings: SettingsDep,
    ttl: TtlQuery = None,
) -> ORJSONResponse:
    """Dynamic cache: a miss stores the JSON body verbatim without calling upstream.

    A hit returns the cached value and ignores the body.
    """
    payload = await _read_payload(request)
    return await _fetch(engine, app_settings, key, ttl, CallerSupplied(payload))


@router.delete("/{key:path}", summary="Invalidate a cached value")
async def invalidate(key: CacheKeyPath, engine: EngineDep) -> ORJSONResponse:
    """Return ``{success: true, data}`` or ``{success: false, message: "not found"}``.

    A missing key is a normal outcome and is answered with 200.
    """
    result = await engine.invalidate(key)
    return ORJSONResponse(content=result.to_dict(key))
