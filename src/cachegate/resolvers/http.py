"""HTTP backing source.

Resolves a cache key by fetching ``GET {base_url}/{key}`` from an upstream
JSON API and decoding the body. The key is used as the resource path, so
"posts" maps to ``/posts`` and "users/1" to ``/users/1``.

Timeouts are enforced by the httpx client; a timeout surfaces as
ResolutionFailed like any other transport error.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
import orjson

from cachegate.resolvers.base import BackingSourceResolver, ResolutionFailed

logger = logging.getLogger(__name__)


class HttpResolver(BackingSourceResolver):
    """Fetch values from an upstream JSON API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, headers=headers)

    def url_for(self, key: str) -> str:
        """Upstream URL for a cache key."""
        return f"{self.base_url}/{quote(key.strip('/'), safe='/')}"

    async def resolve(self, key: str, payload: Any = None) -> Any:
        url = self.url_for(key)
        try:
            response = await self._client.get(url, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise ResolutionFailed(key, f"upstream timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ResolutionFailed(key, f"upstream request failed: {e}") from e

        if not response.is_success:
            raise ResolutionFailed(
                key,
                f"upstream returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            value = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise ResolutionFailed(
                key, "upstream returned a malformed JSON body", status_code=response.status_code
            ) from e

        logger.debug(f"Resolved '{key}' from {url}")
        return value

    async def close(self) -> None:
        """Close the HTTP client if this resolver created it."""
        if self._owns_client:
            await self._client.aclose()
