"""Access logging middleware.

Logs one line per request once the response is ready:

    GET /cache/posts -> 200 HIT from 127.0.0.1 in 3.2ms

The method, path, status, client host and duration are also attached as
structured fields for the JSON formatter. Cache responses add the
``cache_status`` field taken from their X-Cache header.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("cachegate.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its status and duration."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        status_code = 500
        cache_status: str | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            cache_status = response.headers.get("x-cache")
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            client_host = request.client.host if request.client else "unknown"
            fields: dict[str, Any] = {
                "http_method": request.method,
                "http_path": request.url.path,
                "http_status": status_code,
                "client_host": client_host,
                "duration_ms": round(duration_ms, 2),
            }
            outcome = ""
            if cache_status:
                fields["cache_status"] = cache_status
                outcome = f" {cache_status}"
            logger.info(
                f"{request.method} {request.url.path} -> {status_code}{outcome} "
                f"from {client_host} in {duration_ms:.1f}ms",
                extra=fields,
            )
