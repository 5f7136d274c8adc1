"""Structured error responses for cachegate.

Every error leaves the API as ``{"error": <message>, "kind": <kind>}``.
Engine error kinds map to HTTP status codes here and nowhere else.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel

from cachegate.core.errors import CacheGatewayError, ErrorKind

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.UPSTREAM_FAILURE: 502,
    ErrorKind.STORE_UNAVAILABLE: 503,
    # Never raised by the engine; listed so every kind has a status.
    ErrorKind.CACHE_POPULATION_FAILED: 500,
}

INTERNAL_ERROR_KIND = "InternalError"


class ErrorBody(BaseModel):
    """Error response body."""

    model_config = {"extra": "forbid"}

    error: str
    kind: str


class ApiError(HTTPException):
    """Base exception for API errors."""

    def __init__(self, status_code: int, kind: str, text: str):
        self.kind = kind
        self.text = text
        super().__init__(status_code=status_code, detail=text)

    def to_body(self) -> ErrorBody:
        return ErrorBody(error=self.text, kind=self.kind)

    @classmethod
    def from_gateway_error(cls, exc: CacheGatewayError) -> ApiError:
        """Translate an engine error into its HTTP form."""
        return cls(
            status_code=STATUS_BY_KIND.get(exc.kind, 500),
            kind=exc.kind.value,
            text=exc.message,
        )


class BadRequestError(ApiError):
    """Invalid request (400)."""

    def __init__(self, text: str):
        super().__init__(status_code=400, kind=ErrorKind.INVALID_REQUEST.value, text=text)


class InternalServerError(ApiError):
    """Internal server error (500)."""

    def __init__(self, text: str = "An unexpected error occurred"):
        super().__init__(status_code=500, kind=INTERNAL_ERROR_KIND, text=text)


async def api_exception_handler(request: Request, exc: ApiError) -> ORJSONResponse:
    """Exception handler for API errors."""
    return ORJSONResponse(status_code=exc.status_code, content=exc.to_body().model_dump())


async def gateway_exception_handler(request: Request, exc: CacheGatewayError) -> ORJSONResponse:
    """Exception handler for errors raised by the engine."""
    return await api_exception_handler(request, ApiError.from_gateway_error(exc))


async def generic_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Exception handler for unexpected errors."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return await api_exception_handler(request, InternalServerError())
