"""Error taxonomy for the cache-aside engine.

Every failure the engine reports carries an ``ErrorKind`` so that a request
boundary (HTTP, CLI) can map it to its own status signal without inspecting
exception types.

- InvalidRequest: bad or missing key/TTL, detected before any I/O
- UpstreamFailure: the backing source could not produce a value
- StoreUnavailable: the key-value store could not be reached
- CachePopulationFailed: writing a freshly resolved value failed (non-fatal)
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Kind of engine failure."""

    INVALID_REQUEST = "InvalidRequest"
    UPSTREAM_FAILURE = "UpstreamFailure"
    STORE_UNAVAILABLE = "StoreUnavailable"
    CACHE_POPULATION_FAILED = "CachePopulationFailed"


class CacheGatewayError(Exception):
    """Base class for errors surfaced by the engine."""

    kind: ErrorKind

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        """Structured error result: ``{error, kind}``."""
        return {"error": self.message, "kind": self.kind.value}


class InvalidRequest(CacheGatewayError):
    """The caller supplied an unusable key, TTL or payload."""

    kind = ErrorKind.INVALID_REQUEST


class UpstreamFailure(CacheGatewayError):
    """The backing source failed to resolve a value."""

    kind = ErrorKind.UPSTREAM_FAILURE

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class StoreUnavailable(CacheGatewayError):
    """The key-value store could not be reached."""

    kind = ErrorKind.STORE_UNAVAILABLE


class CachePopulationFailed(CacheGatewayError):
    """A fresh value could not be written to the store.

    Never raised to callers of the engine; it is attached to the fresh
    result as a warning.
    """

    kind = ErrorKind.CACHE_POPULATION_FAILED
