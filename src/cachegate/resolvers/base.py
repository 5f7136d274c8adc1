"""Backing source resolver interface.

A resolver maps a cache key (and an optional request payload) to a fresh,
JSON-serializable value. It may be a remote call or a local computation.
The engine treats it as opaque: it is not assumed to be idempotent or free
of side effects, so it is never retried.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ResolutionFailed(Exception):
    """Raised when a backing source cannot produce a value."""

    def __init__(self, key: str, reason: str, status_code: int | None = None):
        self.key = key
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to resolve '{key}': {reason}")


class BackingSourceResolver(ABC):
    """Abstract base class for backing sources."""

    @abstractmethod
    async def resolve(self, key: str, payload: Any = None) -> Any:
        """Produce a fresh value for a key.

        Args:
            key: Cache key being resolved
            payload: Optional request payload

        Returns:
            A JSON-serializable value

        Raises:
            ResolutionFailed: On network error, timeout or malformed response
        """
        ...

    async def close(self) -> None:
        """Release resources held by the resolver."""
        return None
