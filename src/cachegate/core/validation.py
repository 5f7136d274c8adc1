"""Input validation for cache keys and TTLs.

Both checks run before the engine touches the store, so a rejected
request never has side effects.
"""

from __future__ import annotations

import re
from typing import Any

from cachegate.core.errors import InvalidRequest

_DIGITS = re.compile(r"[0-9]+")


def validate_key(key: Any) -> str:
    """Return the key if it is a non-empty string.

    Raises:
        InvalidRequest: If the key is missing, not a string or blank
    """
    if not isinstance(key, str) or not key.strip():
        raise InvalidRequest("Cache key must be a non-empty string")
    return key


def validate_ttl(ttl: Any, max_ttl: int | None = None) -> int:
    """Coerce a TTL to a positive number of seconds.

    Accepts an int or a string of decimal digits (query parameters arrive
    as strings). Booleans, floats and anything non-numeric are rejected.

    Args:
        ttl: Raw TTL value
        max_ttl: Optional upper bound in seconds

    Returns:
        TTL in seconds

    Raises:
        InvalidRequest: If the TTL is not a positive integer
    """
    if isinstance(ttl, bool):
        raise InvalidRequest("TTL must be a positive integer number of seconds")

    if isinstance(ttl, int):
        seconds = ttl
    elif isinstance(ttl, str) and _DIGITS.fullmatch(ttl.strip()):
        seconds = int(ttl.strip())
    else:
        raise InvalidRequest("TTL must be a positive integer number of seconds")

    if seconds <= 0:
        raise InvalidRequest("TTL must be a positive integer number of seconds")
    if max_ttl is not None and seconds > max_ttl:
        raise InvalidRequest(f"TTL must not exceed {max_ttl} seconds")
    return seconds


def validate_payload(payload: Any) -> Any:
    """Return a caller-supplied payload if it can be cached.

    JSON ``null`` is rejected: a cached null could not be told apart from
    a missing body.

    Raises:
        InvalidRequest: If the payload is None
    """
    if payload is None:
        raise InvalidRequest("Payload must be a non-null JSON value")
    return payload
