"""Cache key schema for cachegate.

Key format: {prefix}:entry:{key}

Where:
- prefix: "cachegate" by default (namespace for a shared Redis database)
- key: the caller's opaque cache key, stored verbatim
"""

from __future__ import annotations


class CacheKeys:
    """Cache key generator following a consistent naming convention."""

    PREFIX = "cachegate"
    ENTRY = "entry"

    def __init__(self, prefix: str = PREFIX):
        if not prefix or ":" in prefix:
            raise ValueError(f"Invalid cache key prefix: {prefix!r}")
        self.prefix = prefix

    def entry(self, key: str) -> str:
        """Store key for a cached value."""
        return f"{self.prefix}:{self.ENTRY}:{key}"
