"""API routers for cachegate."""

from cachegate.api.routers import cache, health, metrics

__all__ = ["cache", "health", "metrics"]
