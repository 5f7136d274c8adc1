"""Prometheus metrics for cachegate.

Provides metrics collection and exposure:
- HTTP request metrics (latency, count)
- Cache metrics (hits, misses, population failures, invalidations)
- Backing source metrics (resolution latency and outcome)

Usage:
    from cachegate.observability.metrics import get_metrics

    metrics = get_metrics()
    metrics.http_requests_total.labels(method="GET", path="/cache/{key}", status=200).inc()
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from prometheus_client import REGISTRY, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from cachegate.config import settings

if TYPE_CHECKING:
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


@dataclass
class MetricsRegistry:
    """Registry for Prometheus metrics."""

    # HTTP metrics
    http_requests_total: Any = None
    http_request_duration_seconds: Any = None

    # Cache metrics
    cache_hits_total: Any = None
    cache_misses_total: Any = None
    cache_population_failures_total: Any = None
    cache_invalidations_total: Any = None

    # Backing source metrics
    resolve_duration_seconds: Any = None

    # Internal state
    _initialized: bool = field(default=False, repr=False)
    _enabled: bool = field(default=False, repr=False)
    _registry: Any = field(default=None, repr=False)

    def initialize(self, enabled: bool | None = None) -> None:
        """Initialize Prometheus metrics.

        Args:
            enabled: Whether to create the collectors (defaults to
                ENABLE_METRICS). An explicit True also enables a registry
                that was first initialized as disabled.
        """
        if enabled is None:
            enabled = settings.enable_metrics
        if self._initialized and (self._enabled or not enabled):
            return

        if not enabled:
            logger.info("Metrics are disabled")
            self._initialized = True
            return

        if self._registry is None:
            self._registry = REGISTRY
        registry = self._registry

        self.http_requests_total = Counter(
            "cachegate_http_requests_total",
            "Total HTTP requests",
            ["method", "path", "status"],
            registry=registry,
        )

        self.http_request_duration_seconds = Histogram(
            "cachegate_http_request_duration_seconds",
            "HTTP request latency in seconds",
            ["method", "path"],
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
            registry=registry,
        )

        self.cache_hits_total = Counter(
            "cachegate_cache_hits_total", "Cache hits", registry=registry
        )
        self.cache_misses_total = Counter(
            "cachegate_cache_misses_total", "Cache misses", registry=registry
        )

        self.cache_population_failures_total = Counter(
            "cachegate_cache_population_failures_total",
            "Fresh values that could not be written to the store",
            registry=registry,
        )

        self.cache_invalidations_total = Counter(
            "cachegate_cache_invalidations_total",
            "Invalidation requests by result",
            ["result"],
            registry=registry,
        )

        self.resolve_duration_seconds = Histogram(
            "cachegate_resolve_duration_seconds",
            "Backing source resolution latency in seconds",
            ["outcome"],
            buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
            registry=registry,
        )

        self._enabled = True
        self._initialized = True
        logger.info("Prometheus metrics initialized")

    def generate_latest(self) -> bytes:
        """Generate Prometheus metrics in exposition format."""
        if not self._enabled:
            return b"# Metrics disabled\n"
        return generate_latest(self._registry)


# Global metrics registry
metrics_registry = MetricsRegistry()


def get_metrics(enabled: bool | None = None) -> MetricsRegistry:
    """Get the global metrics registry.

    Initializes metrics on first access, or when explicitly enabled.
    """
    if not metrics_registry._initialized or enabled:
        metrics_registry.initialize(enabled)
    return metrics_registry


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware for HTTP request metrics.

    Records:
    - Request count by method, route template, status
    - Request duration histogram
    """

    def __init__(self, app: "ASGIApp") -> None:
        super().__init__(app)
        self.metrics = get_metrics()

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        """Record metrics for HTTP requests."""
        if request.url.path in ("/health", "/health/live", "/health/ready", "/metrics"):
            return await call_next(request)

        method = request.method
        start_time = time.perf_counter()
        status_code = 500  # Default in case of exception

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start_time
            path = self._route_template(request)

            if self.metrics.http_requests_total:
                self.metrics.http_requests_total.labels(
                    method=method,
                    path=path,
                    status=status_code,
                ).inc()

            if self.metrics.http_request_duration_seconds:
                self.metrics.http_request_duration_seconds.labels(
                    method=method,
                    path=path,
                ).observe(duration)

    def _route_template(self, request: Request) -> str:
        """Use the matched route template to keep label cardinality low.

        /cache/posts -> /cache/{key}
        """
        route = request.scope.get("route")
        template = getattr(route, "path", None)
        return template or "unmatched"


def record_cache_hit() -> None:
    """Record cache hit."""
    metrics = get_metrics()
    if metrics.cache_hits_total:
        metrics.cache_hits_total.inc()


def record_cache_miss() -> None:
    """Record cache miss."""
    metrics = get_metrics()
    if metrics.cache_misses_total:
        metrics.cache_misses_total.inc()


def record_population_failure() -> None:
    """Record a failed write of a fresh value."""
    metrics = get_metrics()
    if metrics.cache_population_failures_total:
        metrics.cache_population_failures_total.inc()


def record_invalidation(result: str) -> None:
    """Record an invalidation.

    Args:
        result: "removed" or "not_found"
    """
    metrics = get_metrics()
    if metrics.cache_invalidations_total:
        metrics.cache_invalidations_total.labels(result=result).inc()


def record_resolve(outcome: str, duration: float) -> None:
    """Record backing source resolution.

    Args:
        outcome: "ok" or "error"
        duration: Resolution duration in seconds
    """
    metrics = get_metrics()
    if metrics.resolve_duration_seconds:
        metrics.resolve_duration_seconds.labels(outcome=outcome).observe(duration)
