"""Observability module for cachegate.

Provides metrics and structured logging:
- Prometheus metrics
- Request/response instrumentation
- JSON structured logging with correlation IDs and cache keys
"""

from cachegate.observability.logging import (
    bind_cache_key,
    cache_key_var,
    configure_logging,
    correlation_id_var,
    request_id_var,
)
from cachegate.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    metrics_registry,
)

__all__ = [
    # Logging
    "configure_logging",
    "bind_cache_key",
    "cache_key_var",
    "request_id_var",
    "correlation_id_var",
    # Metrics
    "metrics_registry",
    "get_metrics",
    "MetricsMiddleware",
]
