"""Middleware for the cachegate API.

- CORS configuration (Starlette CORSMiddleware)
- Correlation context for request tracing
- Access logging
"""

from cachegate.api.middleware.correlation import CorrelationMiddleware
from cachegate.api.middleware.cors import CORSConfig, add_cors_middleware
from cachegate.api.middleware.request_logging import RequestLoggingMiddleware

__all__ = [
    "CORSConfig",
    "CorrelationMiddleware",
    "RequestLoggingMiddleware",
    "add_cors_middleware",
]
