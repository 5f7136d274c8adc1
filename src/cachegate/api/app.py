"""FastAPI application factory for cachegate.

Creates the application with:
- Cache endpoints (fetch, fetch with payload, invalidate)
- Health and Prometheus metrics endpoints
- Lifecycle management for the key-value store and backing source
- Structured error handling
- CORS, correlation IDs and access logging
- ORJSON for fast JSON serialization
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import cast

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse
from starlette.types import ExceptionHandler

from cachegate import __version__
from cachegate.api.errors import (
    ApiError,
    api_exception_handler,
    gateway_exception_handler,
    generic_exception_handler,
)
from cachegate.api.middleware import (
    CORSConfig,
    CorrelationMiddleware,
    RequestLoggingMiddleware,
    add_cors_middleware,
)
from cachegate.api.routers import cache, health
from cachegate.api.routers import metrics as metrics_router
from cachegate.cache.store import KeyValueStore
from cachegate.config import Settings, settings
from cachegate.core.errors import CacheGatewayError
from cachegate.observability import configure_logging
from cachegate.observability.metrics import MetricsMiddleware, get_metrics
from cachegate.resolvers.base import BackingSourceResolver
from cachegate.runtime import open_engine

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    store: KeyValueStore | None = None,
    resolver: BackingSourceResolver | None = None,
    configure_logs: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to the environment)
        store: Store to use instead of the configured one; left open on shutdown
        resolver: Resolver to use instead of the configured one; left open on shutdown
        configure_logs: Install the logging handlers on startup
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle.

        On startup:
        - Configure structured logging
        - Open the key-value store and backing source

        On shutdown:
        - Close the store and backing source opened at startup
        """
        if configure_logs:
            configure_logging(json_format=app_settings.use_json_logs, level=app_settings.log_level)
        logger.info(f"Starting {app_settings.app_name} ({app_settings.env})")
        async with open_engine(app_settings, store=store, resolver=resolver) as engine:
            app.state.engine = engine
            app.state.store = engine.store
            logger.info(f"{app_settings.app_name} startup complete")

            yield

            logger.info(f"Shutting down {app_settings.app_name}")
        logger.info(f"{app_settings.app_name} shutdown complete")

    app = FastAPI(
        title="cachegate",
        description="Cache-aside HTTP gateway",
        version=__version__,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # Order: CORS (outer) -> correlation -> access log -> metrics (inner)
    if app_settings.enable_metrics:
        get_metrics(enabled=True)
        app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)
    add_cors_middleware(app, CORSConfig.from_settings(app_settings))

    app.add_exception_handler(ApiError, cast(ExceptionHandler, api_exception_handler))
    app.add_exception_handler(
        CacheGatewayError, cast(ExceptionHandler, gateway_exception_handler)
    )
    app.add_exception_handler(Exception, cast(ExceptionHandler, generic_exception_handler))

    app.include_router(health.router)
    app.include_router(cache.router)
    if app_settings.enable_metrics:
        app.include_router(metrics_router.router)

    return app
