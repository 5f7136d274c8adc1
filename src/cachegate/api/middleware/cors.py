"""CORS (Cross-Origin Resource Sharing) middleware configuration.

Provides configurable CORS settings for the cachegate API:
- Whitelist-based origin validation
- Configurable allowed methods and headers
- Credential support for authenticated requests
- Preflight caching

Security notes:
- Never use "*" for origins in production with credentials
- Be restrictive with allowed methods and headers
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from cachegate.config import Settings


@dataclass
class CORSConfig:
    """CORS configuration settings.

    Attributes:
        allow_origins: List of allowed origins (e.g., ["https://example.com"])
        allow_methods: Allowed HTTP methods
        allow_headers: Allowed request headers
        allow_credentials: Whether to allow credentials (cookies, auth headers)
        expose_headers: Headers to expose to the browser
        max_age: Preflight cache duration in seconds
    """

    allow_origins: list[str] = field(default_factory=lambda: ["*"])

    allow_methods: list[str] = field(
        default_factory=lambda: ["GET", "POST", "DELETE", "OPTIONS"]
    )

    allow_headers: list[str] = field(
        default_factory=lambda: [
            "Authorization",
            "Content-Type",
            "X-Request-ID",
            "X-Correlation-ID",
            "Accept",
        ]
    )

    allow_credentials: bool = False

    # Exposed headers - what the browser can access
    expose_headers: list[str] = field(
        default_factory=lambda: [
            "X-Request-ID",
            "X-Correlation-ID",
            "X-Cache",
            "X-Cache-Warning",
        ]
    )

    # Preflight cache (10 minutes default)
    max_age: int = 600

    @classmethod
    def from_origins(
        cls,
        origins: str | Sequence[str],
        allow_credentials: bool = False,
        max_age: int = 600,
    ) -> CORSConfig:
        """Create config from an origin list or a comma-separated string.

        Raises:
            ValueError: If credentials are combined with wildcard origins
        """
        if isinstance(origins, str):
            parsed = ["*"] if origins.strip() == "*" else [
                o.strip() for o in origins.split(",") if o.strip()
            ]
        else:
            parsed = list(origins)

        if not parsed:
            raise ValueError("CORS requires at least one allowed origin")

        # Validate: can't use credentials with wildcard origins
        if allow_credentials and "*" in parsed:
            raise ValueError(
                "CORS_CREDENTIALS=true cannot be used with CORS_ORIGINS=*. "
                "Specify explicit origins when using credentials."
            )

        return cls(allow_origins=parsed, allow_credentials=allow_credentials, max_age=max_age)

    @classmethod
    def from_settings(cls, app_settings: Settings) -> CORSConfig:
        """Create config from application settings."""
        return cls.from_origins(
            app_settings.cors_origins,
            allow_credentials=app_settings.cors_allow_credentials,
            max_age=app_settings.cors_max_age,
        )


def add_cors_middleware(app: FastAPI, config: CORSConfig | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Args:
        app: FastAPI application
        config: CORS configuration (defaults to allowing any origin)
    """
    config = config or CORSConfig()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allow_origins,
        allow_credentials=config.allow_credentials,
        allow_methods=config.allow_methods,
        allow_headers=config.allow_headers,
        expose_headers=config.expose_headers,
        max_age=config.max_age,
    )
