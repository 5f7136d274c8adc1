"""Health check endpoints for cachegate.

Provides Kubernetes-compatible liveness and readiness probes:
- /             - Banner (plain text)
- /health/live  - Liveness probe (always returns OK if process is running)
- /health/ready - Readiness probe (checks key-value store connectivity)
- /health       - Full report for external checks
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse, PlainTextResponse

from cachegate.api.deps import SettingsDep, StoreDep
from cachegate.cache.store import KeyValueStore

router = APIRouter(tags=["health"])

STORE_CHECK_TIMEOUT = 5.0  # seconds


class HealthStatus(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of a single component."""

    name: str
    status: HealthStatus
    latency_ms: float
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "latency_ms": round(self.latency_ms, 2),
        }
        if self.message:
            result["message"] = self.message
        return result


async def check_store(store: KeyValueStore) -> ComponentHealth:
    """Check key-value store connectivity."""
    start = time.monotonic()
    try:
        healthy = await asyncio.wait_for(store.ping(), timeout=STORE_CHECK_TIMEOUT)
        message = None if healthy else "Store ping failed"
    except asyncio.TimeoutError:
        healthy = False
        message = "Store check timed out"
    latency = (time.monotonic() - start) * 1000
    return ComponentHealth(
        name="store",
        status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
        latency_ms=latency,
        message=message,
    )


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def banner(app_settings: SettingsDep) -> str:
    return f"{app_settings.app_name} is running"


@router.get("/health")
async def full_health(store: StoreDep) -> JSONResponse:
    """Full health report for external checks.

    Returns 200 when the store is reachable, 503 otherwise.
    """
    component = await check_store(store)
    is_healthy = component.status == HealthStatus.HEALTHY

    check: dict[str, Any] = {
        "status": "up" if is_healthy else "down",
        "latency_ms": round(component.latency_ms, 2),
    }
    if component.message:
        check["message"] = component.message

    return JSONResponse(
        content={"status": component.status.value, "checks": {component.name: check}},
        status_code=200 if is_healthy else 503,
    )


@router.get("/health/live")
async def live() -> dict[str, str]:
    """Liveness probe.

    Returns OK if the process is running. Used by Kubernetes
    to determine if the container should be restarted.
    """
    return {"status": "ok"}


@router.get("/health/ready")
async def ready(store: StoreDep) -> JSONResponse:
    """Readiness probe.

    Returns 200 if the key-value store answers, 503 otherwise.
    Used by Kubernetes to determine if the pod should receive traffic.
    """
    component = await check_store(store)
    result = {"status": component.status.value, "components": [component.to_dict()]}
    status_code = 200 if component.status == HealthStatus.HEALTHY else 503
    return JSONResponse(content=result, status_code=status_code)
