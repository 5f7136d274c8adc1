"""Tests for Prometheus metrics helpers."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY, CollectorRegistry

from cachegate.api.app import create_app
from cachegate.config import Settings
from cachegate.observability import metrics
from cachegate.observability.metrics import (
    MetricsRegistry,
    get_metrics,
    record_cache_hit,
    record_invalidation,
    record_resolve,
)
from tests.conftest import POSTS, CountingResolver, SpyStore


def _sample(name: str, labels: dict[str, str] | None = None) -> float:
    value = REGISTRY.get_sample_value(name, labels or {})
    return value or 0.0


class TestMetricsRegistry:
    """Tests for the metrics registry."""

    def test_get_metrics_initializes_once(self) -> None:
        """Repeated access returns the same initialized registry."""
        first = get_metrics()
        second = get_metrics()

        assert first is second
        assert first.cache_hits_total is not None

    def test_uninitialized_registry_reports_disabled(self) -> None:
        """A registry that was never initialized exposes nothing."""
        assert MetricsRegistry().generate_latest() == b"# Metrics disabled\n"


class TestRecorders:
    """Tests for the record_* helpers."""

    def test_record_cache_hit(self) -> None:
        """Hits increment the counter."""
        get_metrics()
        before = _sample("cachegate_cache_hits_total")

        record_cache_hit()

        assert _sample("cachegate_cache_hits_total") == before + 1

    def test_record_invalidation(self) -> None:
        """Invalidations are labelled by result."""
        get_metrics()
        labels = {"result": "not_found"}
        before = _sample("cachegate_cache_invalidations_total", labels)

        record_invalidation("not_found")

        assert _sample("cachegate_cache_invalidations_total", labels) == before + 1

    def test_record_resolve(self) -> None:
        """Resolver latency is observed per outcome."""
        get_metrics()
        labels = {"outcome": "error"}
        before = _sample("cachegate_resolve_duration_seconds_count", labels)

        record_resolve("error", 0.2)

        assert _sample("cachegate_resolve_duration_seconds_count", labels) == before + 1


class TestEnablement:
    """The enable flag passed in wins over ENABLE_METRICS."""

    def test_disabled_by_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without an explicit flag the environment setting applies."""
        monkeypatch.setattr(metrics, "settings", Settings(enable_metrics=False))
        registry = MetricsRegistry(_registry=CollectorRegistry())

        registry.initialize()

        assert registry.cache_hits_total is None
        assert registry.generate_latest() == b"# Metrics disabled\n"

    def test_explicit_enable_overrides_disabled_registry(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A registry first initialized as disabled can be enabled later."""
        monkeypatch.setattr(metrics, "settings", Settings(enable_metrics=False))
        registry = MetricsRegistry(_registry=CollectorRegistry())
        registry.initialize()

        registry.initialize(enabled=True)
        registry.cache_hits_total.inc()

        assert b"cachegate_cache_hits_total 1.0" in registry.generate_latest()

    def test_app_settings_enable_metrics(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """create_app serves metrics when its settings enable them."""
        monkeypatch.setattr(metrics, "settings", Settings(enable_metrics=False))
        monkeypatch.setattr(
            metrics, "metrics_registry", MetricsRegistry(_registry=CollectorRegistry())
        )
        app = create_app(
            Settings(store_backend="memory", enable_metrics=True),
            store=SpyStore(),
            resolver=CountingResolver({"posts": POSTS}),
            configure_logs=False,
        )

        with TestClient(app) as client:
            client.get("/cache/posts")
            client.get("/cache/posts")
            body = client.get("/metrics").text

        assert "# Metrics disabled" not in body
        assert "cachegate_cache_hits_total 1.0" in body
