"""Tests for correlation and access logging middleware."""

import logging

import pytest
from fastapi import FastAPI, Response
from fastapi.testclient import TestClient

from cachegate.api.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from cachegate.observability.logging import correlation_id_var, request_id_var


class TestCorrelationMiddleware:
    """Tests for CorrelationMiddleware."""

    def _app(self) -> FastAPI:
        app = FastAPI()
        app.add_middleware(CorrelationMiddleware)

        @app.get("/test")
        async def test_endpoint() -> dict[str, str]:
            return {"request_id": request_id_var.get(), "correlation_id": correlation_id_var.get()}

        return app

    def test_generates_request_id(self) -> None:
        """A request id is generated and echoed."""
        response = TestClient(self._app()).get("/test")

        request_id = response.headers["x-request-id"]
        assert request_id
        assert response.json()["request_id"] == request_id
        assert response.headers["x-correlation-id"] == request_id

    def test_propagates_incoming_ids(self) -> None:
        """Incoming ids are kept."""
        response = TestClient(self._app()).get(
            "/test", headers={"X-Request-ID": "req-1", "X-Correlation-ID": "corr-1"}
        )

        assert response.json() == {"request_id": "req-1", "correlation_id": "corr-1"}
        assert response.headers["x-correlation-id"] == "corr-1"

    def test_context_reset_after_request(self) -> None:
        """Context variables do not leak out of the request."""
        TestClient(self._app()).get("/test", headers={"X-Request-ID": "req-2"})
        assert request_id_var.get() == ""


class TestRequestLoggingMiddleware:
    """Tests for RequestLoggingMiddleware."""

    def test_logs_request_line(self, caplog: pytest.LogCaptureFixture) -> None:
        """Each request produces one access log line with structured fields."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/cache/{key}")
        async def endpoint(key: str) -> dict[str, str]:
            return {"key": key}

        with caplog.at_level(logging.INFO, logger="cachegate.access"):
            TestClient(app).get("/cache/posts")

        records = [r for r in caplog.records if r.name == "cachegate.access"]
        assert len(records) == 1
        record = records[0]
        assert record.getMessage().startswith("GET /cache/posts -> 200 from ")
        assert record.http_status == 200  # type: ignore[attr-defined]
        assert record.http_path == "/cache/posts"  # type: ignore[attr-defined]
        assert record.duration_ms >= 0  # type: ignore[attr-defined]

    def test_logs_error_status(self, caplog: pytest.LogCaptureFixture) -> None:
        """Error responses are logged with their status."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        with caplog.at_level(logging.INFO, logger="cachegate.access"):
            TestClient(app).get("/nowhere")

        assert any("-> 404" in r.getMessage() for r in caplog.records)

    def test_logs_cache_status(self, caplog: pytest.LogCaptureFixture) -> None:
        """The X-Cache outcome is part of the access line."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/cache/{key}")
        async def endpoint(key: str, response: Response) -> dict[str, str]:
            response.headers["X-Cache"] = "HIT"
            return {"key": key}

        with caplog.at_level(logging.INFO, logger="cachegate.access"):
            TestClient(app).get("/cache/posts")

        record = next(r for r in caplog.records if r.name == "cachegate.access")
        assert record.getMessage().startswith("GET /cache/posts -> 200 HIT from ")
        assert record.cache_status == "HIT"  # type: ignore[attr-defined]

    def test_no_cache_status_outside_cache_routes(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Responses without X-Cache carry no cache_status field."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        with caplog.at_level(logging.INFO, logger="cachegate.access"):
            TestClient(app).get("/nowhere")

        record = next(r for r in caplog.records if r.name == "cachegate.access")
        assert not hasattr(record, "cache_status")
