"""Tests for structured logging."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator

import pytest

from cachegate.observability.logging import (
    ConsoleFormatter,
    JsonFormatter,
    bind_cache_key,
    cache_key_var,
    configure_logging,
    correlation_id_var,
    request_id_var,
)


def _record(message: str = "Cache hit: posts", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="cachegate.core.engine",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
        func="fetch_or_populate",
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_basic_fields(self) -> None:
        """Output is a JSON object with the standard fields."""
        data = json.loads(JsonFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "cachegate.core.engine"
        assert data["message"] == "Cache hit: posts"
        assert data["function"] == "fetch_or_populate"
        assert "request_id" not in data

    def test_includes_correlation_context(self) -> None:
        """Context variables are copied into the record."""
        request_token = request_id_var.set("req-1")
        correlation_token = correlation_id_var.set("corr-1")
        try:
            data = json.loads(JsonFormatter().format(_record()))
        finally:
            request_id_var.reset(request_token)
            correlation_id_var.reset(correlation_token)

        assert data["request_id"] == "req-1"
        assert data["correlation_id"] == "corr-1"

    def test_includes_cache_key(self) -> None:
        """A bound cache key is emitted as cache_key."""
        with bind_cache_key("users/1"):
            data = json.loads(JsonFormatter().format(_record()))

        assert data["cache_key"] == "users/1"
        assert "cache_key" not in json.loads(JsonFormatter().format(_record()))

    def test_extra_fields(self) -> None:
        """Extra attributes are serialized, unserializable ones as strings."""
        data = json.loads(JsonFormatter().format(_record(http_status=200, client=object())))

        assert data["http_status"] == 200
        assert data["client"].startswith("<object object")

    def test_exception_info(self) -> None:
        """Exceptions include type, message and traceback."""
        try:
            raise ValueError("bad value")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()

        data = json.loads(JsonFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad value"
        assert "Traceback" in data["exception"]["traceback"]


class TestConsoleFormatter:
    """Tests for ConsoleFormatter."""

    def test_plain_output(self) -> None:
        """Without colors the line is pipe-separated."""
        line = ConsoleFormatter(use_colors=False).format(_record())

        assert "| INFO     | cachegate.core.engine | Cache hit: posts" in line

    def test_request_id_suffix(self) -> None:
        """The request id is abbreviated."""
        token = request_id_var.set("0123456789abcdef")
        try:
            line = ConsoleFormatter(use_colors=False).format(_record())
        finally:
            request_id_var.reset(token)

        assert line.endswith("| req=01234567")

    def test_cache_key_suffix(self) -> None:
        """The cache key follows the request id."""
        token = request_id_var.set("0123456789abcdef")
        try:
            with bind_cache_key("posts"):
                line = ConsoleFormatter(use_colors=False).format(_record())
        finally:
            request_id_var.reset(token)

        assert line.endswith("| req=01234567 | key=posts")


class TestBindCacheKey:
    """Tests for bind_cache_key."""

    def test_nested_bindings_restore(self) -> None:
        """Leaving a block restores the outer key, even on error."""
        with bind_cache_key("outer"):
            with pytest.raises(RuntimeError):
                with bind_cache_key("inner"):
                    assert cache_key_var.get() == "inner"
                    raise RuntimeError("boom")
            assert cache_key_var.get() == "outer"

        assert cache_key_var.get() == ""


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.usefixtures("restore_root_logger")
    def test_json_handler(self) -> None:
        """A single handler with the JSON formatter is installed."""
        configure_logging(json_format=True, level="WARNING")

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    @pytest.mark.usefixtures("restore_root_logger")
    def test_console_handler(self) -> None:
        """Console format is used for development."""
        configure_logging(json_format=False, level="debug")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, ConsoleFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING

