"""Tests for structured logging configuration."""

import io
import json
import logging
from collections.abc import Generator

import pytest
import structlog

from svnmirror.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    get_logger,
)


@pytest.fixture
def log_output() -> Generator[io.StringIO, None, None]:
    """Route JSON logs into a buffer and restore defaults afterwards."""
    buffer = io.StringIO()
    configure_logging(level=logging.INFO, output=buffer, json_format=True)
    yield buffer
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def lines(buffer: io.StringIO) -> list[dict[str, object]]:
    return [json.loads(line) for line in buffer.getvalue().splitlines() if line]


class TestConfigureLogging:
    """Tests for configure_logging and run context helpers."""

    def test_json_event(self, log_output: io.StringIO) -> None:
        """Test that events are rendered as JSON with level and timestamp."""
        get_logger().info("checkout_started", max_workers=2)

        [record] = lines(log_output)
        assert record["event"] == "checkout_started"
        assert record["level"] == "info"
        assert record["max_workers"] == 2
        assert "timestamp" in record

    def test_level_filter(self, log_output: io.StringIO) -> None:
        """Test that debug events are dropped at INFO level."""
        get_logger().debug("mkdir", rel="a/")

        assert lines(log_output) == []

    def test_run_context(self, log_output: io.StringIO) -> None:
        """Test that the bound run id is added until cleared."""
        log = get_logger()

        bind_run_context("run-123")
        log.info("first")
        clear_run_context()
        log.info("second")

        first, second = lines(log_output)
        assert first["run_id"] == "run-123"
        assert "run_id" not in second
