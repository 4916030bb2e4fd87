"""Tests for stdout logging configuration and context-aware formatters."""

from __future__ import annotations

import json
import logging

import pytest

from packages.filestore_shared.logging import config as logging_config
from packages.filestore_shared.logging.context import clear_context


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    clear_context()
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(message: str) -> logging.LogRecord:
    record = logging.LogRecord(
        name="filestore.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    logging_config.ContextFilter().filter(record)
    return record


def test_configure_logging_installs_single_handler() -> None:
    """Repeated configuration should replace, not duplicate, root handlers."""
    logging_config.configure_logging(level="debug", json_output=True)
    logging_config.configure_logging(level="debug", json_output=True)

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
    assert isinstance(root.handlers[0].formatter, logging_config.JsonFormatter)


def test_json_formatter_includes_seeded_context() -> None:
    """Service and environment seeds should appear in every JSON record."""
    logging_config.configure_logging(
        json_output=True, service="filestore", environment="test"
    )

    payload = json.loads(logging_config.JsonFormatter().format(_record("hello")))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["service"] == "filestore"
    assert payload["environment"] == "test"


def test_plain_formatter_appends_sorted_context() -> None:
    """Plain output should end with key=value pairs of bound context."""
    logging_config.configure_logging(
        json_output=False, service="filestore", environment="test"
    )

    line = logging_config.PlainFormatter().format(_record("hello"))

    assert line.endswith("hello environment=test service=filestore")
