"""Tests for structured logging and secret masking."""

from __future__ import annotations

import io
import json
import logging
from typing import Generator

import pytest

from AdoRest.Core.logging_utils import (
    PACKAGE_LOGGER,
    JSONFormatter,
    mask_sensitive_data,
    setup_logging,
    setup_logging_from_settings,
)
from AdoRest.Core.settings import AdoSettings


@pytest.fixture
def package_logger() -> Generator[logging.Logger, None, None]:
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in list(logger.handlers):
        if handler not in saved[0]:
            logger.removeHandler(handler)
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_mask_sensitive_keys_and_header_values() -> None:
    masked = mask_sensitive_data(
        {
            "Authorization": "Basic OnNlY3JldA==",
            "headers": {"token": "abc", "accept": "application/json"},
            "note": "Bearer eyJhbGciOi",
            "status": 200,
        }
    )

    assert masked["Authorization"] == "***masked***"
    assert masked["headers"] == {"token": "***masked***", "accept": "application/json"}
    assert masked["note"] == "***masked***"
    assert masked["status"] == 200


def test_json_formatter_includes_extras() -> None:
    record = logging.LogRecord(
        "AdoRest.Core.policies", logging.INFO, __file__, 1, "GET %s -> %d", ("/x", 404), None
    )
    record.status = 404
    record.attempt = 2

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "GET /x -> 404"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "AdoRest.Core.policies"
    assert payload["status"] == 404
    assert payload["attempt"] == 2
    assert payload["timestamp"].endswith("Z")
    assert "args" not in payload


def test_setup_logging_json(package_logger: logging.Logger) -> None:
    stream = io.StringIO()
    setup_logging(level="debug", json_logs=True, stream=stream)

    logging.getLogger("AdoRest.Core.transport").debug("hello", extra={"pid": 1})

    line = json.loads(stream.getvalue().strip())
    assert line["message"] == "hello"
    assert line["pid"] == 1
    assert package_logger.level == logging.DEBUG
    assert package_logger.propagate is False


def test_setup_logging_replaces_managed_handler(package_logger: logging.Logger) -> None:
    setup_logging(stream=io.StringIO())
    setup_logging(stream=io.StringIO())

    managed = [h for h in package_logger.handlers if getattr(h, "_adorest_managed", False)]
    assert len(managed) == 1


def test_setup_logging_from_environment(
    package_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("ADO_LOGGING__LEVEL", "warning")
    monkeypatch.setenv("ADO_LOGGING__JSON_LOGS", "true")
    stream = io.StringIO()

    setup_logging_from_settings(stream=stream)
    logging.getLogger("AdoRest.Core.retry").info("dropped")
    logging.getLogger("AdoRest.Core.retry").warning("kept", extra={"attempt": 3})

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert [line["message"] for line in lines] == ["kept"]
    assert lines[0]["attempt"] == 3
    assert package_logger.level == logging.WARNING


def test_setup_logging_from_explicit_settings(package_logger: logging.Logger) -> None:
    settings = AdoSettings(logging={"level": "DEBUG", "json_logs": False})
    stream = io.StringIO()

    setup_logging_from_settings(settings, stream=stream)
    logging.getLogger("AdoRest.Core.transport").debug("plain")

    assert stream.getvalue().strip() == "DEBUG AdoRest.Core.transport: plain"
