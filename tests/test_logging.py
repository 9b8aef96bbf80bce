from __future__ import annotations

import json
import logging

from network_client.utils.logging import (
    DEFAULT_LOGGER_NAME,
    JsonFormatter,
    default_logger,
)


def test_default_logger_writes_debug_to_stdout() -> None:
    logger = default_logger()
    assert logger.name == DEFAULT_LOGGER_NAME
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    # Calling again must not stack handlers.
    assert default_logger() is logger
    assert len(logger.handlers) == 1


def test_json_formatter_renders_request_context() -> None:
    record = logging.LogRecord(
        name="network_client",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="retrying %s",
        args=("/users",),
        exc_info=None,
    )
    record.attempts_left = 0
    record.error_kind = "read_timeout"
    record.unrelated = "dropped"

    data = json.loads(JsonFormatter().format(record))

    assert data["level"] == "WARNING"
    assert data["logger"] == "network_client"
    assert data["message"] == "retrying /users"
    assert data["attempts_left"] == 0
    assert data["error_kind"] == "read_timeout"
    assert "unrelated" not in data
    assert "status" not in data


def test_default_logger_applies_level_and_format() -> None:
    logger = default_logger(level=logging.WARNING, structured=True)
    try:
        assert logger.level == logging.WARNING
        assert all(isinstance(h.formatter, JsonFormatter) for h in logger.handlers)
    finally:
        default_logger(level=logging.DEBUG, structured=False)
    assert not any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers)

