r"""Unit tests for structured logging."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from urlrequest.utils.structured_logging import (
    StructuredFormatter,
    clear_request_id,
    get_request_id,
    log_structured,
    set_request_id,
)


@pytest.fixture
def json_logger() -> tuple[logging.Logger, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("test_urlrequest_structured")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger, stream


@pytest.fixture(autouse=True)
def _clear_request_id() -> None:
    clear_request_id()


#######################################
#     Tests for request id context    #
#######################################


def test_get_request_id_initially_none() -> None:
    """Test that no request id is set by default."""
    assert get_request_id() is None


def test_set_and_get_request_id() -> None:
    """Test that set_request_id sets the request id."""
    set_request_id("req-123")
    assert get_request_id() == "req-123"


def test_clear_request_id() -> None:
    """Test that clear_request_id removes the request id."""
    set_request_id("req-456")
    clear_request_id()
    assert get_request_id() is None


#########################################
#     Tests for StructuredFormatter     #
#########################################


def test_structured_formatter_basic_fields(json_logger: tuple[logging.Logger, StringIO]) -> None:
    """Test that the formatter renders the standard fields."""
    logger, stream = json_logger
    logger.info("Request finished")

    data = json.loads(stream.getvalue())
    assert data["message"] == "Request finished"
    assert data["level"] == "INFO"
    assert data["logger"] == "test_urlrequest_structured"
    assert data["timestamp"].endswith("Z")
    assert "request_id" not in data


def test_structured_formatter_request_id(json_logger: tuple[logging.Logger, StringIO]) -> None:
    """Test that the formatter adds the request id."""
    logger, stream = json_logger
    set_request_id("job-42")
    logger.info("Request finished")
    assert json.loads(stream.getvalue())["request_id"] == "job-42"


def test_structured_formatter_extra_fields(json_logger: tuple[logging.Logger, StringIO]) -> None:
    """Test that the formatter adds the extra fields only."""
    logger, stream = json_logger
    logger.info("Request finished", extra={"url": "http://example.test/", "errno": 7})

    data = json.loads(stream.getvalue())
    assert data["url"] == "http://example.test/"
    assert data["errno"] == 7
    assert "msg" not in data
    assert "args" not in data


def test_structured_formatter_exception(json_logger: tuple[logging.Logger, StringIO]) -> None:
    """Test that the formatter adds the exception traceback."""
    logger, stream = json_logger
    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception("Request crashed")

    data = json.loads(stream.getvalue())
    assert "ValueError: boom" in data["exception"]


def test_structured_formatter_non_serializable_extra(
    json_logger: tuple[logging.Logger, StringIO],
) -> None:
    """Test that non-serializable extra fields are rendered as strings."""
    logger, stream = json_logger
    logger.info("Request finished", extra={"handle": object()})
    assert json.loads(stream.getvalue())["handle"].startswith("<object object")


####################################
#     Tests for log_structured     #
####################################


def test_log_structured(json_logger: tuple[logging.Logger, StringIO]) -> None:
    """Test that log_structured attaches the fields to the record."""
    logger, stream = json_logger
    log_structured(logger, logging.DEBUG, "Request finished", errno=0, elapsed=0.25)

    data = json.loads(stream.getvalue())
    assert data["level"] == "DEBUG"
    assert data["errno"] == 0
    assert data["elapsed"] == 0.25


def test_log_structured_respects_level(json_logger: tuple[logging.Logger, StringIO]) -> None:
    """Test that log_structured respects the logger level."""
    logger, stream = json_logger
    logger.setLevel(logging.WARNING)
    log_structured(logger, logging.DEBUG, "Request finished", errno=0)
    assert stream.getvalue() == ""
