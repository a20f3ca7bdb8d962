r"""Structured logging utilities for machine-readable log output.

The structured logging support is opt-in: attach ``StructuredFormatter``
to a handler on the ``urlrequest`` logger to get one JSON object per log
record. Request ids set with ``set_request_id`` are added to every record
emitted in the same context.

Example:
    ```python
    import logging
    from urlrequest.utils.structured_logging import StructuredFormatter, set_request_id

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("urlrequest")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    set_request_id("job-42")
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_request_id",
    "get_request_id",
    "log_structured",
    "set_request_id",
]

import contextvars
import json
import logging
import time
from typing import Any

_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


def get_request_id() -> str | None:
    """Get the request id of the current context.

    Returns:
        The request id, or ``None`` if not set.

    Example:
        ```pycon
        >>> from urlrequest.utils.structured_logging import get_request_id, set_request_id
        >>> set_request_id("req-1")
        >>> get_request_id()
        'req-1'

        ```
    """
    return _request_id.get()


def set_request_id(request_id: str) -> None:
    """Set the request id of the current context.

    Args:
        request_id: The id to attach to the log records.
    """
    _request_id.set(request_id)


def clear_request_id() -> None:
    """Clear the request id of the current context."""
    _request_id.set(None)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record is rendered as a JSON object with the fields
    ``timestamp``, ``level``, ``logger``, ``message``, ``module``,
    ``function`` and ``line``, plus ``request_id`` when one is set,
    ``exception`` when the record carries exception info, and every
    field passed through the ``extra`` argument of the logging call.

    Example:
        ```pycon
        >>> import logging
        >>> from io import StringIO
        >>> from urlrequest.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured")
        >>> logger.addHandler(handler)
        >>> logger.warning("transfer failed", extra={"errno": 7})
        >>> '"errno": 7' in stream.getvalue()
        True

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        request_id = get_request_id()
        if request_id is not None:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the record creation time as ISO 8601 in UTC.

        Args:
            record: The log record.
            datefmt: Ignored, the format is always ISO 8601.

        Returns:
            The formatted timestamp.
        """
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(logger: logging.Logger, level: int, message: str, **extra: Any) -> None:
    """Log a message with structured fields.

    Args:
        logger: Logger to use.
        level: Log level (e.g., ``logging.DEBUG``).
        message: Log message.
        **extra: Fields to attach to the record.
    """
    logger.log(level, message, extra=extra)
