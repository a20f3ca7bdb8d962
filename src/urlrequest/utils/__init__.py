r"""Utility functions for validation and structured logging."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_request_id",
    "get_request_id",
    "log_structured",
    "set_request_id",
    "validate_max_redirects",
    "validate_timeout",
    "validate_url",
]

from urlrequest.utils.structured_logging import (
    StructuredFormatter,
    clear_request_id,
    get_request_id,
    log_structured,
    set_request_id,
)
from urlrequest.utils.validation import validate_max_redirects, validate_timeout, validate_url
