r"""Parameter validation utilities.

This module provides the validation functions used by the request
executor and the transport configuration to check arguments before
they are stored.
"""

from __future__ import annotations

__all__ = ["validate_max_redirects", "validate_timeout", "validate_url"]

from typing import Any

from urlrequest.exceptions import InvalidArgumentError


def validate_url(url: Any) -> None:
    """Validate a request URL.

    Args:
        url: The URL to validate. ``None`` is accepted and means
            "no URL configured yet".

    Raises:
        InvalidArgumentError: If url is neither a string nor ``None``.

    Example:
        ```pycon
        >>> from urlrequest.utils.validation import validate_url
        >>> validate_url("https://example.com")
        >>> validate_url(None)
        >>> validate_url(124)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        urlrequest.exceptions.InvalidArgumentError: argument must be a string, got int

        ```
    """
    if url is not None and not isinstance(url, str):
        msg = f"argument must be a string, got {type(url).__name__}"
        raise InvalidArgumentError(msg)


def validate_timeout(timeout: float, name: str = "timeout") -> None:
    """Validate a timeout value.

    Args:
        timeout: Maximum seconds to wait. Must be > 0.
        name: The parameter name used in the error message.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from urlrequest.utils.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"{name} must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_max_redirects(max_redirects: int) -> None:
    """Validate the maximum number of redirects.

    Args:
        max_redirects: Maximum number of redirects to follow. Must be >= 0.

    Raises:
        ValueError: If max_redirects is negative.
    """
    if max_redirects < 0:
        msg = f"max_redirects must be >= 0, got {max_redirects}"
        raise ValueError(msg)
