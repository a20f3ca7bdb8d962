r"""urlrequest - Single HTTP requests over a handle-based transfer API.

This package exposes the primitives of an HTTP transfer library (open a
handle, set options, execute, read the error state, close) through a
transport interface, and provides ``UrlRequest`` to run one complete
request/response cycle with a few lines of code.

Key Features:
    - curl-compatible option, info and error codes
    - ``HttpxTransport``: transport backed by httpx
    - ``MockTransport``: transport recording calls, for tests
    - Transfer failures reported through error message/code, never raised
    - Optional structured (JSON) logging

Example:
    ```pycon
    >>> from urlrequest import HttpxTransport, TransferOption, UrlRequest
    >>> request = UrlRequest("https://example.com", HttpxTransport())
    >>> request.add_option(TransferOption.RETURNTRANSFER, 1).add_option(
    ...     TransferOption.CONNECTTIMEOUT, 5
    ... )  # doctest: +ELLIPSIS
    UrlRequest(...)
    >>> if request.execute().get_errno() == 0:  # doctest: +SKIP
    ...     content = request.get_content()
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "BaseTransport",
    "ConfigurationError",
    "ErrorCode",
    "HttpxTransport",
    "InvalidArgumentError",
    "MockTransport",
    "TransferInfo",
    "TransferOption",
    "TransportConfig",
    "UrlRequest",
    "UrlRequestError",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from urlrequest.config import TransportConfig
from urlrequest.exceptions import ConfigurationError, InvalidArgumentError, UrlRequestError
from urlrequest.options import ErrorCode, TransferInfo, TransferOption
from urlrequest.request import UrlRequest
from urlrequest.transport import BaseTransport, HttpxTransport, MockTransport

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
