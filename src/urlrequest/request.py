r"""Perform a single request through a transport.

``UrlRequest`` holds a URL, a transport and a set of options, and runs
one init/setopt/exec/close cycle each time ``execute`` is called. The
result of the last cycle (content, error message and error code) stays
available until the next call.
"""

from __future__ import annotations

__all__ = ["UrlRequest"]

import logging
import time
from typing import TYPE_CHECKING, Any

from urlrequest.config import DEFAULT_OPTIONS
from urlrequest.exceptions import ConfigurationError
from urlrequest.utils.structured_logging import log_structured
from urlrequest.utils.validation import validate_url

if TYPE_CHECKING:
    from typing import Self

    from urlrequest.transport.base import BaseTransport

logger: logging.Logger = logging.getLogger(__name__)


class UrlRequest:
    r"""Perform a single request over a transport.

    When no option was added, ``execute`` sets ``RETURNTRANSFER`` so the
    body is returned as a value. Once at least one option is added, only
    the added options are applied: add ``RETURNTRANSFER`` explicitly if
    the body should still be returned.

    Transfer failures are not raised. ``get_content()`` then returns the
    transport's failure value (usually ``False``) and ``get_error()`` /
    ``get_errno()`` describe the failure.

    Args:
        url: Optional URL of the request.
        transport: Optional transport performing the request.

    Raises:
        InvalidArgumentError: If url is neither a string nor ``None``.

    Example:
        ```pycon
        >>> from urlrequest import UrlRequest
        >>> from urlrequest.transport import MockTransport
        >>> request = UrlRequest("http://example.test/", MockTransport(content="BODY"))
        >>> if request.execute().get_errno() == 0:
        ...     request.get_content()
        ...
        'BODY'

        ```
    """

    def __init__(self, url: str | None = None, transport: BaseTransport | None = None) -> None:
        self._transport: BaseTransport | None = None
        self._url: str | None = None
        self._options: dict[int, Any] = {}
        self._content: Any = None
        self._error = ""
        self._errno = 0
        self._executed = False

        self.set_transport(transport)
        self.set_url(url)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(url={self._url!r}, "
            f"transport={self._transport!r}, options={self._options!r})"
        )

    @property
    def url(self) -> str | None:
        return self._url

    @property
    def transport(self) -> BaseTransport:
        return self.get_transport()

    @property
    def options(self) -> dict[int, Any]:
        r"""A copy of the configured options."""
        return dict(self._options)

    @property
    def content(self) -> Any:
        return self._content

    @property
    def error(self) -> str:
        return self._error

    @property
    def errno(self) -> int:
        return self._errno

    @property
    def executed(self) -> bool:
        r"""Whether ``execute`` completed at least once."""
        return self._executed

    def set_transport(self, transport: BaseTransport | None = None) -> Self:
        r"""Set the transport performing the request.

        Args:
            transport: The transport, or ``None`` to unset it.

        Returns:
            The request, for chained calls.
        """
        self._transport = transport
        return self

    def get_transport(self) -> BaseTransport:
        r"""Return the transport performing the request.

        Raises:
            ConfigurationError: If no transport was set.
        """
        if self._transport is None:
            msg = "missing transport: call set_transport() before using the request"
            raise ConfigurationError(msg)
        return self._transport

    def set_url(self, url: str | None = None) -> Self:
        r"""Set the URL of the request.

        Args:
            url: The URL, or ``None`` to unset it.

        Returns:
            The request, for chained calls.

        Raises:
            InvalidArgumentError: If url is neither a string nor ``None``.
        """
        validate_url(url)
        self._url = url
        return self

    def get_url(self) -> str | None:
        return self._url

    def add_option(self, option: int, value: Any) -> Self:
        r"""Add an option applied on every ``execute``.

        Adding an option that is already set replaces its value.

        Args:
            option: The option code, e.g. ``TransferOption.TIMEOUT``.
            value: The option value.

        Returns:
            The request, for chained calls.
        """
        self._options[option] = value
        return self

    def remove_option(self, option: int) -> Self:
        r"""Remove an option. Removing an option that is not set does
        nothing."""
        self._options.pop(option, None)
        return self

    def clear_options(self) -> Self:
        r"""Remove every option."""
        self._options.clear()
        return self

    def execute(self) -> Self:
        r"""Perform the request.

        The sequence is: open a handle for the URL, apply the options (or
        ``RETURNTRANSFER`` if none was added), run the transfer, store
        its result and error state, and close the handle. The handle is
        closed even if the transport raises, and the result of the
        previous call is cleared before the handle is opened.

        Returns:
            The request, so the result can be queried directly.

        Raises:
            ConfigurationError: If no transport was set.

        Example:
            ```pycon
            >>> from urlrequest import UrlRequest
            >>> from urlrequest.transport import MockTransport
            >>> transport = MockTransport(content="BODY")
            >>> request = UrlRequest("http://example.test/", transport).execute()
            >>> transport.call_names
            ['init', 'setopt', 'exec', 'error', 'errno', 'close']

            ```
        """
        transport = self.get_transport()
        self._content = None
        self._error = ""
        self._errno = 0
        self._executed = False

        options = self._options or DEFAULT_OPTIONS
        logger.debug(f"Executing request to {self._url} with {len(options)} option(s)")
        start_time = time.perf_counter()

        with transport.open_handle(self._url) as handle:
            for option, value in options.items():
                transport.setopt(handle, option, value)
            self._content = transport.exec(handle)
            self._error = transport.error(handle)
            self._errno = transport.errno(handle)
        self._executed = True

        log_structured(
            logger,
            logging.DEBUG,
            f"Request to {self._url} finished with errno {self._errno}",
            url=self._url,
            errno=self._errno,
            elapsed=time.perf_counter() - start_time,
        )
        return self

    def get_content(self) -> Any:
        r"""Return the result of the last transfer.

        Returns:
            The body when ``RETURNTRANSFER`` is set, the transport's
            success/failure value otherwise, or ``None`` before the first
            ``execute``.
        """
        return self._content

    def get_error(self) -> str:
        r"""Return the error message of the last transfer, or ``''`` if
        no error occurred or ``execute`` was never called."""
        return self._error

    def get_errno(self) -> int:
        r"""Return the error code of the last transfer, or ``0`` if no
        error occurred or ``execute`` was never called."""
        return self._errno
