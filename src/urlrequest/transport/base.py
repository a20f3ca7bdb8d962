r"""Define the transport interface.

A transport exposes the primitives of an HTTP transfer library through a
handle-based surface: open a handle, set options on it, execute the
transfer, read its error state and close it. Transports report transfer
failures through sentinel return values, never through exceptions.
"""

from __future__ import annotations

__all__ = ["BaseTransport"]

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping


class BaseTransport(ABC):
    r"""Interface of the transports used by ``UrlRequest``.

    Implementations must provide ``init``, ``setopt``, ``exec``,
    ``error``, ``errno``, ``close``, ``escape`` and ``unescape``.
    Arguments and results are passed through unmodified: a failed
    transfer makes ``exec`` return ``False`` and the details are
    available through ``error`` and ``errno``.

    The multi-handle interface and ``getinfo`` are not part of this
    interface; backends that support them (``HttpxTransport``) define
    them on their own.

    Example:
        ```pycon
        >>> from urlrequest.transport import MockTransport
        >>> transport = MockTransport(content="BODY")
        >>> with transport.open_handle("http://example.test/") as handle:
        ...     transport.exec(handle)
        ...
        'BODY'
        >>> transport.call_names
        ['init', 'exec', 'close']

        ```
    """

    @abstractmethod
    def init(self, url: str | None = None) -> Any:
        r"""Open a new transfer handle.

        Args:
            url: Optional URL of the transfer.

        Returns:
            An opaque handle, or ``False`` on failure.
        """

    @abstractmethod
    def setopt(self, handle: Any, option: int, value: Any) -> bool:
        r"""Set an option on a handle.

        Args:
            handle: A handle returned by ``init``.
            option: The option code.
            value: The option value.

        Returns:
            ``True`` on success, ``False`` on failure.
        """

    @abstractmethod
    def exec(self, handle: Any) -> Any:
        r"""Perform the transfer of a handle.

        Args:
            handle: A handle returned by ``init``.

        Returns:
            ``True`` on success, ``False`` on failure. If the
            ``RETURNTRANSFER`` option is set, the body on success and
            ``False`` on failure.
        """

    @abstractmethod
    def error(self, handle: Any) -> str:
        r"""Return the error message of the last transfer of a handle, or
        ``''`` if no error occurred."""

    @abstractmethod
    def errno(self, handle: Any) -> int:
        r"""Return the error code of the last transfer of a handle, or
        ``0`` if no error occurred."""

    @abstractmethod
    def close(self, handle: Any) -> None:
        r"""Close a handle and free its resources."""

    @abstractmethod
    def escape(self, handle: Any, string: str) -> str:
        r"""URL encode a string.

        Args:
            handle: A handle returned by ``init``.
            string: The string to encode.

        Returns:
            The encoded string.
        """

    @abstractmethod
    def unescape(self, handle: Any, string: str) -> str:
        r"""Decode a URL encoded string.

        Args:
            handle: A handle returned by ``init``.
            string: The string to decode.

        Returns:
            The decoded string.
        """

    def setopt_array(self, handle: Any, options: Mapping[int, Any]) -> bool:
        r"""Set several options on a handle.

        Args:
            handle: A handle returned by ``init``.
            options: The option codes and their values, applied in order.

        Returns:
            ``True`` if every option was set. On the first failure,
            ``False`` is returned and the remaining options are ignored.
        """
        return all(self.setopt(handle, option, value) for option, value in options.items())

    @contextmanager
    def open_handle(self, url: str | None = None) -> Generator[Any, None, None]:
        r"""Open a handle that is closed when the context exits.

        The handle is closed on every exit path, including exceptions
        raised inside the ``with`` block.

        Args:
            url: Optional URL of the transfer.

        Yields:
            The handle returned by ``init``.
        """
        handle = self.init(url)
        try:
            yield handle
        finally:
            self.close(handle)
