r"""Transport backed by httpx.

``HttpxTransport`` implements the handle-based transfer primitives on top
of ``httpx``. A handle collects the options of one transfer; ``exec``
turns them into a single blocking ``httpx`` request. Every ``httpx``
exception is mapped to an ``ErrorCode`` and recorded on the handle, and
``exec`` returns ``False``.
"""

from __future__ import annotations

__all__ = ["MSG_DONE", "HttpxTransport", "MultiHandle", "TransferHandle"]

import logging
import ssl
import sys
import time
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, unquote

import httpx

from urlrequest.config import TransportConfig
from urlrequest.exceptions import InvalidArgumentError
from urlrequest.options import (
    ErrorCode,
    MultiCode,
    TransferInfo,
    TransferOption,
    coerce_option_value,
    multi_strerror,
    strerror,
)
from urlrequest.transport.base import BaseTransport

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)

# Message type reported by multi_info_read for a finished transfer
MSG_DONE = 1

# Options that configure the connection rather than the request. They are
# only honoured when the transport creates its own client.
_CLIENT_OPTIONS = (
    TransferOption.MAXREDIRS,
    TransferOption.PROXY,
    TransferOption.SSL_VERIFYPEER,
)

# Fragments of the messages the OS resolver puts in ConnectError
_RESOLVE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "no address associated with hostname",
    "getaddrinfo failed",
    "name resolution",
)


@dataclass(eq=False)
class TransferHandle:
    r"""State of one transfer.

    Attributes:
        url: The URL of the transfer.
        options: The options set on the handle, except ``URL``.
        content: The body returned by the last transfer, if any.
        error: The error message of the last operation.
        errno: The error code of the last operation.
        info: The information collected by the last transfer.
        closed: Whether the handle was closed.
        multi: The multi handle the handle belongs to, if any.
    """

    url: str | None = None
    options: dict[TransferOption, Any] = field(default_factory=dict)
    content: Any = None
    error: str = ""
    errno: int = ErrorCode.OK
    info: dict[TransferInfo, Any] = field(default_factory=dict)
    closed: bool = False
    multi: MultiHandle | None = field(default=None, repr=False)

    def set_error(self, code: ErrorCode, message: str | None = None) -> None:
        self.errno = code
        self.error = message or strerror(code) or ""

    def clear_error(self) -> None:
        self.errno = ErrorCode.OK
        self.error = ""


@dataclass(eq=False)
class MultiHandle:
    r"""Group of transfer handles run by ``multi_exec``."""

    handles: list[TransferHandle] = field(default_factory=list)
    pending: deque[TransferHandle] = field(default_factory=deque)
    messages: deque[dict[str, Any]] = field(default_factory=deque)
    options: dict[int, Any] = field(default_factory=dict)
    closed: bool = False


class HttpxTransport(BaseTransport):
    r"""Implement the transfer primitives with ``httpx``.

    Two usage patterns are supported:

    **Injected client**: the ``httpx.Client`` is created and closed by the
    caller. Every transfer goes through it, and the options that configure
    the connection (``MAXREDIRS``, ``PROXY``, ``SSL_VERIFYPEER``) are
    ignored because they belong to the client.

    **Own client**: when no client is given, each ``exec`` call opens a
    short-lived ``httpx.Client`` configured from the handle options and
    the ``TransportConfig``, and closes it once the body is read.

    Args:
        client: Optional ``httpx.Client`` used for every transfer.
        config: Optional ``TransportConfig`` providing the defaults. If
            ``None``, a default ``TransportConfig`` is used.

    Example:
        ```pycon
        >>> from urlrequest.options import TransferOption
        >>> from urlrequest.transport import HttpxTransport
        >>> transport = HttpxTransport()
        >>> with transport.open_handle("https://example.com") as handle:  # doctest: +SKIP
        ...     transport.setopt(handle, TransferOption.RETURNTRANSFER, 1)
        ...     body = transport.exec(handle)
        ...

        ```
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        config: TransportConfig | None = None,
    ) -> None:
        self._client = client
        self._config: TransportConfig = config or TransportConfig()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(client={self._client!r}, config={self._config!r})"

    @property
    def config(self) -> TransportConfig:
        return self._config

    ##########################
    #     Easy interface     #
    ##########################

    def init(self, url: str | None = None) -> TransferHandle:
        return TransferHandle(url=url)

    def setopt(self, handle: TransferHandle, option: int, value: Any) -> bool:
        if handle.closed:
            handle.set_error(ErrorCode.BAD_FUNCTION_ARGUMENT, "handle is closed")
            return False
        try:
            option = TransferOption(option)
        except ValueError:
            logger.debug(f"Unknown option code {option}")
            handle.set_error(ErrorCode.UNKNOWN_OPTION)
            return False
        try:
            value = coerce_option_value(option, value)
        except InvalidArgumentError as exc:
            handle.set_error(ErrorCode.BAD_FUNCTION_ARGUMENT, str(exc))
            return False

        if option is TransferOption.URL:
            handle.url = value
            return True
        if option is TransferOption.HTTPGET and value:
            handle.options.pop(TransferOption.POST, None)
            handle.options.pop(TransferOption.NOBODY, None)
        elif option in (TransferOption.POST, TransferOption.POSTFIELDS, TransferOption.NOBODY):
            handle.options.pop(TransferOption.HTTPGET, None)
        handle.options[option] = value
        return True

    def exec(self, handle: TransferHandle) -> Any:
        if handle.closed:
            handle.set_error(ErrorCode.BAD_FUNCTION_ARGUMENT, "handle is closed")
            return False
        handle.clear_error()
        handle.content = None
        handle.info = _empty_info(handle.url)
        if not handle.url:
            handle.set_error(ErrorCode.URL_MALFORMAT, "No URL set")
            return False

        options = handle.options
        method = _resolve_method(options)
        start_time = time.perf_counter()
        try:
            response = self._send(handle.url, method, options)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            code = _error_code_for(exc)
            detail = str(exc)
            message = strerror(code) or ""
            handle.set_error(code, f"{message}: {detail}" if detail else message)
            logger.debug(f"{method} request to {handle.url} failed with error {int(code)}: {exc}")
            return False

        raw_head = _raw_head(response)
        handle.info = _collect_info(response, raw_head, time.perf_counter() - start_time)
        logger.debug(f"{method} request to {handle.url} returned status {response.status_code}")

        if options.get(TransferOption.FAILONERROR) and response.status_code >= 400:
            handle.set_error(
                ErrorCode.HTTP_RETURNED_ERROR,
                f"The requested URL returned error: {response.status_code}",
            )
            return False

        if options.get(TransferOption.BINARYTRANSFER):
            body: str | bytes = response.content
            if options.get(TransferOption.HEADER):
                body = raw_head + body
        else:
            body = response.text
            if options.get(TransferOption.HEADER):
                body = raw_head.decode(response.headers.encoding, errors="replace") + body

        if options.get(TransferOption.RETURNTRANSFER):
            handle.content = body
            return body

        if isinstance(body, bytes):
            body = body.decode(response.encoding or "utf-8", errors="replace")
        sys.stdout.write(body)
        sys.stdout.flush()
        return True

    def error(self, handle: TransferHandle) -> str:
        return handle.error

    def errno(self, handle: TransferHandle) -> int:
        return int(handle.errno)

    def close(self, handle: TransferHandle) -> None:
        if handle.multi is not None:
            self.multi_remove_handle(handle.multi, handle)
        handle.closed = True

    def copy_handle(self, handle: TransferHandle) -> TransferHandle:
        r"""Return a new handle with the same URL and options."""
        return TransferHandle(url=handle.url, options=dict(handle.options))

    def reset(self, handle: TransferHandle) -> None:
        r"""Reset the URL and every option of a handle."""
        handle.url = None
        handle.options.clear()

    def getinfo(self, handle: TransferHandle, opt: int | None = None) -> Any:
        r"""Get information about the last transfer of a handle.

        Args:
            handle: A handle returned by ``init``.
            opt: Optional ``TransferInfo`` code.

        Returns:
            The value of ``opt``, or a dictionary with every value if
            ``opt`` is ``None``. ``False`` if ``opt`` is unknown.
        """
        if opt is None:
            return dict(handle.info)
        try:
            return handle.info.get(TransferInfo(opt))
        except ValueError:
            return False

    def escape(self, handle: TransferHandle, string: str) -> str:
        r"""URL encode a string. Only ``A-Za-z0-9-._~`` are kept."""
        return quote(string, safe="")

    def unescape(self, handle: TransferHandle, string: str) -> str:
        r"""Decode a URL encoded string."""
        return unquote(string)

    def strerror(self, code: int) -> str | None:
        return strerror(code)

    def version(self) -> dict[str, Any]:
        r"""Return version information about the transfer library."""
        return {
            "version": httpx.__version__,
            "ssl_version": ssl.OPENSSL_VERSION,
            "protocols": ["http", "https"],
        }

    ###########################
    #     Multi interface     #
    ###########################

    def multi_init(self) -> MultiHandle:
        return MultiHandle()

    def multi_add_handle(self, mh: MultiHandle, handle: TransferHandle) -> int:
        if mh.closed:
            return MultiCode.BAD_HANDLE
        if handle.closed:
            return MultiCode.BAD_EASY_HANDLE
        if handle.multi is not None:
            return MultiCode.ADDED_ALREADY
        handle.multi = mh
        mh.handles.append(handle)
        mh.pending.append(handle)
        return MultiCode.OK

    def multi_remove_handle(self, mh: MultiHandle, handle: TransferHandle) -> int:
        if mh.closed:
            return MultiCode.BAD_HANDLE
        if handle not in mh.handles:
            return MultiCode.BAD_EASY_HANDLE
        mh.handles.remove(handle)
        if handle in mh.pending:
            mh.pending.remove(handle)
        handle.multi = None
        return MultiCode.OK

    def multi_exec(self, mh: MultiHandle) -> tuple[int, int]:
        r"""Run the pending transfers of a multi handle.

        The transfers run one after another and the call returns once all
        of them finished.

        Returns:
            A tuple ``(code, still_running)``.
        """
        if mh.closed:
            return MultiCode.BAD_HANDLE, 0
        while mh.pending:
            handle = mh.pending.popleft()
            self.exec(handle)
            mh.messages.append({"msg": MSG_DONE, "result": handle.errno, "handle": handle})
        return MultiCode.OK, 0

    def multi_getcontent(self, handle: TransferHandle) -> Any:
        r"""Return the body of a finished transfer if ``RETURNTRANSFER``
        is set, ``None`` otherwise."""
        if not handle.options.get(TransferOption.RETURNTRANSFER):
            return None
        return handle.content

    def multi_info_read(self, mh: MultiHandle) -> tuple[dict[str, Any] | bool, int]:
        r"""Read the next message about a finished transfer.

        Returns:
            A tuple ``(message, remaining)`` where message is ``False``
            if the queue is empty.
        """
        if not mh.messages:
            return False, 0
        message = mh.messages.popleft()
        return message, len(mh.messages)

    def multi_select(self, mh: MultiHandle, timeout: float = 1.0) -> int:
        r"""Return the number of transfers ready to run, or ``-1`` if the
        multi handle is closed. Transfers are blocking, so this never
        waits."""
        if mh.closed:
            return -1
        return len(mh.pending)

    def multi_setopt(self, mh: MultiHandle, option: int, value: Any) -> bool:
        if mh.closed:
            return False
        mh.options[option] = value
        return True

    def multi_strerror(self, code: int) -> str | None:
        return multi_strerror(code)

    def multi_close(self, mh: MultiHandle) -> None:
        for handle in mh.handles:
            handle.multi = None
        mh.handles.clear()
        mh.pending.clear()
        mh.messages.clear()
        mh.closed = True

    ##########################
    #     Request sending    #
    ##########################

    def _send(
        self, url: str, method: str, options: Mapping[TransferOption, Any]
    ) -> httpx.Response:
        request_kwargs: dict[str, Any] = {
            "headers": self._build_headers(options),
            "timeout": self._build_timeout(options),
            "follow_redirects": bool(options.get(TransferOption.FOLLOWLOCATION, False)),
        }
        if method not in ("GET", "HEAD") and options.get(TransferOption.POSTFIELDS) is not None:
            request_kwargs["content"] = options[TransferOption.POSTFIELDS]
        userpwd = options.get(TransferOption.USERPWD)
        if userpwd is not None:
            username, _, password = userpwd.partition(":")
            request_kwargs["auth"] = (username, password)

        if self._client is not None:
            ignored = [option.name for option in _CLIENT_OPTIONS if option in options]
            if ignored:
                logger.debug(f"Options {ignored} are ignored with an injected client")
            return self._client.request(method, url, **request_kwargs)

        with self._open_client(options) as client:
            return client.request(method, url, **request_kwargs)

    def _open_client(self, options: Mapping[TransferOption, Any]) -> httpx.Client:
        r"""Create the client of one transfer from the handle options.

        Raises:
            httpx.ProxyError: If httpx rejects the ``PROXY`` URL.
        """
        max_redirects = options.get(TransferOption.MAXREDIRS, self._config.max_redirects)
        if max_redirects < 0:
            max_redirects = self._config.max_redirects
        try:
            return httpx.Client(
                verify=bool(options.get(TransferOption.SSL_VERIFYPEER, self._config.verify)),
                proxy=options.get(TransferOption.PROXY),
                max_redirects=max_redirects,
            )
        except ValueError as exc:
            # httpx raises ValueError for a proxy URL with an unsupported scheme
            raise httpx.ProxyError(str(exc)) from exc

    def _build_headers(self, options: Mapping[TransferOption, Any]) -> httpx.Headers:
        headers = httpx.Headers()
        if self._config.user_agent is not None:
            headers["User-Agent"] = self._config.user_agent
        for name, option in (
            ("User-Agent", TransferOption.USERAGENT),
            ("Referer", TransferOption.REFERER),
            ("Cookie", TransferOption.COOKIE),
            ("Accept-Encoding", TransferOption.ACCEPT_ENCODING),
        ):
            if options.get(option) is not None:
                headers[name] = options[option]
        if options.get(TransferOption.POSTFIELDS) is not None:
            headers["Content-Type"] = "application/x-www-form-urlencoded"
        for line in options.get(TransferOption.HTTPHEADER, []):
            name, sep, value = line.partition(":")
            if not sep:
                logger.debug(f"Ignoring malformed header line {line!r}")
                continue
            headers[name.strip()] = value.strip()
        return headers

    def _build_timeout(self, options: Mapping[TransferOption, Any]) -> httpx.Timeout:
        timeout = _seconds(
            options, TransferOption.TIMEOUT, TransferOption.TIMEOUT_MS, self._config.timeout
        )
        connect = _seconds(
            options,
            TransferOption.CONNECTTIMEOUT,
            TransferOption.CONNECTTIMEOUT_MS,
            self._config.connect_timeout,
        )
        return httpx.Timeout(timeout, connect=connect)


def _seconds(
    options: Mapping[TransferOption, Any],
    seconds_option: TransferOption,
    ms_option: TransferOption,
    default: float,
) -> float:
    r"""Read a timeout set in seconds or milliseconds; ``0`` means the
    default."""
    milliseconds = options.get(ms_option, 0)
    if milliseconds > 0:
        return milliseconds / 1000
    seconds = options.get(seconds_option, 0)
    if seconds > 0:
        return float(seconds)
    return default


def _resolve_method(options: Mapping[TransferOption, Any]) -> str:
    if options.get(TransferOption.CUSTOMREQUEST):
        return options[TransferOption.CUSTOMREQUEST].upper()
    if options.get(TransferOption.NOBODY):
        return "HEAD"
    if options.get(TransferOption.POST) or options.get(TransferOption.POSTFIELDS) is not None:
        return "POST"
    return "GET"


def _raw_head(response: httpx.Response) -> bytes:
    r"""Rebuild the response head from the header bytes as received."""
    status = f"{response.http_version} {response.status_code} {response.reason_phrase}"
    lines = [status.encode("ascii", errors="replace")]
    lines.extend(name + b": " + value for name, value in response.headers.raw)
    return b"\r\n".join(lines) + b"\r\n\r\n"


def _empty_info(url: str | None) -> dict[TransferInfo, Any]:
    return {
        TransferInfo.EFFECTIVE_URL: url,
        TransferInfo.CONTENT_TYPE: None,
        TransferInfo.RESPONSE_CODE: 0,
        TransferInfo.HEADER_SIZE: 0,
        TransferInfo.REDIRECT_COUNT: 0,
        TransferInfo.TOTAL_TIME: 0.0,
        TransferInfo.SIZE_DOWNLOAD: 0,
    }


def _collect_info(
    response: httpx.Response, raw_head: bytes, elapsed: float
) -> dict[TransferInfo, Any]:
    return {
        TransferInfo.EFFECTIVE_URL: str(response.url),
        TransferInfo.CONTENT_TYPE: response.headers.get("content-type"),
        TransferInfo.RESPONSE_CODE: response.status_code,
        TransferInfo.HEADER_SIZE: len(raw_head),
        TransferInfo.REDIRECT_COUNT: len(response.history),
        TransferInfo.TOTAL_TIME: elapsed,
        TransferInfo.SIZE_DOWNLOAD: len(response.content),
    }


def _error_code_for(exc: Exception) -> ErrorCode:
    r"""Map an httpx exception to the matching error code."""
    if isinstance(exc, httpx.InvalidURL):
        return ErrorCode.URL_MALFORMAT
    if isinstance(exc, httpx.UnsupportedProtocol):
        return ErrorCode.UNSUPPORTED_PROTOCOL
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCode.OPERATION_TIMEDOUT
    if isinstance(exc, httpx.TooManyRedirects):
        return ErrorCode.TOO_MANY_REDIRECTS
    if isinstance(exc, httpx.ProxyError):
        return ErrorCode.COULDNT_RESOLVE_PROXY
    if isinstance(exc, httpx.ConnectError):
        text = str(exc).lower()
        if "certificate" in text:
            return ErrorCode.PEER_FAILED_VERIFICATION
        if "ssl" in text or "tls" in text:
            return ErrorCode.SSL_CONNECT_ERROR
        if any(marker in text for marker in _RESOLVE_MARKERS):
            return ErrorCode.COULDNT_RESOLVE_HOST
        return ErrorCode.COULDNT_CONNECT
    if isinstance(exc, httpx.RemoteProtocolError):
        if "without sending" in str(exc).lower():
            return ErrorCode.GOT_NOTHING
        return ErrorCode.WEIRD_SERVER_REPLY
    if isinstance(exc, httpx.WriteError):
        return ErrorCode.SEND_ERROR
    return ErrorCode.RECV_ERROR
