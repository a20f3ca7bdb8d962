r"""Mock transport for testing.

This module provides a ``BaseTransport`` implementation that performs no
I/O. It records every primitive call and replays scripted results, so
code built on top of a transport can be tested without a network.
"""

from __future__ import annotations

__all__ = ["MockHandle", "MockTransport"]

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, unquote

from urlrequest.transport.base import BaseTransport


@dataclass(frozen=True)
class MockHandle:
    r"""Handle returned by ``MockTransport.init``.

    Attributes:
        index: The position of the handle in the order of creation.
        url: The URL the handle was opened with.
    """

    index: int
    url: str | None = None


class MockTransport(BaseTransport):
    r"""Transport that records calls and returns scripted results.

    Args:
        content: The value returned by ``exec``.
        error: The value returned by ``error``.
        errno: The value returned by ``errno``.
        handle: Optional fixed value returned by ``init``. If ``None``,
            each call returns a new ``MockHandle``.

    Example:
        ```pycon
        >>> from urlrequest.transport import MockTransport
        >>> transport = MockTransport(content="BODY")
        >>> handle = transport.init("http://example.test/")
        >>> transport.setopt(handle, 19913, 1)
        True
        >>> transport.exec(handle)
        'BODY'
        >>> transport.calls_to("setopt")
        [(MockHandle(index=0, url='http://example.test/'), 19913, 1)]

        ```
    """

    def __init__(
        self,
        content: Any = True,
        error: str = "",
        errno: int = 0,
        handle: Any = None,
    ) -> None:
        self.content = content
        self.error_message = error
        self.error_code = errno
        self._handle = handle
        self._handle_count = 0
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(calls={len(self.calls)})"

    @property
    def call_names(self) -> list[str]:
        r"""The names of the recorded calls, in order."""
        return [name for name, _ in self.calls]

    def calls_to(self, name: str) -> list[tuple[Any, ...]]:
        r"""Return the arguments of every recorded call to a primitive.

        Args:
            name: The primitive name, e.g. ``"setopt"``.

        Returns:
            The argument tuples, in call order.
        """
        return [args for call_name, args in self.calls if call_name == name]

    def reset_calls(self) -> None:
        r"""Forget the recorded calls."""
        self.calls.clear()

    def init(self, url: str | None = None) -> Any:
        self.calls.append(("init", (url,)))
        if self._handle is not None:
            return self._handle
        handle = MockHandle(index=self._handle_count, url=url)
        self._handle_count += 1
        return handle

    def setopt(self, handle: Any, option: int, value: Any) -> bool:
        self.calls.append(("setopt", (handle, option, value)))
        return True

    def exec(self, handle: Any) -> Any:
        self.calls.append(("exec", (handle,)))
        return self.content

    def error(self, handle: Any) -> str:
        self.calls.append(("error", (handle,)))
        return self.error_message

    def errno(self, handle: Any) -> int:
        self.calls.append(("errno", (handle,)))
        return self.error_code

    def close(self, handle: Any) -> None:
        self.calls.append(("close", (handle,)))

    def escape(self, handle: Any, string: str) -> str:
        self.calls.append(("escape", (handle, string)))
        return quote(string, safe="")

    def unescape(self, handle: Any, string: str) -> str:
        self.calls.append(("unescape", (handle, string)))
        return unquote(string)
