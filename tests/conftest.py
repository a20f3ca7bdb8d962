from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from urlrequest import UrlRequest
from urlrequest.transport import MockTransport

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def mock_transport() -> MockTransport:
    """Create a MockTransport whose transfers return ``'external
    content'``."""
    return MockTransport(content="external content")


@pytest.fixture
def url_request() -> UrlRequest:
    """Create a UrlRequest without URL or transport."""
    return UrlRequest()


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]:
    """Create httpx.Client instances answering with a handler function
    instead of the network.

    Example:
        >>> def test_get(make_client):
        ...     client = make_client(lambda request: httpx.Response(200, text="ok"))
    """

    def _make_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make_client
