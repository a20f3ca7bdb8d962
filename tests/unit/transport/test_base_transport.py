r"""Unit tests for the BaseTransport interface."""

from __future__ import annotations

from typing import Any

import pytest

from urlrequest.options import TransferOption
from urlrequest.transport import BaseTransport, MockHandle, MockTransport

TEST_URL = "http://example.test/"


class FailingSetoptTransport(MockTransport):
    def setopt(self, handle: object, option: int, value: object) -> bool:
        super().setopt(handle, option, value)
        return option != TransferOption.TIMEOUT


class TransferOnlyTransport(BaseTransport):
    def init(self, url: str | None = None) -> Any:
        return url

    def setopt(self, handle: Any, option: int, value: Any) -> bool:
        return True

    def exec(self, handle: Any) -> Any:
        return True

    def error(self, handle: Any) -> str:
        return ""

    def errno(self, handle: Any) -> int:
        return 0

    def close(self, handle: Any) -> None:
        pass


def test_base_transport_is_abstract() -> None:
    """Test that BaseTransport cannot be instantiated."""
    with pytest.raises(TypeError):
        BaseTransport()


def test_transport_without_escape_is_abstract() -> None:
    """Test that escape and unescape are required primitives."""
    with pytest.raises(TypeError, match=r"escape"):
        TransferOnlyTransport()


###################################
#     Tests for setopt_array      #
###################################


def test_setopt_array_applies_options_in_order() -> None:
    """Test that setopt_array sets the options in insertion order."""
    transport = MockTransport()
    handle = transport.init(TEST_URL)
    assert transport.setopt_array(
        handle, {TransferOption.RETURNTRANSFER: 1, TransferOption.TIMEOUT: 5}
    )
    assert transport.calls_to("setopt") == [
        (handle, TransferOption.RETURNTRANSFER, 1),
        (handle, TransferOption.TIMEOUT, 5),
    ]


def test_setopt_array_empty() -> None:
    """Test that setopt_array succeeds without options."""
    transport = MockTransport()
    assert transport.setopt_array(transport.init(), {})


def test_setopt_array_stops_at_first_failure() -> None:
    """Test that setopt_array stops at the first failed option."""
    transport = FailingSetoptTransport()
    handle = transport.init(TEST_URL)
    assert not transport.setopt_array(
        handle,
        {
            TransferOption.RETURNTRANSFER: 1,
            TransferOption.TIMEOUT: 5,
            TransferOption.HEADER: 1,
        },
    )
    assert [option for _, option, _ in transport.calls_to("setopt")] == [
        TransferOption.RETURNTRANSFER,
        TransferOption.TIMEOUT,
    ]


#################################
#     Tests for open_handle     #
#################################


def test_open_handle_closes_handle() -> None:
    """Test that open_handle closes the handle when the block exits."""
    transport = MockTransport()
    with transport.open_handle(TEST_URL) as handle:
        assert handle == MockHandle(index=0, url=TEST_URL)
    assert transport.call_names == ["init", "close"]


def test_open_handle_closes_handle_on_exception() -> None:
    """Test that open_handle closes the handle when the block raises."""
    transport = MockTransport()
    with pytest.raises(ValueError, match=r"boom"), transport.open_handle(TEST_URL):
        raise ValueError("boom")
    assert transport.calls_to("close") == [(MockHandle(index=0, url=TEST_URL),)]
