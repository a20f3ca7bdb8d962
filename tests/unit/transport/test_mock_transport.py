r"""Unit tests for MockTransport."""

from __future__ import annotations

from urlrequest.transport import MockHandle, MockTransport

TEST_URL = "http://example.test/"


def test_mock_transport_defaults() -> None:
    """Test that the default transport reports a successful transfer."""
    transport = MockTransport()
    handle = transport.init(TEST_URL)
    assert transport.exec(handle) is True
    assert transport.error(handle) == ""
    assert transport.errno(handle) == 0


def test_mock_transport_scripted_results() -> None:
    """Test that exec, error and errno return the scripted values."""
    transport = MockTransport(content=False, error="Couldn't connect to server", errno=7)
    handle = transport.init(TEST_URL)
    assert transport.exec(handle) is False
    assert transport.error(handle) == "Couldn't connect to server"
    assert transport.errno(handle) == 7


def test_mock_transport_new_handle_per_init() -> None:
    """Test that each init call returns a new numbered handle."""
    transport = MockTransport()
    assert transport.init(TEST_URL) == MockHandle(index=0, url=TEST_URL)
    assert transport.init() == MockHandle(index=1)


def test_mock_transport_fixed_handle() -> None:
    """Test that init returns the fixed handle when one is given."""
    transport = MockTransport(handle=["pseudo resource"])
    assert transport.init(TEST_URL) == ["pseudo resource"]
    assert transport.init(TEST_URL) == ["pseudo resource"]


def test_mock_transport_records_calls() -> None:
    """Test that every primitive call is recorded in order."""
    transport = MockTransport()
    handle = transport.init(TEST_URL)
    transport.setopt(handle, 19913, 1)
    transport.exec(handle)
    transport.close(handle)
    assert transport.calls == [
        ("init", (TEST_URL,)),
        ("setopt", (handle, 19913, 1)),
        ("exec", (handle,)),
        ("close", (handle,)),
    ]
    assert transport.call_names == ["init", "setopt", "exec", "close"]


def test_mock_transport_escape_unescape() -> None:
    """Test that escape and unescape URL encode and decode strings and are
    recorded."""
    transport = MockTransport()
    handle = transport.init()
    assert transport.escape(handle, "a b&c") == "a%20b%26c"
    assert transport.unescape(handle, "a%20b%26c") == "a b&c"
    assert transport.calls_to("escape") == [(handle, "a b&c")]
    assert transport.calls_to("unescape") == [(handle, "a%20b%26c")]


def test_mock_transport_reset_calls() -> None:
    """Test that reset_calls forgets the recorded calls."""
    transport = MockTransport()
    transport.init(TEST_URL)
    transport.reset_calls()
    assert transport.calls == []


def test_mock_transport_repr() -> None:
    """Test that the representation shows the number of calls."""
    transport = MockTransport()
    transport.init()
    assert repr(transport) == "MockTransport(calls=1)"
