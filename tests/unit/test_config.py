r"""Unit tests for TransportConfig dataclass."""

from __future__ import annotations

import pytest
from coola import objects_are_equal

from urlrequest.config import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_OPTIONS,
    DEFAULT_TIMEOUT,
    TransportConfig,
)
from urlrequest.options import TransferOption

#####################################
#     Tests for TransportConfig     #
#####################################


def test_transport_config_defaults() -> None:
    """Test that TransportConfig uses the module defaults."""
    config = TransportConfig()
    assert config.timeout == DEFAULT_TIMEOUT
    assert config.connect_timeout == DEFAULT_CONNECT_TIMEOUT
    assert config.max_redirects == DEFAULT_MAX_REDIRECTS
    assert config.verify
    assert config.user_agent is None


@pytest.mark.parametrize("timeout", [0.5, 10.0, 60])
def test_transport_config_timeout(timeout: float) -> None:
    """Test that valid timeouts are stored."""
    assert TransportConfig(timeout=timeout).timeout == timeout


@pytest.mark.parametrize("timeout", [0, -1.0])
def test_transport_config_invalid_timeout(timeout: float) -> None:
    """Test that a non-positive timeout raises ValueError."""
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        TransportConfig(timeout=timeout)


def test_transport_config_invalid_connect_timeout() -> None:
    """Test that a non-positive connect timeout raises ValueError."""
    with pytest.raises(ValueError, match=r"connect_timeout must be > 0, got 0"):
        TransportConfig(connect_timeout=0)


def test_transport_config_invalid_max_redirects() -> None:
    """Test that a negative redirect limit raises ValueError."""
    with pytest.raises(ValueError, match=r"max_redirects must be >= 0, got -1"):
        TransportConfig(max_redirects=-1)


def test_transport_config_merge() -> None:
    """Test that merge returns a new config with the overrides."""
    config = TransportConfig(timeout=5.0)
    merged = config.merge(timeout=30.0, verify=False)
    assert merged.timeout == 30.0
    assert not merged.verify
    assert config.timeout == 5.0
    assert config.verify


def test_transport_config_merge_ignores_none() -> None:
    """Test that merge ignores None overrides."""
    config = TransportConfig(user_agent="agent/1.0")
    assert config.merge(user_agent=None).user_agent == "agent/1.0"


def test_transport_config_merge_validates() -> None:
    """Test that merge validates the merged values."""
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        TransportConfig().merge(timeout=-5.0)


def test_transport_config_to_dict() -> None:
    """Test that to_dict returns every field."""
    assert objects_are_equal(
        TransportConfig(max_redirects=3, user_agent="agent/1.0").to_dict(),
        {
            "timeout": DEFAULT_TIMEOUT,
            "connect_timeout": DEFAULT_CONNECT_TIMEOUT,
            "max_redirects": 3,
            "verify": True,
            "user_agent": "agent/1.0",
        },
    )


def test_default_options_return_transfer() -> None:
    """Test that the default options only set RETURNTRANSFER."""
    assert dict(DEFAULT_OPTIONS) == {TransferOption.RETURNTRANSFER: 1}


def test_default_options_read_only() -> None:
    """Test that the default options cannot be modified."""
    with pytest.raises(TypeError):
        DEFAULT_OPTIONS[TransferOption.TIMEOUT] = 5
