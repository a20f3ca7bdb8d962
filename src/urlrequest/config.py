r"""Default values and configuration for the transports.

This module provides the configuration constants and the dataclass-based
``TransportConfig`` used by ``HttpxTransport`` to fill in every setting
a transfer does not configure through an option.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_MAX_REDIRECTS",
    "DEFAULT_OPTIONS",
    "DEFAULT_TIMEOUT",
    "TransportConfig",
]

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any

from urlrequest.options import TransferOption
from urlrequest.utils.validation import validate_max_redirects, validate_timeout

# Default timeout in seconds for reading, writing and waiting for a
# pooled connection
DEFAULT_TIMEOUT = 10.0

# Default timeout in seconds for establishing a connection
DEFAULT_CONNECT_TIMEOUT = 10.0

# Maximum number of redirects followed when FOLLOWLOCATION is enabled
DEFAULT_MAX_REDIRECTS = 20

# Options applied by UrlRequest.execute() when no option was added:
# return the body instead of writing it to standard output
DEFAULT_OPTIONS = MappingProxyType({TransferOption.RETURNTRANSFER: 1})


@dataclass
class TransportConfig:
    """Configuration for ``HttpxTransport``.

    Options set on a handle always take precedence over these values.

    Args:
        timeout: Read/write/pool timeout in seconds. Must be > 0.
        connect_timeout: Connection timeout in seconds. Must be > 0.
        max_redirects: Maximum number of redirects followed when
            ``FOLLOWLOCATION`` is enabled. Must be >= 0.
        verify: Whether to verify TLS certificates.
        user_agent: Optional default ``User-Agent`` header.

    Example:
        ```pycon
        >>> from urlrequest.config import TransportConfig
        >>> config = TransportConfig()
        >>> config.timeout
        10.0
        >>> config.merge(timeout=30.0).timeout
        30.0

        ```
    """

    timeout: float = DEFAULT_TIMEOUT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    verify: bool = True
    user_agent: str | None = None

    def __post_init__(self) -> None:
        validate_timeout(self.timeout)
        validate_timeout(self.connect_timeout, name="connect_timeout")
        validate_max_redirects(self.max_redirects)

    def merge(self, **overrides: Any) -> TransportConfig:
        """Create a new config with some values replaced.

        ``None`` overrides are ignored, so the original values are kept.

        Args:
            **overrides: The values to replace.

        Returns:
            A new ``TransportConfig``. The original is unchanged.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert the configuration to a dictionary.

        Returns:
            A dictionary with one entry per field.
        """
        return {
            "timeout": self.timeout,
            "connect_timeout": self.connect_timeout,
            "max_redirects": self.max_redirects,
            "verify": self.verify,
            "user_agent": self.user_agent,
        }
