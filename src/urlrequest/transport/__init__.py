r"""Transports exposing handle-based HTTP transfer primitives."""

from __future__ import annotations

__all__ = [
    "BaseTransport",
    "HttpxTransport",
    "MockHandle",
    "MockTransport",
    "MultiHandle",
    "TransferHandle",
]

from urlrequest.transport.base import BaseTransport
from urlrequest.transport.httpx_transport import HttpxTransport, MultiHandle, TransferHandle
from urlrequest.transport.mock import MockHandle, MockTransport
