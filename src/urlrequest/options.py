r"""Option, info and error codes understood by the transports.

The numeric values follow the libcurl constants so that code written
against curl option tables keeps working unchanged.
"""

from __future__ import annotations

__all__ = [
    "OPTION_KINDS",
    "ErrorCode",
    "MultiCode",
    "OptionKind",
    "TransferInfo",
    "TransferOption",
    "coerce_option_value",
    "multi_strerror",
    "strerror",
]

from enum import Enum, IntEnum
from typing import Any

from urlrequest.exceptions import InvalidArgumentError


class TransferOption(IntEnum):
    r"""Option codes accepted by ``setopt``."""

    TIMEOUT = 13
    VERBOSE = 41
    HEADER = 42
    NOBODY = 44
    FAILONERROR = 45
    POST = 47
    FOLLOWLOCATION = 52
    SSL_VERIFYPEER = 64
    MAXREDIRS = 68
    CONNECTTIMEOUT = 78
    HTTPGET = 80
    TIMEOUT_MS = 155
    CONNECTTIMEOUT_MS = 156
    URL = 10002
    PROXY = 10004
    USERPWD = 10005
    POSTFIELDS = 10015
    REFERER = 10016
    USERAGENT = 10018
    COOKIE = 10022
    HTTPHEADER = 10023
    CUSTOMREQUEST = 10036
    ACCEPT_ENCODING = 10102
    RETURNTRANSFER = 19913
    BINARYTRANSFER = 19914


class TransferInfo(IntEnum):
    r"""Info codes accepted by ``getinfo``."""

    EFFECTIVE_URL = 1048577
    CONTENT_TYPE = 1048594
    RESPONSE_CODE = 2097154
    HEADER_SIZE = 2097163
    REDIRECT_COUNT = 2097172
    TOTAL_TIME = 3145731
    SIZE_DOWNLOAD = 3145736


class ErrorCode(IntEnum):
    r"""Error codes reported by ``errno``."""

    OK = 0
    UNSUPPORTED_PROTOCOL = 1
    URL_MALFORMAT = 3
    COULDNT_RESOLVE_PROXY = 5
    COULDNT_RESOLVE_HOST = 6
    COULDNT_CONNECT = 7
    WEIRD_SERVER_REPLY = 8
    HTTP_RETURNED_ERROR = 22
    OPERATION_TIMEDOUT = 28
    SSL_CONNECT_ERROR = 35
    BAD_FUNCTION_ARGUMENT = 43
    TOO_MANY_REDIRECTS = 47
    UNKNOWN_OPTION = 48
    GOT_NOTHING = 52
    SEND_ERROR = 55
    RECV_ERROR = 56
    PEER_FAILED_VERIFICATION = 60


class MultiCode(IntEnum):
    r"""Result codes of the multi interface."""

    OK = 0
    BAD_HANDLE = 1
    BAD_EASY_HANDLE = 2
    ADDED_ALREADY = 7


class OptionKind(Enum):
    r"""Kind of value an option expects."""

    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING = "string"
    STRING_LIST = "string_list"


OPTION_KINDS: dict[TransferOption, OptionKind] = {
    TransferOption.TIMEOUT: OptionKind.INTEGER,
    TransferOption.VERBOSE: OptionKind.BOOLEAN,
    TransferOption.HEADER: OptionKind.BOOLEAN,
    TransferOption.NOBODY: OptionKind.BOOLEAN,
    TransferOption.FAILONERROR: OptionKind.BOOLEAN,
    TransferOption.POST: OptionKind.BOOLEAN,
    TransferOption.FOLLOWLOCATION: OptionKind.BOOLEAN,
    TransferOption.SSL_VERIFYPEER: OptionKind.BOOLEAN,
    TransferOption.MAXREDIRS: OptionKind.INTEGER,
    TransferOption.CONNECTTIMEOUT: OptionKind.INTEGER,
    TransferOption.HTTPGET: OptionKind.BOOLEAN,
    TransferOption.TIMEOUT_MS: OptionKind.INTEGER,
    TransferOption.CONNECTTIMEOUT_MS: OptionKind.INTEGER,
    TransferOption.URL: OptionKind.STRING,
    TransferOption.PROXY: OptionKind.STRING,
    TransferOption.USERPWD: OptionKind.STRING,
    TransferOption.POSTFIELDS: OptionKind.STRING,
    TransferOption.REFERER: OptionKind.STRING,
    TransferOption.USERAGENT: OptionKind.STRING,
    TransferOption.COOKIE: OptionKind.STRING,
    TransferOption.HTTPHEADER: OptionKind.STRING_LIST,
    TransferOption.CUSTOMREQUEST: OptionKind.STRING,
    TransferOption.ACCEPT_ENCODING: OptionKind.STRING,
    TransferOption.RETURNTRANSFER: OptionKind.BOOLEAN,
    TransferOption.BINARYTRANSFER: OptionKind.BOOLEAN,
}

_ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.OK: "No error",
    ErrorCode.UNSUPPORTED_PROTOCOL: "Unsupported protocol",
    ErrorCode.URL_MALFORMAT: "URL using bad/illegal format or missing URL",
    ErrorCode.COULDNT_RESOLVE_PROXY: "Couldn't resolve proxy name",
    ErrorCode.COULDNT_RESOLVE_HOST: "Couldn't resolve host name",
    ErrorCode.COULDNT_CONNECT: "Couldn't connect to server",
    ErrorCode.WEIRD_SERVER_REPLY: "Weird server reply",
    ErrorCode.HTTP_RETURNED_ERROR: "HTTP response code said error",
    ErrorCode.OPERATION_TIMEDOUT: "Timeout was reached",
    ErrorCode.SSL_CONNECT_ERROR: "SSL connect error",
    ErrorCode.BAD_FUNCTION_ARGUMENT: "A libcurl function was given a bad argument",
    ErrorCode.TOO_MANY_REDIRECTS: "Number of redirects hit maximum amount",
    ErrorCode.UNKNOWN_OPTION: "An unknown option was passed in to libcurl",
    ErrorCode.GOT_NOTHING: "Server returned nothing (no headers, no data)",
    ErrorCode.SEND_ERROR: "Failed sending data to the peer",
    ErrorCode.RECV_ERROR: "Failure when receiving data from the peer",
    ErrorCode.PEER_FAILED_VERIFICATION: (
        "SSL peer certificate or SSH remote key was not OK"
    ),
}

_MULTI_MESSAGES: dict[MultiCode, str] = {
    MultiCode.OK: "No error",
    MultiCode.BAD_HANDLE: "Invalid multi handle",
    MultiCode.BAD_EASY_HANDLE: "Invalid easy handle",
    MultiCode.ADDED_ALREADY: "The easy handle is already added to a multi handle",
}


def strerror(code: int) -> str | None:
    r"""Return the description of an error code.

    Args:
        code: The error code.

    Returns:
        The description, or ``None`` if the code is unknown.

    Example:
        ```pycon
        >>> from urlrequest.options import strerror
        >>> strerror(28)
        'Timeout was reached'
        >>> strerror(9999) is None
        True

        ```
    """
    try:
        return _ERROR_MESSAGES[ErrorCode(code)]
    except ValueError:
        return None


def multi_strerror(code: int) -> str | None:
    r"""Return the description of a multi interface result code, or
    ``None`` if the code is unknown."""
    try:
        return _MULTI_MESSAGES[MultiCode(code)]
    except ValueError:
        return None


def coerce_option_value(option: int, value: Any) -> Any:
    r"""Convert a raw option value to the kind the option expects.

    Integers ``0``/``1`` are accepted for boolean options, and ``None``
    is accepted for string options to unset them.

    Args:
        option: The option code.
        value: The raw value.

    Returns:
        The converted value.

    Raises:
        InvalidArgumentError: If the option code is unknown or the value
            cannot be converted.

    Example:
        ```pycon
        >>> from urlrequest.options import TransferOption, coerce_option_value
        >>> coerce_option_value(TransferOption.RETURNTRANSFER, 1)
        True
        >>> coerce_option_value(TransferOption.HTTPHEADER, ("Accept: */*",))
        ['Accept: */*']

        ```
    """
    try:
        kind = OPTION_KINDS[TransferOption(option)]
    except ValueError as exc:
        msg = f"unknown option code: {option!r}"
        raise InvalidArgumentError(msg) from exc

    if kind is OptionKind.BOOLEAN and isinstance(value, int):
        return bool(value)
    if kind is OptionKind.INTEGER and isinstance(value, int) and not isinstance(value, bool):
        return value
    if kind is OptionKind.STRING and (value is None or isinstance(value, str)):
        return value
    if kind is OptionKind.STRING_LIST and isinstance(value, (list, tuple)):
        if all(isinstance(item, str) for item in value):
            return list(value)

    msg = f"option {option!r} expects a value of kind {kind.value}, got {type(value).__name__}"
    raise InvalidArgumentError(msg)
