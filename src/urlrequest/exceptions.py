r"""Define the exceptions raised by urlrequest.

Transfer failures (DNS errors, refused connections, timeouts, ...) are
never raised. They are reported through the transport's sentinel return
values and the error message / error code queries. The exceptions below
only signal misuse of the API.
"""

from __future__ import annotations

__all__ = ["ConfigurationError", "InvalidArgumentError", "UrlRequestError"]


class UrlRequestError(Exception):
    r"""Base class for all urlrequest exceptions.

    Example:
        ```pycon
        >>> from urlrequest.exceptions import UrlRequestError
        >>> raise UrlRequestError("something went wrong")  # doctest: +SKIP

        ```
    """


class ConfigurationError(UrlRequestError):
    r"""Raised when a component is used before it was configured.

    For example, ``UrlRequest.get_transport()`` raises this exception when
    no transport was ever set.
    """


class InvalidArgumentError(UrlRequestError, TypeError):
    r"""Raised when an argument has an unsupported type.

    It also derives from ``TypeError`` so callers can catch it with the
    built-in exception.

    Example:
        ```pycon
        >>> from urlrequest.exceptions import InvalidArgumentError
        >>> isinstance(InvalidArgumentError("bad"), TypeError)
        True

        ```
    """
