"""Exception classes for the HTTP data proxy.

Each failure a proxy call can surface has its own class, so callers can
branch on the kind of failure (``except NotFoundError``) instead of
inspecting status codes.
"""

from __future__ import annotations


class DataProxyError(Exception):
    """Base exception for all data proxy errors.

    All custom exceptions in the package inherit from this base class,
    allowing applications to catch every proxy-specific error with a
    single except clause if desired.

    Attributes
    ----------
    message : str
        The error message, usually the (formatted) server response body
    status_code : int or None
        The HTTP status code that produced the error, when there is one
    """

    def __init__(self, message: str = "", status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ServiceError(DataProxyError):
    """Raised when the server rejects a request as invalid (HTTP 400)."""


class ConcurrencyError(DataProxyError):
    """Raised when an update conflicts with a change made by someone else (HTTP 409)."""


class NotFoundError(DataProxyError):
    """Raised when the addressed resource does not exist (HTTP 404)."""


class UnimplementedError(DataProxyError):
    """Raised when the server does not support the operation (HTTP 501)."""


class UnsupportedContentError(DataProxyError):
    """Raised when the response content type cannot be read by the active codec.

    Only checked once the status is 2xx, and before the body is decoded or
    the response hook runs. The message is never passed through an error
    formatter.

    Attributes
    ----------
    content_type : str
        The content type the server answered with
    """

    def __init__(self, content_type: str, media_types: tuple[str, ...] = (), status_code: int | None = None):
        self.content_type = content_type
        self.media_types = media_types
        supported = ", ".join(media_types) or "none"
        super().__init__(
            f"No codec is available to read content of media type '{content_type or 'unknown'}' "
            f"(supported: {supported})",
            status_code=status_code,
        )


class ConnectionError(DataProxyError):
    """Raised when unable to connect to the remote service.

    This typically indicates network issues, an incorrect base URL,
    or the remote service being unavailable.

    Attributes
    ----------
    url : str
        The URL that failed to connect
    original_error : Exception
        The underlying exception that caused the connection failure
    """

    def __init__(self, url: str, original_error: Exception):
        self.url = url
        self.original_error = original_error
        super().__init__(f"Failed to connect to {url}: {original_error}")
