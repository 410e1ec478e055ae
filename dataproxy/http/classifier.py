"""Mapping of HTTP status codes to typed proxy errors."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable

import httpx

from .exceptions import (
    ConcurrencyError,
    DataProxyError,
    NotFoundError,
    ServiceError,
    UnimplementedError,
)

logger = logging.getLogger(__name__)


class FailureKind(enum.Enum):
    BAD_REQUEST = "bad_request"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    NOT_IMPLEMENTED = "not_implemented"
    OTHER = "other"


# Checked in this order.
_STATUS_KINDS: tuple[tuple[int, FailureKind], ...] = (
    (400, FailureKind.BAD_REQUEST),
    (409, FailureKind.CONFLICT),
    (404, FailureKind.NOT_FOUND),
    (501, FailureKind.NOT_IMPLEMENTED),
)

_KIND_ERRORS: dict[FailureKind, type[DataProxyError]] = {
    FailureKind.BAD_REQUEST: ServiceError,
    FailureKind.CONFLICT: ConcurrencyError,
    FailureKind.NOT_FOUND: NotFoundError,
    FailureKind.NOT_IMPLEMENTED: UnimplementedError,
}


@dataclass(frozen=True)
class Outcome:
    """A classified response: success when ``kind`` is None."""

    status_code: int
    body: str
    kind: FailureKind | None = None

    @property
    def is_success(self) -> bool:
        return self.kind is None


def classify(status_code: int, body: str = "") -> Outcome:
    """Classify a status code; any 2xx is a success."""
    for code, kind in _STATUS_KINDS:
        if status_code == code:
            return Outcome(status_code, body, kind)
    if 200 <= status_code < 300:
        return Outcome(status_code, body)
    return Outcome(status_code, body, FailureKind.OTHER)


def error_for(outcome: Outcome, format_server_error: Callable[[str], str]) -> DataProxyError | None:
    """Build the typed error for a classified failure.

    Returns None for successes and for ``FailureKind.OTHER``, which is
    reported by the transport itself.
    """
    error_type = _KIND_ERRORS.get(outcome.kind) if outcome.kind else None
    if error_type is None:
        return None
    return error_type(format_server_error(outcome.body), status_code=outcome.status_code)


def _identity(message: str) -> str:
    return message


def ensure_success_status_code(
    response: httpx.Response,
    format_server_error: Callable[[str], str] = _identity,
    request: httpx.Request | None = None,
) -> httpx.Response:
    """Raise the typed error matching a failed response.

    Parameters
    ----------
    response : httpx.Response
        The response to inspect
    format_server_error : callable, optional
        Rewrites the raw response body before it becomes the error message
    request : httpx.Request, optional
        The request that produced the response. Attached to responses that
        were built without one, so they can still report their URL

    Returns
    -------
    httpx.Response
        The same response, when its status is 2xx

    Raises
    ------
    ServiceError
        On 400 - Bad Request
    ConcurrencyError
        On 409 - Conflict
    NotFoundError
        On 404 - Not Found
    UnimplementedError
        On 501 - Not Implemented
    httpx.HTTPStatusError
        On any other non-2xx status, raised by httpx unchanged
    """
    outcome = classify(response.status_code)
    if outcome.is_success:
        return response
    url = _bind_request(response, request)
    if outcome.kind is FailureKind.OTHER:
        logger.info("%s answered %s", url, response.status_code)
        response.raise_for_status()
        return response
    error = error_for(Outcome(outcome.status_code, response.text, outcome.kind), format_server_error)
    logger.info("%s answered %s: %s", url, response.status_code, type(error).__name__)
    raise error


def _bind_request(response: httpx.Response, request: httpx.Request | None) -> str:
    """Return the response's URL, attaching ``request`` when it has none."""
    try:
        return str(response.request.url)
    except RuntimeError:
        if request is None:
            return "<unknown url>"
        response.request = request
        return str(request.url)
