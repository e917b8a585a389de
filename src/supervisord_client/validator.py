"""Status checking for raw transport responses."""

from __future__ import annotations

from .errors import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ProtocolError,
    ServerError,
)
from .transport.base import TransportResponse


def validate_response(response: TransportResponse) -> TransportResponse:
    """Return ``response`` untouched when its status is 2xx.

    Any other status closes the body first, then raises. On success the
    caller owns the open body and must close it.
    """
    status = response.status
    if status // 100 == 2:
        return response
    response.close()
    if status == 401:
        raise AuthenticationError(status, response.reason)
    if status == 403:
        raise AuthorizationError(status, response.reason)
    if status == 404:
        raise NotFoundError(status, response.reason)
    if status // 100 == 5:
        raise ServerError(status, response.reason)
    raise ProtocolError(status, response.reason)


__all__ = ["validate_response"]
