"""Basic-auth handling for outgoing requests."""

from __future__ import annotations

import httpx

from .logger import BoundLogger


class AuthManager:
    """Attaches HTTP basic-auth credentials to a request.

    Credentials are applied only when both the username and the password are
    non-empty, and identically on every transport since the request is built
    before it is known how it will travel.
    """

    def __init__(self, username: str | None, password: str | None, logger: BoundLogger) -> None:
        self.username = username
        self.password = password
        self._logger = logger.child("auth")

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    def apply(self, request: httpx.Request) -> httpx.Request:
        if not self.has_credentials:
            return request
        assert self.username is not None and self.password is not None
        self._logger.trace("Attaching basic auth for user %s", self.username)
        flow = httpx.BasicAuth(self.username, self.password).auth_flow(request)
        return next(flow)


__all__ = ["AuthManager"]
