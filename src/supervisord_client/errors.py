"""Custom exceptions raised by the supervisord client."""

from __future__ import annotations

from typing import Any


class SupervisorError(Exception):
    """Base error for all client failures."""

    def __init__(self, message: str, *, context: Any | None = None) -> None:
        super().__init__(message)
        self.context = context


class ValidationError(SupervisorError):
    """Raised for bad arguments, before any request is sent."""


class ConfigurationError(SupervisorError):
    """Raised when a configuration value cannot be used."""


class TransportError(SupervisorError):
    """Raised when the daemon cannot be reached or the exchange breaks off."""


class RequestTimeout(TransportError):
    """Raised when a call exceeds the configured timeout."""


class ProtocolError(SupervisorError):
    """Raised for any non-2xx HTTP status."""

    def __init__(self, status: int, reason: str, *, context: Any | None = None) -> None:
        self.status = status
        self.reason = reason
        super().__init__(f"{status} {reason}".strip(), context=context)


class AuthenticationError(ProtocolError):
    """Raised when the daemon rejects the credentials (401)."""


class AuthorizationError(ProtocolError):
    """Raised when the daemon denies access (403)."""


class NotFoundError(ProtocolError):
    """Raised when the RPC endpoint does not exist (404)."""


class ServerError(ProtocolError):
    """Raised for 5xx style failures."""


class ParseError(SupervisorError):
    """Raised when a response document cannot be decoded."""


class FaultError(SupervisorError):
    """Raised when the daemon answers with an XML-RPC fault."""

    def __init__(self, code: int, string: str) -> None:
        self.code = code
        self.string = string
        super().__init__(f"<Fault {code}: {string}>")


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConfigurationError",
    "FaultError",
    "NotFoundError",
    "ParseError",
    "ProtocolError",
    "RequestTimeout",
    "ServerError",
    "SupervisorError",
    "TransportError",
    "ValidationError",
]
