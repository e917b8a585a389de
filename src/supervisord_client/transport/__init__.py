"""Transport implementations and scheme-based selection."""

from __future__ import annotations

from urllib.parse import urlsplit

from ..errors import TransportError
from ..logger import BoundLogger
from .base import Transport, TransportKind, TransportResponse
from .http import HttpTransport
from .unix import UnixTransport


def resolve_transport(server_url: str, *, logger: BoundLogger | None = None) -> Transport:
    """Pick the transport for ``server_url`` based on its scheme.

    ``http``/``https`` URLs go through :class:`HttpTransport`; ``unix`` URLs
    use only their path component as the socket file.
    """
    try:
        parsed = urlsplit(server_url)
        # Accessing the port validates it.
        parsed.port
    except ValueError as exc:
        raise TransportError(f"Invalid server URL {server_url!r}: {exc}", context=server_url) from exc

    scheme = parsed.scheme.lower()
    if scheme in {"http", "https"}:
        if not parsed.hostname:
            raise TransportError(f"Server URL {server_url!r} has no host", context=server_url)
        return HttpTransport(server_url, logger=logger)
    if scheme == "unix":
        if not parsed.path:
            raise TransportError(f"Server URL {server_url!r} has no socket path", context=server_url)
        return UnixTransport(parsed.path, logger=logger)
    raise TransportError(f"Unsupported scheme {scheme!r} in {server_url!r}", context=server_url)


__all__ = [
    "HttpTransport",
    "Transport",
    "TransportKind",
    "TransportResponse",
    "UnixTransport",
    "resolve_transport",
]
