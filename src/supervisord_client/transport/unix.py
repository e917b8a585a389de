"""Unix domain socket transport using the standard library socket module."""

from __future__ import annotations

import http.client
import socket
import time
from typing import Iterator

import httpx

from ..config import RPC_PATH
from ..errors import RequestTimeout, TransportError
from ..logger import BoundLogger, create_logger
from .base import Transport, TransportResponse

_CHUNK_SIZE = 8192


class UnixTransport:
    """Sends one HTTP/1.1 request per connection over a Unix socket.

    With a timeout configured it bounds the connect, then a separate deadline
    covers every read and write that follows on the same connection.
    """

    kind: Transport.Kind = "unix"

    def __init__(self, path: str, *, logger: BoundLogger | None = None) -> None:
        self._path = path
        self._logger = (logger or create_logger()).child("unix")

    @property
    def path(self) -> str:
        return self._path

    @property
    def request_url(self) -> str:
        # Only the path and headers go on the wire; the host is a placeholder.
        return f"http://localhost{RPC_PATH}"

    def send(self, request: httpx.Request, *, timeout: float | None = None) -> TransportResponse:
        sock = self._connect(timeout)
        deadline = time.monotonic() + timeout if timeout else None
        response: http.client.HTTPResponse | None = None
        try:
            payload = _serialize(request)
            self._logger.debug("UNIX %s sending bytes=%d", self._path, len(payload))
            _apply_deadline(sock, deadline)
            sock.sendall(payload)
            _apply_deadline(sock, deadline)
            response = http.client.HTTPResponse(sock, method=request.method)
            response.begin()
        except TimeoutError as exc:
            _release(response, sock)
            raise RequestTimeout(f"Unix socket timeout after {timeout}s", context=self._path) from exc
        except (OSError, http.client.HTTPException) as exc:
            _release(response, sock)
            raise TransportError(f"Unix socket exchange with {self._path} failed: {exc}", context=self._path) from exc

        self._logger.debug("UNIX <- %s status=%s", self._path, response.status)
        return TransportResponse(
            status=response.status,
            reason=response.reason,
            headers=dict(response.getheaders()),
            chunks=self._stream_body(response, sock, deadline, timeout),
            closer=lambda: _release(response, sock),
        )

    def close(self) -> None:
        # Connections are per request; nothing is held between calls.
        pass

    def _connect(self, timeout: float | None) -> socket.socket:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(timeout)
        try:
            sock.connect(self._path)
        except TimeoutError as exc:
            sock.close()
            raise RequestTimeout(f"Connecting to {self._path} timed out after {timeout}s", context=self._path) from exc
        except OSError as exc:
            sock.close()
            raise TransportError(f"Cannot connect to unix socket {self._path}: {exc}", context=self._path) from exc
        return sock

    def _stream_body(
        self,
        response: http.client.HTTPResponse,
        sock: socket.socket,
        deadline: float | None,
        timeout: float | None,
    ) -> Iterator[bytes]:
        try:
            while True:
                _apply_deadline(sock, deadline)
                chunk = response.read(_CHUNK_SIZE)
                if not chunk:
                    break
                self._logger.trace("UNIX chunk bytes=%d", len(chunk))
                yield chunk
        except TimeoutError as exc:
            _release(response, sock)
            raise RequestTimeout(f"Unix socket read timeout after {timeout}s", context=self._path) from exc
        except (OSError, http.client.HTTPException) as exc:
            _release(response, sock)
            raise TransportError(f"Unix socket read from {self._path} failed: {exc}", context=self._path) from exc
        _release(response, sock)


def _serialize(request: httpx.Request) -> bytes:
    lines = [f"{request.method} {request.url.raw_path.decode('ascii')} HTTP/1.1"]
    for name, value in request.headers.raw:
        lines.append(f"{name.decode('latin-1')}: {value.decode('latin-1')}")
    lines.append("Connection: close")
    head = "\r\n".join(lines) + "\r\n\r\n"
    return head.encode("latin-1") + request.content


def _apply_deadline(sock: socket.socket, deadline: float | None) -> None:
    if deadline is None:
        sock.settimeout(None)
        return
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise TimeoutError("deadline exceeded")
    sock.settimeout(remaining)


def _release(response: http.client.HTTPResponse | None, sock: socket.socket) -> None:
    if response is not None:
        response.close()
    sock.close()


__all__ = ["UnixTransport"]
