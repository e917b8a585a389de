"""HTTP(S) transport built on top of httpx."""

from __future__ import annotations

import socket
import threading
import time
from typing import Any, Iterator

import httpx

from ..config import RPC_PATH
from ..errors import RequestTimeout, TransportError
from ..logger import BoundLogger, create_logger
from .base import Transport, TransportResponse


class _Watchdog:
    """Shuts down a request's socket once its overall deadline passes.

    The socket is picked up through httpx's ``trace`` extension when the TCP
    connection is established. Shutting it down wakes any blocked read, so
    the caller is released even when the server keeps dribbling bytes.
    """

    def __init__(self, timeout: float, logger: BoundLogger) -> None:
        self.fired = False
        self._sock: socket.socket | None = None
        self._lock = threading.Lock()
        self._logger = logger
        self._timer = threading.Timer(timeout, self._fire)
        self._timer.daemon = True

    def start(self) -> None:
        self._timer.start()

    def cancel(self) -> None:
        self._timer.cancel()

    def trace(self, event_name: str, info: dict[str, Any]) -> None:
        if event_name != "connection.connect_tcp.complete":
            return
        stream = info.get("return_value")
        sock = stream.get_extra_info("socket") if stream is not None else None
        with self._lock:
            self._sock = sock
            fired = self.fired
        if fired and sock is not None:
            self._shutdown(sock)

    def _fire(self) -> None:
        with self._lock:
            self.fired = True
            sock = self._sock
        self._logger.debug("HTTP deadline reached, aborting request")
        if sock is not None:
            self._shutdown(sock)

    def _shutdown(self, sock: socket.socket) -> None:
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as exc:
            # Already closed by httpx.
            self._logger.trace("HTTP socket shutdown skipped: %s", exc)


class HttpTransport:
    kind: Transport.Kind = "http"

    def __init__(
        self,
        server_url: str,
        *,
        client: httpx.Client | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._endpoint = server_url.rstrip("/") + RPC_PATH
        # No pooled connections: each request dials its own, so the deadline
        # watchdog always knows which socket to abort.
        self._client = client or httpx.Client(limits=httpx.Limits(max_keepalive_connections=0))
        self._owns_client = client is None
        self._logger = (logger or create_logger()).child("http")

    @property
    def request_url(self) -> str:
        return self._endpoint

    def send(self, request: httpx.Request, *, timeout: float | None = None) -> TransportResponse:
        request.extensions["timeout"] = httpx.Timeout(timeout).as_dict()
        deadline = time.monotonic() + timeout if timeout else None
        watchdog: _Watchdog | None = None
        if timeout:
            watchdog = _Watchdog(timeout, self._logger)
            request.extensions["trace"] = watchdog.trace
            watchdog.start()

        self._logger.debug("HTTP POST %s bytes=%d", request.url, len(request.content))
        try:
            response = self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            if watchdog is not None:
                watchdog.cancel()
            if isinstance(exc, httpx.TimeoutException) or (watchdog is not None and watchdog.fired):
                raise RequestTimeout(f"HTTP request timeout after {timeout}s", context=str(request.url)) from exc
            raise TransportError(f"Cannot connect to {request.url}: {exc}", context=str(request.url)) from exc

        self._logger.debug("HTTP <- %s status=%s", request.url, response.status_code)

        def close() -> None:
            if watchdog is not None:
                watchdog.cancel()
            response.close()

        return TransportResponse(
            status=response.status_code,
            reason=response.reason_phrase,
            headers=dict(response.headers),
            chunks=self._stream_body(response, deadline, timeout, watchdog),
            closer=close,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _stream_body(
        self,
        response: httpx.Response,
        deadline: float | None,
        timeout: float | None,
        watchdog: _Watchdog | None,
    ) -> Iterator[bytes]:
        try:
            for chunk in response.iter_bytes():
                if deadline is not None and time.monotonic() > deadline:
                    raise RequestTimeout(f"HTTP request timeout after {timeout}s")
                yield chunk
        except RequestTimeout:
            response.close()
            raise
        except httpx.HTTPError as exc:
            response.close()
            if isinstance(exc, httpx.TimeoutException) or (watchdog is not None and watchdog.fired):
                raise RequestTimeout(f"HTTP read timeout after {timeout}s") from exc
            raise TransportError(f"HTTP read failed: {exc}") from exc
        finally:
            if watchdog is not None and response.is_closed:
                watchdog.cancel()


__all__ = ["HttpTransport"]
