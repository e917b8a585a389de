"""Common transport abstractions."""

from __future__ import annotations

from typing import Callable, Iterator, Literal, Mapping, Protocol, runtime_checkable

import httpx

TransportKind = Literal["http", "unix"]


class TransportResponse:
    """Status line, headers and a still-open body.

    The body is consumed through :meth:`iter_bytes` or :meth:`read`. Whoever
    holds the response must call :meth:`close`, which releases the underlying
    connection; ``with response:`` does that on every exit path.
    """

    def __init__(
        self,
        status: int,
        reason: str,
        headers: Mapping[str, str],
        chunks: Iterator[bytes],
        closer: Callable[[], None],
    ) -> None:
        self.status = status
        self.reason = reason
        self.headers = {k.lower(): v for k, v in headers.items()}
        self._chunks = chunks
        self._closer = closer
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def iter_bytes(self) -> Iterator[bytes]:
        if self._closed:
            raise ValueError("Response body is closed")
        yield from self._chunks

    def read(self) -> bytes:
        return b"".join(self.iter_bytes())

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._closer()

    def __enter__(self) -> "TransportResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@runtime_checkable
class Transport(Protocol):
    Kind = TransportKind

    @property
    def kind(self) -> TransportKind: ...

    @property
    def request_url(self) -> str: ...

    def send(self, request: httpx.Request, *, timeout: float | None = None) -> TransportResponse: ...

    def close(self) -> None: ...


__all__ = ["Transport", "TransportKind", "TransportResponse"]
