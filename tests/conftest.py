from __future__ import annotations

import xmlrpc.client
from typing import Any

import httpx
import pytest

from supervisord_client.transport.base import Transport, TransportResponse


def reply(value: Any) -> bytes:
    return xmlrpc.client.dumps((value,), methodresponse=True).encode("utf-8")


def fault(code: int, message: str) -> bytes:
    return xmlrpc.client.dumps(xmlrpc.client.Fault(code, message), methodresponse=True).encode("utf-8")


def process_struct(name: str, **overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": name,
        "group": name,
        "description": "pid 42, uptime 0:01:00",
        "start": 1700000000,
        "stop": 0,
        "now": 1700000060,
        "state": 20,
        "statename": "RUNNING",
        "spawnerr": "",
        "exitstatus": 0,
        "logfile": f"/var/log/{name}.log",
        "stdout_logfile": f"/var/log/{name}.log",
        "stderr_logfile": "",
        "pid": 42,
    }
    data.update(overrides)
    return data


class DummyTransport:
    request_url = "http://localhost:9001/RPC2"

    def __init__(
        self,
        body: bytes = b"",
        *,
        status: int = 200,
        reason: str = "OK",
        kind: Transport.Kind = "http",
    ) -> None:
        self.body = body
        self.status = status
        self.reason = reason
        self.kind: Transport.Kind = kind
        self.requests: list[httpx.Request] = []
        self.timeouts: list[float | None] = []
        self.responses: list[TransportResponse] = []

    def send(self, request: httpx.Request, *, timeout: float | None = None) -> TransportResponse:
        self.requests.append(request)
        self.timeouts.append(timeout)
        response = TransportResponse(
            status=self.status,
            reason=self.reason,
            headers={"Content-Type": "text/xml"},
            chunks=iter([self.body]),
            closer=lambda: None,
        )
        self.responses.append(response)
        return response

    def close(self) -> None:  # pragma: no cover - nothing to release
        pass


class ForbiddenTransport:
    kind: Transport.Kind = "http"
    request_url = "http://localhost:9001/RPC2"

    def send(self, request: httpx.Request, *, timeout: float | None = None) -> TransportResponse:
        raise AssertionError("transport must not be used")

    def close(self) -> None:  # pragma: no cover - nothing to release
        pass


@pytest.fixture
def sent_call():
    def _decode(request: httpx.Request) -> tuple[tuple[Any, ...], str]:
        return xmlrpc.client.loads(request.content)

    return _decode
