"""XML-RPC request encoding and uniform reply decoding.

Wire encoding and decoding are delegated to :mod:`xmlrpc.client`; this module
adapts them to the client's argument conventions and error types.
"""

from __future__ import annotations

import dataclasses
import xmlrpc.client
from typing import Any, Callable, TypeVar
from xml.parsers.expat import ExpatError

import httpx

from .auth import AuthManager
from .errors import FaultError, ParseError, ValidationError
from .types import ProcessInfo

T = TypeVar("T")
Shape = Callable[[Any], T]

CONTENT_TYPE = "text/xml"


def call_params(argument: Any) -> tuple[Any, ...]:
    """Spread a call argument into positional XML-RPC params.

    ``None`` means no params, a tuple or dataclass record contributes one
    param per field, anything else is a single scalar param.
    """
    if argument is None:
        return ()
    if isinstance(argument, tuple):
        return argument
    if dataclasses.is_dataclass(argument) and not isinstance(argument, type):
        return tuple(getattr(argument, f.name) for f in dataclasses.fields(argument))
    return (argument,)


def encode_call(method: str, argument: Any = None) -> bytes:
    try:
        body = xmlrpc.client.dumps(call_params(argument), methodname=method, encoding="utf-8")
    except TypeError as exc:
        raise ValidationError(f"Cannot encode argument for {method}: {exc}", context=argument) from exc
    return body.encode("utf-8")


def build_request(url: str, method: str, argument: Any, auth: AuthManager) -> httpx.Request:
    request = httpx.Request(
        "POST",
        url,
        content=encode_call(method, argument),
        headers={"Content-Type": CONTENT_TYPE},
    )
    return auth.apply(request)


def decode_reply(payload: bytes, shape: Shape[T]) -> T:
    try:
        params, _ = xmlrpc.client.loads(payload)
    except xmlrpc.client.Fault as exc:
        raise FaultError(exc.faultCode, exc.faultString) from exc
    except (ExpatError, xmlrpc.client.ResponseError, ValueError, TypeError) as exc:
        raise ParseError(f"Malformed XML-RPC reply: {exc}", context=payload[:200]) from exc
    if len(params) != 1:
        raise ParseError(f"Expected a single reply value, got {len(params)}", context=payload[:200])
    try:
        return shape(params[0])
    except (KeyError, TypeError, ValueError) as exc:
        raise ParseError(f"Unexpected reply shape: {exc}", context=params[0]) from exc


def as_string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {type(value).__name__}")
    return value


def as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected boolean, got {type(value).__name__}")
    return value


def as_process_infos(value: Any) -> list[ProcessInfo]:
    if not isinstance(value, list):
        raise TypeError(f"expected array, got {type(value).__name__}")
    return [ProcessInfo.from_mapping(item) for item in value]


__all__ = [
    "as_bool",
    "as_process_infos",
    "as_string",
    "build_request",
    "call_params",
    "decode_reply",
    "encode_call",
]
