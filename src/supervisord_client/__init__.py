"""Public surface for the supervisord XML-RPC client."""

from .client import SupervisorClient
from .config import ClientConfig
from .errors import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    FaultError,
    NotFoundError,
    ParseError,
    ProtocolError,
    RequestTimeout,
    ServerError,
    SupervisorError,
    TransportError,
    ValidationError,
)
from .streaming import GroupAccumulator, PathProcessor
from .transport import HttpTransport, UnixTransport, resolve_transport
from .types import ProcessInfo, ProcessSignal, ReloadConfigResult
from .version import __version__

__all__ = [
    "__version__",
    "AuthenticationError",
    "AuthorizationError",
    "ClientConfig",
    "ConfigurationError",
    "FaultError",
    "GroupAccumulator",
    "HttpTransport",
    "NotFoundError",
    "ParseError",
    "PathProcessor",
    "ProcessInfo",
    "ProcessSignal",
    "ProtocolError",
    "ReloadConfigResult",
    "RequestTimeout",
    "ServerError",
    "SupervisorClient",
    "SupervisorError",
    "TransportError",
    "UnixTransport",
    "ValidationError",
    "resolve_transport",
]
