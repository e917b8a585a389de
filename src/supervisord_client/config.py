"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping

from .errors import ConfigurationError

DEFAULT_SERVER_URL = "http://localhost:9001"
RPC_PATH = "/RPC2"


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings read by every call.

    Instances are immutable; the client swaps in a new one when a setter is
    used, so a request that already started keeps the settings it began with.
    """

    server_url: str = DEFAULT_SERVER_URL
    username: str | None = None
    password: str | None = None
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout < 0:
            raise ConfigurationError(f"Timeout must not be negative, got {self.timeout!r}")
        # Zero means no timeout.
        if self.timeout == 0:
            object.__setattr__(self, "timeout", None)

    @property
    def rpc_url(self) -> str:
        return f"{self.server_url.rstrip('/')}{RPC_PATH}"

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    def with_user(self, username: str | None) -> "ClientConfig":
        return replace(self, username=username)

    def with_password(self, password: str | None) -> "ClientConfig":
        return replace(self, password=password)

    def with_timeout(self, timeout: float | None) -> "ClientConfig":
        return replace(self, timeout=timeout)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientConfig":
        """Build a configuration from ``SUPERVISOR_*`` environment variables."""
        env = os.environ if environ is None else environ
        raw_timeout = env.get("SUPERVISOR_TIMEOUT", "").strip()
        timeout: float | None = None
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as exc:
                raise ConfigurationError(f"Invalid SUPERVISOR_TIMEOUT: {raw_timeout!r}") from exc
        return cls(
            server_url=env.get("SUPERVISOR_SERVER_URL") or DEFAULT_SERVER_URL,
            username=env.get("SUPERVISOR_USERNAME") or None,
            password=env.get("SUPERVISOR_PASSWORD") or None,
            timeout=timeout,
        )


__all__ = ["ClientConfig", "DEFAULT_SERVER_URL", "RPC_PATH"]
