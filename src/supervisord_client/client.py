"""High-level client exposing the daemon's XML-RPC methods."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from .auth import AuthManager
from .codec import Shape, as_bool, as_process_infos, as_string, build_request, decode_reply
from .config import ClientConfig
from .errors import ValidationError
from .logger import LogLevel, create_logger
from .streaming import decode_reload_config
from .transport import Transport, TransportResponse, resolve_transport
from .types import STATE_CHANGES, ProcessInfo, ProcessSignal, ReloadConfigResult, StateChange
from .validator import validate_response

T = TypeVar("T")


class SupervisorClient:
    """Primary entry point for controlling a supervisord daemon.

    Every method blocks until the reply is decoded, the timeout expires or
    the call fails. Credentials and timeout may be changed between calls;
    each call works from the settings current when it started.
    """

    def __init__(
        self,
        server_url: str,
        *,
        username: str | None = None,
        password: str | None = None,
        timeout: float | None = None,
        transport: Transport | None = None,
        logger: object | None = None,
        log_level: LogLevel = "info",
    ) -> None:
        self._config = ClientConfig(
            server_url=server_url.rstrip("/"),
            username=username,
            password=password,
            timeout=timeout,
        )
        self._logger = create_logger(logger=logger, level=log_level)
        self._logger.info("Initializing SupervisorClient for %s", self._config.server_url)
        self._transport = transport or resolve_transport(self._config.server_url, logger=self._logger)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **kwargs: Any,
    ) -> "SupervisorClient":
        config = ClientConfig.from_env(environ)
        return cls(
            config.server_url,
            username=config.username,
            password=config.password,
            timeout=config.timeout,
            **kwargs,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def server_url(self) -> str:
        return self._config.server_url

    @property
    def rpc_url(self) -> str:
        return self._config.rpc_url

    def set_user(self, username: str | None) -> None:
        self._config = self._config.with_user(username)

    def set_password(self, password: str | None) -> None:
        self._config = self._config.with_password(password)

    def set_timeout(self, timeout: float | None) -> None:
        self._config = self._config.with_timeout(timeout)

    # --- Daemon methods ---

    def get_version(self) -> str:
        return self._call("supervisor.getVersion", None, as_string)

    def get_all_process_info(self) -> list[ProcessInfo]:
        return self._call("supervisor.getAllProcessInfo", None, as_process_infos)

    def change_process_state(self, change: StateChange, name: str) -> bool:
        """Start or stop the process ``name``; ``change`` is ``"start"`` or ``"stop"``."""
        _check_change(change)
        _check_present("process name", name)
        return self._call(f"supervisor.{change}Process", name, as_bool)

    def start_process(self, name: str) -> bool:
        return self.change_process_state("start", name)

    def stop_process(self, name: str) -> bool:
        return self.change_process_state("stop", name)

    def change_all_process_state(self, change: StateChange) -> list[ProcessInfo]:
        """Start or stop every process, waiting for the daemon to finish."""
        _check_change(change)
        return self._call(f"supervisor.{change}AllProcesses", True, as_process_infos)

    def start_all_processes(self) -> list[ProcessInfo]:
        return self.change_all_process_state("start")

    def stop_all_processes(self) -> list[ProcessInfo]:
        return self.change_all_process_state("stop")

    def signal_process(self, signal: str, name: str) -> bool:
        _check_present("signal", signal)
        _check_present("process name", name)
        return self._call("supervisor.signalProcess", ProcessSignal(name=name, signal=signal), as_bool)

    def signal_all_processes(self, signal: str) -> list[ProcessInfo]:
        _check_present("signal", signal)
        return self._call("supervisor.signalAllProcesses", signal, as_process_infos)

    def shutdown(self) -> bool:
        return self._call("supervisor.shutdown", None, as_bool)

    def reload_config(self) -> ReloadConfigResult:
        """Ask the daemon to re-read its configuration.

        Returns the group names that were added, changed and removed.
        """
        with self._post("supervisor.reloadConfig", None) as response:
            result = decode_reload_config(response.iter_bytes(), logger=self._logger)
        self._logger.debug(
            "reloadConfig added=%d changed=%d removed=%d",
            len(result.added),
            len(result.changed),
            len(result.removed),
        )
        return result

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "SupervisorClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- Internals ---

    def _call(self, method: str, argument: Any, shape: Shape[T]) -> T:
        with self._post(method, argument) as response:
            payload = response.read()
        return decode_reply(payload, shape)

    def _post(self, method: str, argument: Any) -> TransportResponse:
        config = self._config
        auth = AuthManager(config.username, config.password, self._logger)
        request = build_request(self._transport.request_url, method, argument, auth)
        self._logger.debug("Calling %s via %s", method, self._transport.kind)
        response = self._transport.send(request, timeout=config.timeout)
        return validate_response(response)


def _check_change(change: str) -> None:
    if change not in STATE_CHANGES:
        raise ValidationError(f"Incorrect required state {change!r}; expected 'start' or 'stop'", context=change)


def _check_present(label: str, value: str) -> None:
    if not value:
        raise ValidationError(f"A {label} is required", context=value)


__all__ = ["SupervisorClient"]
