"""Reply and argument shapes exchanged with the daemon."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, get_args

StateChange = Literal["start", "stop"]
STATE_CHANGES: frozenset[str] = frozenset(get_args(StateChange))


@dataclass(frozen=True)
class ProcessInfo:
    name: str
    group: str
    description: str = ""
    start: int = 0
    stop: int = 0
    now: int = 0
    state: int = 0
    statename: str = ""
    spawnerr: str = ""
    exitstatus: int = 0
    logfile: str = ""
    stdout_logfile: str = ""
    stderr_logfile: str = ""
    pid: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProcessInfo":
        """Build from an XML-RPC struct, ignoring members this client does not know.

        Raises ``KeyError``/``TypeError`` when the struct cannot describe a process;
        the decoder turns those into parse errors.
        """
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        if not isinstance(known["name"], str) or not isinstance(known["group"], str):
            raise TypeError("process name and group must be strings")
        return cls(**known)


@dataclass(frozen=True)
class ProcessSignal:
    """Argument record for ``supervisor.signalProcess``; fields travel in order."""

    name: str
    signal: str


@dataclass
class ReloadConfigResult:
    added: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


__all__ = ["ProcessInfo", "ProcessSignal", "ReloadConfigResult", "STATE_CHANGES", "StateChange"]
