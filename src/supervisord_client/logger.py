"""Logging wrapper shared by the client, the transports and the stream processor."""

from __future__ import annotations

import logging
from typing import Any, Literal

LogLevel = Literal["trace", "debug", "info", "warn", "error"]

LOGGER_NAME = "supervisord_client"
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

# name -> (priority, stdlib level)
_LEVELS: dict[LogLevel, tuple[int, int]] = {
    "trace": (0, TRACE_LEVEL),
    "debug": (1, logging.DEBUG),
    "info": (2, logging.INFO),
    "warn": (3, logging.WARNING),
    "error": (4, logging.ERROR),
}


class BoundLogger:
    """Filters records by a client-side level before handing them to a logger.

    The wrapped object is normally a :class:`logging.Logger`; anything exposing
    ``debug``/``info``/``warn``/``error`` methods works as well.
    """

    def __init__(self, logger: Any | None = None, *, level: LogLevel = "info") -> None:
        if level not in _LEVELS:
            raise ValueError(f"Unknown log level: {level!r}")
        self._logger = logger if logger is not None else _default_logger()
        self._level = level

    @property
    def level(self) -> LogLevel:
        return self._level

    def trace(self, msg: str, *args: Any) -> None:
        self._emit("trace", msg, args)

    def debug(self, msg: str, *args: Any) -> None:
        self._emit("debug", msg, args)

    def info(self, msg: str, *args: Any) -> None:
        self._emit("info", msg, args)

    def warn(self, msg: str, *args: Any) -> None:
        self._emit("warn", msg, args)

    def error(self, msg: str, *args: Any) -> None:
        self._emit("error", msg, args)

    def child(self, name: str) -> "BoundLogger":
        """Return a logger for a sub-component, e.g. ``supervisord_client.unix``."""
        if isinstance(self._logger, logging.Logger):
            return BoundLogger(self._logger.getChild(name), level=self._level)
        return BoundLogger(self._logger, level=self._level)

    def _emit(self, level: LogLevel, msg: str, args: tuple[Any, ...]) -> None:
        priority, stdlib_level = _LEVELS[level]
        if priority < _LEVELS[self._level][0]:
            return
        try:
            if isinstance(self._logger, logging.Logger):
                self._logger.log(stdlib_level, msg, *args)
                return
            method = getattr(self._logger, level, None)
            if method is None and level == "trace":
                method = getattr(self._logger, "debug", None)
            if method is not None:
                method(msg, *args)
        except Exception:
            # Logging must never break an RPC call
            pass


def _default_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(TRACE_LEVEL)
    return logger


def create_logger(*, logger: Any | None = None, level: LogLevel = "info") -> BoundLogger:
    if isinstance(logger, BoundLogger):
        return logger
    return BoundLogger(logger, level=level)


__all__ = ["BoundLogger", "LogLevel", "create_logger"]
