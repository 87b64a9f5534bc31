"""Logging capability for validation failures.

A handler can log when it carries a ``LogSink``: any object with one method
per severity (``debug``, ``info``, ``warning``, ``error``, ``critical``).
A stdlib ``logging.Logger`` satisfies the protocol as-is.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


@runtime_checkable
class LogSink(Protocol):
    """Protocol for objects that can receive validation failure messages."""

    def debug(self, msg: str) -> object: ...

    def info(self, msg: str) -> object: ...

    def warning(self, msg: str) -> object: ...

    def error(self, msg: str) -> object: ...

    def critical(self, msg: str) -> object: ...


class LogLevel(str, Enum):
    """Severities a validation failure can be logged at."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: str | LogLevel) -> LogLevel:
        """
        Resolve a level name, accepting syslog-style aliases.

        Args:
            value: Level name such as "warning", "NOTICE" or "crit"

        Returns:
            The matching LogLevel

        Raises:
            ValueError: If the name is not a known level or alias
        """
        if isinstance(value, LogLevel):
            return value
        name = str(value).strip().lower()
        name = _LEVEL_ALIASES.get(name, name)
        return cls(name)


# Log::Dispatch / syslog names mapped onto the closed set above
_LEVEL_ALIASES = {
    "notice": "info",
    "warn": "warning",
    "err": "error",
    "crit": "critical",
    "alert": "critical",
    "emergency": "critical",
    "emerg": "critical",
    "fatal": "critical",
}


def can_log(candidate: object) -> bool:
    """Check whether an object implements the LogSink protocol."""
    return candidate is not None and isinstance(candidate, LogSink)


def emit(sink: LogSink, level: LogLevel, message: str) -> None:
    """Send one message to the sink at the given level."""
    if level is LogLevel.DEBUG:
        sink.debug(message)
    elif level is LogLevel.INFO:
        sink.info(message)
    elif level is LogLevel.WARNING:
        sink.warning(message)
    elif level is LogLevel.ERROR:
        sink.error(message)
    else:
        sink.critical(message)
