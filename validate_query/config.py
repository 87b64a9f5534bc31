"""
Per-handler query validation configuration.

A handler's configuration is an immutable value object. Calling
``validate_query_config`` builds a new one from the supplied options and
swaps it in only after every check has passed.

Option names are matched case-insensitively with underscores ignored, so
``errorTarget``, ``error_target`` and ``ERROR_TARGET`` all name one option.
``error_mode`` is kept as an alias of ``error_target``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from .errors import InvalidConfiguration, MissingLoggingCapability
from .log_sink import LogLevel
from .settings import DEFAULT_ERROR_TARGET

_OPTION_NAMES = {
    "errortarget": "error_target",
    "errormode": "error_target",
    "loglevel": "log_level",
}


class ValidateQueryConfig(BaseModel):
    """
    Validation settings owned by a single handler instance.

    Attributes:
        error_target: Error target activated when validation fails
        log_level: Severity used to log failures, or None to not log
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_target: str = DEFAULT_ERROR_TARGET
    log_level: LogLevel | None = None


def _normalize_option(name: str) -> str | None:
    return _OPTION_NAMES.get(name.replace("_", "").replace("-", "").lower())


def build_config(options: Mapping[str, Any], *, can_log: bool) -> ValidateQueryConfig:
    """
    Build a configuration from user-supplied options.

    Args:
        options: Mapping of option name to value
        can_log: Whether the owning handler exposes a log sink

    Returns:
        New ValidateQueryConfig; options left out take their defaults

    Raises:
        InvalidConfiguration: Unrecognized option names or an unknown log level
        MissingLoggingCapability: A log level was given but the handler cannot log
    """
    values: dict[str, Any] = {}
    unknown: list[str] = []
    for name, value in options.items():
        field = _normalize_option(str(name))
        if field is None:
            unknown.append(str(name))
        else:
            values[field] = value

    if unknown:
        raise InvalidConfiguration(
            f"Invalid option(s) ({', '.join(unknown)}) passed to validate_query_config",
            keys=unknown,
        )

    error_target = values.get("error_target")
    if error_target is None:
        error_target = DEFAULT_ERROR_TARGET
    elif not isinstance(error_target, str) or not error_target:
        raise InvalidConfiguration(
            f"error_target must be a non-empty string, got {error_target!r}",
            keys=["error_target"],
        )

    log_level = values.get("log_level")
    if log_level is not None and log_level != "":
        if not can_log:
            raise MissingLoggingCapability("log_level given but no logging interface exists.", keys=["log_level"])
        try:
            log_level = LogLevel.parse(log_level)
        except ValueError as e:
            raise InvalidConfiguration(f"Unknown log_level {log_level!r}", keys=["log_level"]) from e
    else:
        log_level = None

    return ValidateQueryConfig(error_target=error_target, log_level=log_level)
