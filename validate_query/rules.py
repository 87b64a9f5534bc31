"""Rule descriptors for query validation.

A rule set maps parameter names to rule descriptors. Descriptors can be
written in several shorthand forms:

    {
        "pet_id": ParamType.SCALAR,                    # required scalar
        "direction": {"type": "scalar", "default": "up"},
        "tags": Rule(type=ParamType.LIST, optional=True),
        "anything": False,                             # optional, any shape
        "log_level": "warning",                        # control key
        "ignore_rest": True,                           # control key
    }

Control keys are pulled out of the rule set before anything is validated.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import InvalidRuleSet
from .log_sink import LogLevel

LOG_LEVEL_KEYS = frozenset({"log_level", "logLevel"})
IGNORE_REST_KEYS = frozenset({"ignore_rest", "ignoreRest", "ignore_rest_p"})
CONTROL_KEYS = LOG_LEVEL_KEYS | IGNORE_REST_KEYS

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


class ParamType(str, Enum):
    """Shape a parameter value must have."""

    SCALAR = "scalar"  # exactly one value
    LIST = "list"  # two or more values
    ANY = "any"


class Rule(BaseModel):
    """
    Validation rule for a single parameter.

    Attributes:
        type: Expected value shape
        optional: Whether the parameter may be absent
        default: Value substituted when the parameter is absent (implies optional)
        regex: Pattern that must be found in the value (every element for lists)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: ParamType = ParamType.SCALAR
    optional: bool = False
    default: Any = None
    regex: str | None = None

    @field_validator("regex", mode="after")
    @classmethod
    def validate_regex(cls, v: str | None) -> str | None:
        """Reject patterns that do not compile."""
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid regex {v!r}: {e}") from e
        return v

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set

    @property
    def required(self) -> bool:
        return not self.optional and not self.has_default


# Accepts anything, used for parameters let through by ignore_rest
PERMISSIVE_RULE = Rule(type=ParamType.ANY, optional=True)


@dataclass(frozen=True)
class ParsedRuleSet:
    """A rule set with its control keys separated out."""

    rules: dict[str, Rule] = field(default_factory=dict)
    log_level: LogLevel | None = None
    ignore_rest: bool = False


def parse_rule(name: str, spec: Any) -> Rule:
    """
    Turn a rule descriptor into a Rule.

    Args:
        name: Parameter name (used in error messages)
        spec: Rule, ParamType, type name, bool or mapping of Rule fields

    Raises:
        InvalidRuleSet: If the descriptor is not understood
    """
    if isinstance(spec, Rule):
        return spec
    if isinstance(spec, bool):
        return Rule(type=ParamType.ANY, optional=not spec)
    if isinstance(spec, str):
        try:
            return Rule(type=ParamType(spec.lower()))
        except ValueError as e:
            raise InvalidRuleSet(f"Unknown parameter type {spec!r} for {name!r}") from e
    if isinstance(spec, Mapping):
        try:
            return Rule.model_validate(dict(spec))
        except ValidationError as e:
            raise InvalidRuleSet(f"Invalid rule for {name!r}: {e}") from e
    raise InvalidRuleSet(f"Invalid rule for {name!r}: {spec!r}")


def parse_flag(name: str, spec: Any) -> bool:
    """
    Read a boolean control value.

    Accepts bools, ints, None and the usual string spellings ("0", "false",
    "off", "" and friends are false).

    Raises:
        InvalidRuleSet: For any other value
    """
    if spec is None:
        return False
    if isinstance(spec, (bool, int)):
        return bool(spec)
    if isinstance(spec, str):
        text = spec.strip().lower()
        if text in _FALSE_STRINGS:
            return False
        if text in _TRUE_STRINGS:
            return True
    raise InvalidRuleSet(f"Invalid value for {name!r}: {spec!r}")


def parse_rule_set(rule_set: Mapping[str, Any]) -> ParsedRuleSet:
    """
    Split a caller-supplied rule set into rules and control settings.

    The caller's mapping is not modified.

    Raises:
        InvalidRuleSet: For malformed rules or an unknown log level override
    """
    rules: dict[str, Rule] = {}
    log_level: LogLevel | None = None
    ignore_rest = False

    for name, spec in rule_set.items():
        if name in LOG_LEVEL_KEYS:
            if spec and log_level is None:
                try:
                    log_level = LogLevel.parse(spec)
                except ValueError as e:
                    raise InvalidRuleSet(f"Unknown log_level {spec!r}") from e
        elif name in IGNORE_REST_KEYS:
            ignore_rest = parse_flag(name, spec) or ignore_rest
        else:
            rules[str(name)] = parse_rule(str(name), spec)

    return ParsedRuleSet(rules=rules, log_level=log_level, ignore_rest=ignore_rest)
