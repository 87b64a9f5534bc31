"""
Schema validation strategy.

The validator core only needs ``validate(params, rules) -> SchemaResult``.
``PydanticSchemaValidator`` is the default implementation: it builds a
throwaway pydantic model for each call with one aliased field per rule and
``extra="forbid"``, so parameters without a rule are rejected.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, Protocol

from pydantic import AfterValidator, ConfigDict, Field, ValidationError, create_model

from .rules import ParamType, Rule


@dataclass(frozen=True)
class SchemaResult:
    """
    Outcome of a schema validation call.

    Attributes:
        values: Validated values for declared rules, including applied defaults
        detail: Failure description, or None on success
    """

    values: dict[str, Any] = field(default_factory=dict)
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.detail is None


class SchemaValidator(Protocol):
    """Strategy that checks parameters against a set of rules."""

    def validate(self, params: Mapping[str, Any], rules: Mapping[str, Rule]) -> SchemaResult:
        """
        Validate parameters against rules.

        Must reject parameters that have no rule, enforce required/optional,
        shape and regex constraints, and substitute defaults for absent
        parameters.
        """
        ...


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


_UNSET = _Unset()

_ERROR_MESSAGES = {
    "missing": "required parameter is missing",
    "extra_forbidden": "parameter is not listed in the validation rules",
}


def _is_multi(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _shape_check(expected: ParamType) -> Callable[[Any], Any]:
    def check(value: Any) -> Any:
        if expected is ParamType.SCALAR and _is_multi(value):
            raise ValueError(f"expected a single value, got {len(value)} values")
        if expected is ParamType.LIST and not _is_multi(value):
            raise ValueError("expected multiple values, got a single value")
        return list(value) if _is_multi(value) else value

    return check


def _regex_check(pattern: str) -> Callable[[Any], Any]:
    compiled = re.compile(pattern)

    def check(value: Any) -> Any:
        items = value if _is_multi(value) else [value]
        for item in items:
            if compiled.search(str(item)) is None:
                raise ValueError(f"value {item!r} does not match regex {pattern!r}")
        return value

    return check


def _field_for(name: str, rule: Rule) -> tuple[Any, Any]:
    validators: list[Any] = [AfterValidator(_shape_check(rule.type))]
    if rule.regex is not None:
        validators.append(AfterValidator(_regex_check(rule.regex)))
    annotation = Annotated[(Any, *validators)]

    if rule.has_default:
        return annotation, Field(default=rule.default, alias=name)
    if rule.optional:
        return annotation, Field(default=_UNSET, alias=name)
    return annotation, Field(alias=name)


def format_errors(error: ValidationError) -> str:
    """Render pydantic errors as '<param>: <message>' pairs."""
    parts = []
    for err in error.errors():
        name = ".".join(str(p) for p in err["loc"]) or "<query>"
        if err["type"] in _ERROR_MESSAGES:
            message = _ERROR_MESSAGES[err["type"]]
        elif err["type"] == "value_error" and "error" in err.get("ctx", {}):
            message = str(err["ctx"]["error"])
        else:
            message = err["msg"]
        parts.append(f"{name}: {message}")
    return "; ".join(parts)


class PydanticSchemaValidator:
    """SchemaValidator backed by a dynamically created pydantic model."""

    def validate(self, params: Mapping[str, Any], rules: Mapping[str, Rule]) -> SchemaResult:
        # Field names are positional so any parameter name works as an alias
        field_names = {f"p{i}": name for i, name in enumerate(rules)}
        fields = {fname: _field_for(name, rules[name]) for fname, name in field_names.items()}
        model_cls = create_model(  # type: ignore[call-overload]
            "QueryParameters",
            __config__=ConfigDict(extra="forbid"),
            **fields,
        )

        try:
            model = model_cls.model_validate(dict(params))
        except ValidationError as e:
            return SchemaResult(detail=format_errors(e))

        values: dict[str, Any] = {}
        for fname, name in field_names.items():
            value = getattr(model, fname)
            if isinstance(value, _Unset):
                continue
            if fname in model.model_fields_set or rules[name].has_default:
                values[name] = value
        return SchemaResult(values=values)
