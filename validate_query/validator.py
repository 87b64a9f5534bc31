"""
Query validation core.

QueryValidator merges the live request parameters with a caller-supplied
rule set, delegates checking to a SchemaValidator and writes validated
values back. It never raises for a failed validation; it returns a tagged
outcome and leaves redirecting to the caller.

Usage:
    validator = QueryValidator(params, config)
    outcome = validator.check({"pet_id": ParamType.SCALAR})
    if isinstance(outcome, ValidationFailed):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .config import ValidateQueryConfig
from .log_sink import LogLevel
from .params import ParameterStore
from .rules import PERMISSIVE_RULE, parse_rule_set
from .schema import PydanticSchemaValidator, SchemaValidator

logger = logging.getLogger(__name__)

FAILURE_PREFIX = "Query Validation Failed"


@dataclass(frozen=True)
class ValidationSkipped:
    """Empty rule set: nothing was validated."""

    values: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationPassed:
    """Parameters passed; values holds what was written back."""

    values: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationFailed:
    """
    Parameters were rejected.

    Attributes:
        detail: Failure detail from the schema validator
        message: Diagnostic message for logs
        target: Error target that should render the response
        log_level: Effective log level for this call, if any
    """

    detail: str
    message: str
    target: str
    log_level: LogLevel | None = None


ValidationOutcome = ValidationSkipped | ValidationPassed | ValidationFailed


class QueryValidator:
    """Validates one handler's parameter store against rule sets."""

    def __init__(
        self,
        params: ParameterStore,
        config: ValidateQueryConfig | None = None,
        schema_validator: SchemaValidator | None = None,
    ):
        self.params = params
        self.config = config or ValidateQueryConfig()
        self.schema_validator = schema_validator or PydanticSchemaValidator()

    def check(self, rule_set: Mapping[str, Any]) -> ValidationOutcome:
        """
        Validate the parameter store against a rule set.

        Args:
            rule_set: Parameter rules plus optional log_level / ignore_rest control keys

        Returns:
            ValidationSkipped for an empty rule set, ValidationPassed after
            values were written back, or ValidationFailed with the store untouched

        Raises:
            InvalidRuleSet: If a rule descriptor is malformed
        """
        if not rule_set:
            return ValidationSkipped()

        parsed = parse_rule_set(rule_set)
        log_level = parsed.log_level or self.config.log_level

        actual = self.params.get_all()
        rules = dict(parsed.rules)
        if parsed.ignore_rest:
            for name in actual:
                if name not in rules:
                    rules[name] = PERMISSIVE_RULE

        result = self.schema_validator.validate(actual, rules)
        if not result.ok:
            detail = result.detail or "unknown error"
            message = f"{FAILURE_PREFIX}: {detail}"
            logger.debug(message)
            return ValidationFailed(
                detail=detail,
                message=message,
                target=self.config.error_target,
                log_level=log_level,
            )

        written = {name: value for name, value in result.values.items() if name in parsed.rules}
        for name, value in written.items():
            self.params.set(name, value)
        logger.debug(f"Query validated: {sorted(written)}")
        return ValidationPassed(values=written)
