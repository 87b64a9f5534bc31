"""
Per-request query handler.

QueryHandler is the request-handling object the validation calls hang off.
It owns the request's parameter store, an optional log sink, its
configuration and the active error target read by the dispatch layer.

Usage:
    handler.validate_query_config(error_target="bad_pet", log_level="notice")

    handler.validate_query(
        pet_id=ParamType.SCALAR,
        direction={"type": "scalar", "default": "up"},
    )
    # only reached when validation passed
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .config import ValidateQueryConfig, build_config
from .errors import ValidationFailure
from .log_sink import LogSink, can_log, emit
from .params import ParameterStore
from .schema import SchemaValidator
from .validator import QueryValidator, ValidationFailed

logger = logging.getLogger(__name__)


class QueryHandler:
    """
    Request-handling object with declarative query validation.

    Attributes:
        params: Live parameter store for this request
        logger: Log sink for validation failures, or None if the handler cannot log
        config: Current validation configuration
        error_target: Active error target; set when validation fails
    """

    def __init__(
        self,
        params: ParameterStore | None = None,
        logger: LogSink | None = None,
        config: ValidateQueryConfig | None = None,
        schema_validator: SchemaValidator | None = None,
    ):
        self.params = params if params is not None else ParameterStore()
        self.logger = logger
        self.config = config or ValidateQueryConfig()
        self.error_target: str | None = None
        self._schema_validator = schema_validator

    @property
    def can_log(self) -> bool:
        return can_log(self.logger)

    def validate_query_config(self, options: Mapping[str, Any] | None = None, **kwargs: Any) -> ValidateQueryConfig:
        """
        Replace this handler's validation configuration.

        Args:
            options: Mapping of options (error_target, log_level)
            **kwargs: Options given as keyword arguments

        Returns:
            The new configuration

        Raises:
            InvalidConfiguration: Unknown options; nothing is stored
            MissingLoggingCapability: log_level given without a log sink; nothing is stored
        """
        merged = {**(options or {}), **kwargs}
        self.config = build_config(merged, can_log=self.can_log)
        logger.debug(f"Query validation configured: {self.config!r}")
        return self.config

    def validate_query(self, rules: Mapping[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:
        """
        Validate this request's parameters.

        On failure the message is logged at the effective log level (if any),
        the configured error target becomes active and ValidationFailure is
        raised. Code after this call only runs when validation passed.

        Args:
            rules: Rule set mapping, may include log_level / ignore_rest
            **kwargs: Rules given as keyword arguments

        Returns:
            Values written back to the parameter store

        Raises:
            ValidationFailure: If the parameters were rejected
        """
        rule_set = {**(rules or {}), **kwargs}
        validator = QueryValidator(self.params, self.config, self._schema_validator)
        outcome = validator.check(rule_set)

        if isinstance(outcome, ValidationFailed):
            if outcome.log_level is not None:
                if self.logger is not None:
                    emit(self.logger, outcome.log_level, outcome.message)
                else:
                    logger.warning(f"log_level={outcome.log_level.value} given but handler has no log sink")
            self.error_target = outcome.target
            raise ValidationFailure(outcome.message, detail=outcome.detail, target=outcome.target)

        return outcome.values
