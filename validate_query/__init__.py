"""
Declarative query parameter validation for FastAPI request handlers.

Re-exports the public API for convenient importing.
"""

from __future__ import annotations

from .config import ValidateQueryConfig, build_config
from .dispatch import (
    ErrorTargetRegistry,
    get_form_query_handler,
    get_query_handler,
    handle_validation_failure,
    install_query_validation,
    validated_query,
)
from .errors import (
    InvalidConfiguration,
    InvalidRuleSet,
    MissingLoggingCapability,
    UnknownErrorTarget,
    ValidateQueryError,
    ValidationFailure,
)
from .handler import QueryHandler
from .log_sink import LogLevel, LogSink
from .params import ParameterStore
from .rules import ParamType, Rule
from .schema import PydanticSchemaValidator, SchemaResult, SchemaValidator
from .settings import DEFAULT_ERROR_TARGET, Settings, get_settings
from .validator import (
    QueryValidator,
    ValidationFailed,
    ValidationOutcome,
    ValidationPassed,
    ValidationSkipped,
)

__version__ = "0.99.4"

__all__ = [
    # Handler and dispatch
    "QueryHandler",
    "ErrorTargetRegistry",
    "install_query_validation",
    "handle_validation_failure",
    "get_query_handler",
    "get_form_query_handler",
    "validated_query",
    # Configuration
    "ValidateQueryConfig",
    "build_config",
    "Settings",
    "get_settings",
    "DEFAULT_ERROR_TARGET",
    # Rules and validation
    "ParamType",
    "Rule",
    "ParameterStore",
    "QueryValidator",
    "ValidationOutcome",
    "ValidationSkipped",
    "ValidationPassed",
    "ValidationFailed",
    "SchemaValidator",
    "SchemaResult",
    "PydanticSchemaValidator",
    # Logging
    "LogLevel",
    "LogSink",
    # Errors
    "ValidateQueryError",
    "InvalidConfiguration",
    "MissingLoggingCapability",
    "InvalidRuleSet",
    "UnknownErrorTarget",
    "ValidationFailure",
]
