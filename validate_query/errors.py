"""Query validation error classes.

Configuration and rule-set errors fail fast with nothing stored.
Validation failures abort the current request so the host can re-dispatch.
"""

from __future__ import annotations

from collections.abc import Iterable


class ValidateQueryError(Exception):
    """Base exception for query validation errors."""

    pass


class InvalidConfiguration(ValidateQueryError):
    """Raised when unrecognized or malformed options are passed to validate_query_config."""

    def __init__(self, message: str, keys: Iterable[str] = ()):
        self.keys = tuple(keys)
        super().__init__(message)


class MissingLoggingCapability(InvalidConfiguration):
    """Raised when a log level is configured but the handler has no log sink."""

    pass


class InvalidRuleSet(ValidateQueryError):
    """Raised when a rule descriptor cannot be understood."""

    pass


class UnknownErrorTarget(ValidateQueryError):
    """Raised when the active error target has no registered responder."""

    pass


class ValidationFailure(ValidateQueryError):
    """
    Raised to abort request handling after a failed validation.

    The handler's active error target has already been set when this is
    raised; the dispatch layer reads it and renders that target instead.

    Attributes:
        detail: Failure detail reported by the schema validator
        target: Error target that should render the response
    """

    def __init__(self, message: str, detail: str, target: str):
        self.detail = detail
        self.target = target
        super().__init__(message)
