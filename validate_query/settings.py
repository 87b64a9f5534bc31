"""
Application-level defaults for query validation using pydantic-settings.

Values come from VALIDATE_QUERY_* environment variables or a .env file and
seed the configuration of every handler created by the dispatch layer.
Per-handler calls to validate_query_config still replace them.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .log_sink import LogLevel

DEFAULT_ERROR_TARGET = "validate_query_error_mode"


class Settings(BaseSettings):
    """
    Query validation settings loaded from environment variables.

    All settings have defaults suitable for development; the built-in error
    responder is used and failures are not logged unless a level is set.
    """

    model_config = SettingsConfigDict(
        env_prefix="VALIDATE_QUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    error_target: str = Field(
        default=DEFAULT_ERROR_TARGET,
        description="Name of the error target rendered when validation fails",
    )
    log_level: LogLevel | None = Field(
        default=None,
        description="Severity used to log validation failures (unset disables logging)",
    )
    error_status_code: int = Field(
        default=400,
        description="HTTP status returned by the built-in error responder",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v: str | LogLevel | None) -> LogLevel | None:
        """Accept syslog-style aliases such as NOTICE or CRIT; blank means unset."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return LogLevel.parse(v)

    @field_validator("error_status_code", mode="after")
    @classmethod
    def validate_status_code(cls, v: int) -> int:
        """Error responses must use a 4xx or 5xx status."""
        if not 400 <= v <= 599:
            raise ValueError(f"Invalid VALIDATE_QUERY_ERROR_STATUS_CODE: {v}. Must be 4xx or 5xx")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the application.
    """
    return Settings()
