"""Runtime settings for the WorkOS CLI.

This module provides the Pydantic-validated settings that control the CLI
itself (logging, request timeout, default API endpoint). Connection profiles
live in ``workos_cli.profiles``; these settings never hold credentials.

Direct os.environ/os.getenv usage for any setting defined here is limited to
load_settings_from_env().
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

ENV_VAR_PREFIX = "WORKOS"
DEFAULT_ENDPOINT = "https://api.workos.com"


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CLISettings(BaseModel):
    """Settings shared by every command invocation.

    Environment variables:
        WORKOS_LOG_LEVEL        : DEBUG | INFO | WARNING | ERROR | CRITICAL
        WORKOS_LOG_JSON         : emit JSON log lines (true/false)
        WORKOS_REQUEST_TIMEOUT  : per-request timeout in seconds
        WORKOS_DEFAULT_ENDPOINT : API base URL used when a profile has no endpoint
    """

    log_level: LogLevel = Field(
        default=LogLevel.WARNING,
        description="Logging level for diagnostics written to stderr",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Deadline in seconds applied to each API request",
    )
    default_endpoint: str = Field(
        default=DEFAULT_ENDPOINT,
        description="API base URL used when the active profile sets no endpoint",
    )

    @field_validator("default_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate endpoint URL scheme."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Endpoint must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def load_settings_from_env() -> CLISettings:
    """Load CLI settings from environment variables.

    Returns:
        CLISettings instance with values from environment or defaults.
    """
    import os

    return CLISettings(
        log_level=os.getenv(f"{ENV_VAR_PREFIX}_LOG_LEVEL", "WARNING"),
        log_json=os.getenv(f"{ENV_VAR_PREFIX}_LOG_JSON", "false").lower() in ("true", "1", "yes"),
        request_timeout=float(os.getenv(f"{ENV_VAR_PREFIX}_REQUEST_TIMEOUT", "30")),
        default_endpoint=os.getenv(f"{ENV_VAR_PREFIX}_DEFAULT_ENDPOINT", DEFAULT_ENDPOINT),
    )


__all__ = [
    "CLISettings",
    "LogLevel",
    "ENV_VAR_PREFIX",
    "DEFAULT_ENDPOINT",
    "load_settings_from_env",
]
