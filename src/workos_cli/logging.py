"""Logging utilities for the WorkOS CLI.

This module provides:
- Logging configuration from CLISettings
- Safe preview utilities for request/response bodies
- Secret redaction (API keys, bearer tokens)
- Plain text or JSON line formatting on stderr
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import Any, Optional

from .config import CLISettings, LogLevel


# Patterns for detecting secrets (common patterns to redact)
SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|token|api[_-]?key|auth[_-]?token)\s*[:=]\s*["\']?([^"\'\s,}]+)',
    r'(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=_\-.]+)',
    r'\bsk_[a-zA-Z0-9_]{8,}',
    r'(?i)(?:x-api-key|x-auth-token|warrant-token)\s*[:=]\s*["\']?([^"\'\s]+)',
]


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded preview of a value for logging.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A single-line, truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Redact secret patterns from text.

    Args:
        text: The text to redact
        replacement: String to replace secrets with (default: "[REDACTED]")

    Returns:
        Text with secrets redacted
    """
    if not isinstance(text, str):
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE | re.DOTALL)

    return result


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Preview plus optional redaction; use for anything that may hold a credential."""
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_secrets(preview)
    return preview


_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info", "taskName",
}


class CLIFormatter(logging.Formatter):
    """Formatter with secret redaction and optional JSON output.

    Extra fields passed through ``extra=`` are appended (JSON) or rendered as
    ``key=value`` pairs (plain text), each passed through safe_log_value().
    """

    def __init__(
        self,
        json_format: bool = False,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extras = {
            key: safe_log_value(value, redact=self.redact_secrets)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        }

        if self.redact_secrets:
            log_data["message"] = redact_secrets(log_data["message"])

        if self.json_format:
            log_data.update(extras)
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            log_data["level"],
            f"{log_data['logger']}:",
            log_data["message"],
        ]
        parts.extend(f"{key}={value}" for key, value in extras.items())
        text = " ".join(parts)
        if "exception" in log_data:
            text = f"{text}\n{log_data['exception']}"
        return text


def setup_logging(
    settings: Optional[CLISettings] = None,
    verbose: bool = False,
    redact_secrets: bool = True,
) -> None:
    """Configure logging for a CLI invocation.

    Sets the root logger level from CLISettings (DEBUG when verbose) and
    installs a single stderr handler with CLIFormatter.

    Args:
        settings: CLISettings instance (if None, loads from environment)
        verbose: Force DEBUG regardless of the configured level
        redact_secrets: Whether to redact secrets (default: True)
    """
    if settings is None:
        from .config import load_settings_from_env

        settings = load_settings_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = logging.DEBUG if verbose else level_map.get(settings.log_level, logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        CLIFormatter(
            json_format=settings.log_json,
            redact_secrets=redact_secrets,
        )
    )
    root_logger.addHandler(handler)

    # httpx logs every request at INFO; keep it quiet unless debugging
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


__all__ = [
    "safe_preview",
    "redact_secrets",
    "safe_log_value",
    "CLIFormatter",
    "setup_logging",
]
