"""Unified exception hierarchy for the WorkOS CLI.

All errors raised by the CLI inherit from WorkOSCLIError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for mapping codes back to exception types
- Exit-code mapping and the command error handler decorator

Usage in commands:
    from workos_cli.exceptions import MalformedTupleError, cli_error_handler

    @cli_error_handler
    def check(...):
        ...
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "WorkOSCLIError",
    "InvalidArgumentError",
    "MalformedTupleError",
    "InvalidContextError",
    "InvalidMetaError",
    "ConfigurationError",
    "ConfigurationMissingError",
    "ProfileNotFoundError",
    "RemoteRequestError",
    "RemoteTimeoutError",
    "AssertionMismatchError",
    "SchemaWarningsError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
    # CLI helpers
    "ExitCode",
    "get_exit_code",
    "cli_error_handler",
]

logger = logging.getLogger(__name__)


# ---- Exception Hierarchy ----------------------------------------------------


class WorkOSCLIError(Exception):
    """Base exception for the CLI.

    Attributes:
        code: Stable error code string (e.g. "MALFORMED_TUPLE").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
        report: Whether the error handler prints the message. Errors whose
            outcome was already printed by the command set this to False.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"
    report: bool = True

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class InvalidArgumentError(WorkOSCLIError):
    """A command argument could not be interpreted."""

    code: str = "INVALID_ARGUMENT"


class MalformedTupleError(InvalidArgumentError):
    """Subject or resource token is not of the form type:id."""

    code: str = "MALFORMED_TUPLE"


class InvalidContextError(InvalidArgumentError):
    """Check/query context is not a JSON object."""

    code: str = "INVALID_CONTEXT"


class InvalidMetaError(InvalidArgumentError):
    """Resource meta is not a JSON object."""

    code: str = "INVALID_META"


class ConfigurationError(WorkOSCLIError):
    """Invalid or unreadable configuration file."""

    code: str = "CONFIGURATION_ERROR"


class ConfigurationMissingError(ConfigurationError):
    """No usable active environment is configured."""

    code: str = "CONFIGURATION_MISSING"


class ProfileNotFoundError(ConfigurationError):
    """A named environment does not exist in the configuration."""

    code: str = "PROFILE_NOT_FOUND"


class RemoteRequestError(WorkOSCLIError):
    """The WorkOS API returned an error or could not be reached.

    Attributes:
        operation: What the CLI was doing (e.g. "creating warrant").
        status_code: HTTP status, if a response was received.
        errors: Individual validation messages returned by the API.
    """

    code: str = "REMOTE_REQUEST_FAILED"

    def __init__(
        self,
        message: str | None = None,
        *,
        operation: str = "",
        status_code: int | None = None,
        errors: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        self.operation = operation
        self.status_code = status_code
        self.errors = list(errors or [])
        super().__init__(message, **kwargs)

    def with_operation(self, operation: str) -> "RemoteRequestError":
        self.operation = operation
        return self

    def __str__(self) -> str:
        text = self.message
        if self.operation:
            text = f"error {self.operation}: {text}"
        if self.errors:
            text = text + "\n\t" + "\n\t".join(self.errors)
        return text


class RemoteTimeoutError(RemoteRequestError):
    """The request deadline expired before the API answered."""

    code: str = "REMOTE_TIMEOUT"


class AssertionMismatchError(WorkOSCLIError):
    """A check result did not match the --assert expectation."""

    code: str = "ASSERTION_MISMATCH"
    report: bool = False


class SchemaWarningsError(WorkOSCLIError):
    """Schema conversion produced warnings while --strict was set."""

    code: str = "SCHEMA_WARNINGS"


# ---- Exit Codes -------------------------------------------------------------


class ExitCode:
    """Process exit statuses."""

    OK = 0
    FAILURE = 1
    USAGE = 2
    CONFIG = 78


# ---- Error Registry ---------------------------------------------------------

_E = TypeVar("_E", bound=type[WorkOSCLIError])


class ErrorRegistry:
    """Registry mapping error codes to exception types and exit statuses.

    An error whose own code has no exit status resolves through the codes of
    its base classes, so a registered subclass of InvalidArgumentError exits
    like InvalidArgumentError unless it says otherwise.
    """

    def __init__(self) -> None:
        self._errors: dict[str, type[WorkOSCLIError]] = {}
        self._exit_codes: dict[str, int] = {}

    def register(self, code: str, error_cls: type[WorkOSCLIError], exit_code: int | None = None) -> None:
        self._errors[code] = error_cls
        if exit_code is not None:
            self._exit_codes[code] = exit_code

    def get(self, code: str) -> type[WorkOSCLIError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[WorkOSCLIError]]:
        return dict(self._errors)

    def exit_code(self, error: WorkOSCLIError) -> int:
        if error.code in self._exit_codes:
            return self._exit_codes[error.code]
        for cls in type(error).__mro__:
            code = getattr(cls, "code", None)
            if isinstance(code, str) and code in self._exit_codes:
                return self._exit_codes[code]
        return ExitCode.FAILURE


error_registry = ErrorRegistry()


def register_error(code: str, exit_code: int | None = None) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("MY_CUSTOM_ERROR", exit_code=ExitCode.USAGE)
        class MyCustomError(WorkOSCLIError):
            code = "MY_CUSTOM_ERROR"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls, exit_code)
        return cls

    return cast(Callable[[_E], _E], decorator)


for _cls, _exit_code in (
    (WorkOSCLIError, ExitCode.FAILURE),
    (InvalidArgumentError, ExitCode.USAGE),
    (MalformedTupleError, ExitCode.USAGE),
    (InvalidContextError, ExitCode.USAGE),
    (InvalidMetaError, ExitCode.USAGE),
    (ConfigurationError, ExitCode.CONFIG),
    (ConfigurationMissingError, ExitCode.CONFIG),
    (ProfileNotFoundError, ExitCode.FAILURE),
    (RemoteRequestError, ExitCode.FAILURE),
    (RemoteTimeoutError, ExitCode.FAILURE),
    (AssertionMismatchError, ExitCode.FAILURE),
    (SchemaWarningsError, ExitCode.FAILURE),
):
    error_registry.register(_cls.code, _cls, _exit_code)


def get_exit_code(error: WorkOSCLIError) -> int:
    """Map a WorkOSCLIError to a process exit status through the registry."""
    return error_registry.exit_code(error)


def cli_error_handler(command: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator for CLI commands with consistent error reporting.

    Catches WorkOSCLIError, prints it to stderr and exits with the mapped
    status. Unexpected exceptions are logged with their traceback and exit 1.

    Usage:
        @fga_app.command("check")
        @cli_error_handler
        def check(...):
            ...
    """

    @functools.wraps(command)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from . import printer

        try:
            return command(*args, **kwargs)
        except WorkOSCLIError as e:
            logger.debug(
                "%s failed: [%s] %s",
                command.__name__,
                e.code,
                e.message,
                extra={"error_code": e.code, "error_details": e.details},
            )
            if e.report:
                printer.print_err(str(e))
            raise SystemExit(get_exit_code(e))
        except (SystemExit, KeyboardInterrupt):
            raise
        except Exception as e:
            logger.exception("%s unexpected error: %s", command.__name__, e)
            printer.print_err(f"Unexpected {type(e).__name__}: {e}")
            raise SystemExit(ExitCode.FAILURE)

    return wrapper
