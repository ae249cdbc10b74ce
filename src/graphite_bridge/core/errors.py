"""
Unified error handling for graphite-bridge.

Every failure raised by the translation core or the configuration layer is a
GraphiteBridgeError subclass carrying an exit code, so CLI commands can map
them consistently.

Exit Codes:
- 0: Success
- 10: Configuration error
- 12: Validation error (bad input metric)
- 13: Template error (rule template failed to compile or render)
- 14: Format error (path could not be parsed back into labels)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    VALIDATION_ERROR = 12
    TEMPLATE_ERROR = 13
    FORMAT_ERROR = 14
    UNKNOWN_ERROR = 127


class GraphiteBridgeError(Exception):
    """Base exception for graphite-bridge errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(GraphiteBridgeError):
    """Raised when the rules file or settings are invalid."""

    exit_code = ExitCode.CONFIG_ERROR


class ValidationError(GraphiteBridgeError):
    """Raised when an input metric cannot be translated at all."""

    exit_code = ExitCode.VALIDATION_ERROR


class TemplateError(GraphiteBridgeError):
    """Raised when a rule template has a syntax error or references an undefined field."""

    exit_code = ExitCode.TEMPLATE_ERROR


class FormatError(GraphiteBridgeError):
    """Raised when a stored path cannot be decoded back into labels."""

    exit_code = ExitCode.FORMAT_ERROR


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Usage:
        @main_with_error_handling()
        def translate_command(args) -> int:
            ...
            return 0

    Exit codes:
        - GraphiteBridgeError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except GraphiteBridgeError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=e.exit_code,
                        **e.details,
                    )
                print(f"Error: {format_error_message(e)}", file=sys.stderr)
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130  # Standard exit code for SIGINT
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=ExitCode.UNKNOWN_ERROR,
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: GraphiteBridgeError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
