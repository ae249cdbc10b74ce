"""Core utilities shared across graphite-bridge modules."""

from graphite_bridge.core.errors import (
    ConfigurationError,
    ExitCode,
    FormatError,
    GraphiteBridgeError,
    TemplateError,
    ValidationError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "GraphiteBridgeError",
    "ConfigurationError",
    "ValidationError",
    "TemplateError",
    "FormatError",
    "format_error_message",
    "main_with_error_handling",
]
