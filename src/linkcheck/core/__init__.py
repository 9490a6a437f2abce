"""Core module exports."""

from linkcheck.core.errors import (
    ClassFormatError,
    ConfigError,
    ErrorCode,
    InputError,
    InternalError,
    LinkCheckError,
)
from linkcheck.core.logging import configure_logging, get_logger
from linkcheck.core.progress import progress, status

__all__ = [
    # Errors
    "ClassFormatError",
    "ConfigError",
    "ErrorCode",
    "InputError",
    "InternalError",
    "LinkCheckError",
    # Logging
    "configure_logging",
    "get_logger",
    # Progress
    "progress",
    "status",
]
