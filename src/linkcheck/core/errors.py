"""linkcheck error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Class format
- 4xxx: Input
- 9xxx: Internal

Only fatal conditions are raised. Unresolved references found during the
resolution pass are collected into the report instead.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004

    # Class format (3xxx)
    CLASS_FORMAT_ERROR = 3001

    # Input (4xxx)
    INPUT_UNRECOGNIZED = 4001
    INPUT_NOT_FOUND = 4002
    INPUT_BAD_ARCHIVE = 4003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class LinkCheckError(Exception):
    """Base error with structured context for reports."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CLASS_FORMAT_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(LinkCheckError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ClassFormatError(LinkCheckError):
    """Structurally invalid class file bytes. Always fatal."""

    @classmethod
    def malformed(cls, origin: str, reason: str, offset: int | None = None) -> "ClassFormatError":
        details: dict[str, Any] = {"origin": origin, "reason": reason}
        if offset is not None:
            details["offset"] = offset
        return cls(
            code=ErrorCode.CLASS_FORMAT_ERROR,
            message=f"Malformed class file {origin}: {reason}",
            details=details,
        )


class InputError(LinkCheckError):
    """Problems with --check / --lib arguments and classpath entries."""

    @classmethod
    def unrecognized_path(cls, path: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_UNRECOGNIZED,
            message=f"Given unintelligible argument: {path}",
            details={"path": path},
        )

    @classmethod
    def not_found(cls, path: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_NOT_FOUND,
            message=f"Input does not exist: {path}",
            details={"path": path},
        )

    @classmethod
    def bad_archive(cls, path: str, reason: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_BAD_ARCHIVE,
            message=f"Cannot read archive {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(LinkCheckError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
