"""Structured error system for MCP tools.

Provides typed exceptions with error codes and remediation hints.
Enables agents to understand failures and self-correct.

Every error here is terminal for the call that raised it. Nothing in the
file readers retries, and the cache never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from fastmcp.exceptions import ToolError


class MCPErrorCode(StrEnum):
    """Machine-readable error codes for MCP tool failures."""

    # File errors
    NOT_ACCESSIBLE = "NOT_ACCESSIBLE"
    NOT_A_FILE = "NOT_A_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"

    # Validation errors - agent should fix input
    OUT_OF_RANGE = "OUT_OF_RANGE"
    INVALID_PATTERN = "INVALID_PATTERN"
    INVALID_PARAMS = "INVALID_PARAMS"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class ErrorResponse:
    """Structured error response for MCP tools."""

    code: MCPErrorCode
    message: str
    remediation: str
    path: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code.value,
            "message": self.message,
            "remediation": self.remediation,
            "path": self.path,
            "context": self.context,
        }


class MCPError(ToolError):
    """Base exception for MCP tool errors with structured response.

    Extends FastMCP's ToolError so FastMCP passes it through unchanged
    instead of wrapping it in a generic ToolError.
    """

    def __init__(
        self,
        code: MCPErrorCode,
        message: str,
        remediation: str,
        path: str | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.remediation = remediation
        self.path = path
        self.context = context

    def to_response(self) -> ErrorResponse:
        """Convert to ErrorResponse."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            remediation=self.remediation,
            path=self.path,
            context=self.context,
        )


# =============================================================================
# Specific Error Classes
# =============================================================================


class NotAccessibleError(MCPError):
    """Raised when a path is missing or cannot be read."""

    def __init__(self, path: str) -> None:
        super().__init__(
            code=MCPErrorCode.NOT_ACCESSIBLE,
            message=f"File not accessible: {path}",
            remediation="Check the path exists and is readable. Use an absolute path.",
            path=path,
        )


class NotAFileError(MCPError):
    """Raised when a path is a directory or special file."""

    def __init__(self, path: str) -> None:
        super().__init__(
            code=MCPErrorCode.NOT_A_FILE,
            message=f"Path is not a file: {path}",
            remediation="Pass the path of a regular file, not a directory or device.",
            path=path,
        )


class FileTooLargeError(MCPError):
    """Raised when a file exceeds the configured size limit."""

    def __init__(self, path: str, size_bytes: int, max_size_bytes: int) -> None:
        super().__init__(
            code=MCPErrorCode.FILE_TOO_LARGE,
            message=f"File {path} is {size_bytes} bytes, above the {max_size_bytes} byte limit",
            remediation="Raise chunking.max_file_size_bytes or read a smaller file.",
            path=path,
            size_bytes=size_bytes,
            max_size_bytes=max_size_bytes,
        )


class OutOfRangeError(MCPError):
    """Raised when a line number or chunk index is outside the file."""

    def __init__(self, path: str, what: str, value: int, low: int, high: int) -> None:
        super().__init__(
            code=MCPErrorCode.OUT_OF_RANGE,
            message=f"{what} {value} out of range ({low}-{high})",
            remediation="Call get_file_structure to see total_lines and estimated_chunks first.",
            path=path,
            value=value,
            low=low,
            high=high,
        )


class InvalidPatternError(MCPError):
    """Raised when a regular expression does not compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(
            code=MCPErrorCode.INVALID_PATTERN,
            message=f"Invalid regular expression {pattern!r}: {reason}",
            remediation="Fix the expression, or pass regex=false to match the text literally.",
            pattern=pattern,
            reason=reason,
        )


# =============================================================================
# Error Catalog for Introspection
# =============================================================================


@dataclass
class ErrorDocumentation:
    """Documentation for an error code."""

    code: MCPErrorCode
    category: str  # file, validation, system
    description: str
    causes: list[str]
    remediation: list[str]


ERROR_CATALOG: dict[str, ErrorDocumentation] = {
    MCPErrorCode.NOT_ACCESSIBLE.value: ErrorDocumentation(
        code=MCPErrorCode.NOT_ACCESSIBLE,
        category="file",
        description="The path does not exist or cannot be read.",
        causes=[
            "Typo in file path",
            "File was deleted or moved",
            "Missing read permission",
        ],
        remediation=[
            "Use an absolute path",
            "Check permissions on the file and its parent directories",
        ],
    ),
    MCPErrorCode.NOT_A_FILE.value: ErrorDocumentation(
        code=MCPErrorCode.NOT_A_FILE,
        category="file",
        description="The path exists but is not a regular file.",
        causes=["Path points at a directory, socket or device"],
        remediation=["Pass the path of a file inside the directory"],
    ),
    MCPErrorCode.FILE_TOO_LARGE.value: ErrorDocumentation(
        code=MCPErrorCode.FILE_TOO_LARGE,
        category="file",
        description="The file exceeds the configured maximum size.",
        causes=["File is larger than chunking.max_file_size_bytes"],
        remediation=["Raise the limit in configuration (MAX_FILE_SIZE)"],
    ),
    MCPErrorCode.OUT_OF_RANGE.value: ErrorDocumentation(
        code=MCPErrorCode.OUT_OF_RANGE,
        category="validation",
        description="A line number or chunk index lies outside the file.",
        causes=[
            "Line numbers are 1-indexed; 0 is never valid",
            "Line number exceeds total_lines",
            "Chunk index is >= total_chunks",
        ],
        remediation=[
            "Call get_file_structure for total_lines and estimated_chunks",
            "Chunk indexes are 0-indexed",
        ],
    ),
    MCPErrorCode.INVALID_PATTERN.value: ErrorDocumentation(
        code=MCPErrorCode.INVALID_PATTERN,
        category="validation",
        description="The search pattern is not a valid regular expression.",
        causes=["Unbalanced parentheses or brackets", "Dangling quantifier"],
        remediation=["Fix the expression", "Use regex=false for literal text"],
    ),
    MCPErrorCode.INVALID_PARAMS.value: ErrorDocumentation(
        code=MCPErrorCode.INVALID_PARAMS,
        category="validation",
        description="Tool arguments failed validation.",
        causes=["Unknown argument name", "Value outside allowed bounds", "Wrong type"],
        remediation=["Check validation_errors in the response meta"],
    ),
}


def get_error_documentation(code: str) -> ErrorDocumentation | None:
    """Get documentation for an error code."""
    return ERROR_CATALOG.get(code)
