"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Parse errors (combinator failures)
        2000-2999: Decode errors (malformed UTF-8 input)
        3000-3999: Cursor and input protocol errors
        4000-4999: Limit errors (recursion depth)
    """

    # Parse errors (1000-1999)
    UNEXPECTED_TOKEN = 1001
    UNEXPECTED_EOF = 1002
    EXPECTED = 1003

    # Decode errors (2000-2999)
    INVALID_UTF8 = 2001

    # Cursor and input protocol errors (3000-3999)
    CURSOR_ALREADY_RESOLVED = 3001
    CURSOR_NOT_INNERMOST = 3002
    INPUT_MISMATCH = 3003
    SPAN_REVERSED = 3004

    # Limit errors (4000-4999)
    MAX_DEPTH_EXCEEDED = 4001


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source location for error reporting.

    Note:
        Offsets count tokens, not bytes. For text inputs a token is one
        Unicode code point, so a multi-byte UTF-8 character advances the
        offset by one.

    Attributes:
        start: Starting token offset (0-indexed)
        end: Ending token offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If start is negative, end precedes start, or line or
                column is less than 1.
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Source location (None when not tied to input)
        hint: Suggestion for fixing the error
        expected: Descriptions of what would have been accepted
        found: Printable form of the offending token, if any
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    expected: tuple[str, ...] = ()
    found: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like a compiler error.

        Delegates to DiagnosticFormatter for consistent output with
        control-character escaping.

        Example output:
            error[UNEXPECTED_TOKEN]: Unexpected 'x'
              --> line 1, column 4
              = expected: digit, '('

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
