"""ravel exception hierarchy with structured diagnostics.

Parse failures are ordinary values (ParseError) inside the combinator
algebra. Exceptions are reserved for protocol misuse, resource limits, and
the raising convenience entry point Parser.parse_all().

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from ravel.syntax.cursor import ParseError

__all__ = [
    "CursorStateError",
    "DepthLimitExceededError",
    "InputMismatchError",
    "ParseFailure",
    "RavelError",
]


class RavelError(Exception):
    """Base exception for all ravel errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize RavelError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class ParseFailure(RavelError):
    """Raised by Parser.parse_all() when the grammar rejects its input.

    Attributes:
        error: The ParseError value the parser returned
    """

    def __init__(self, error: ParseError) -> None:
        super().__init__(error.to_diagnostic())
        self.error = error


class CursorStateError(RavelError):
    """Cursor protocol violation.

    Raised when a cursor is resolved twice, or resolved while a cursor
    opened after it is still live. Both indicate a bug in a combinator.
    """


class InputMismatchError(RavelError):
    """diff() on materialized views that do not span a valid range.

    The views either come from different sources or are given in reverse
    order.
    """


class DepthLimitExceededError(RavelError):
    """Raised when lazy() parsers nest deeper than the configured limit.

    This indicates either:
    - Left recursion in the grammar
    - Adversarial input designed to cause stack overflow
    """
