"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence

from .codes import Diagnostic, DiagnosticCode, SourceSpan

__all__ = ["ErrorTemplate", "describe_token"]


def describe_token(token: object) -> str:
    """Printable form of a token for messages.

    Characters are quoted, bytes are shown in hex, and ``None`` means the
    input ran out.

    Example:
        >>> describe_token("a")
        "'a'"
        >>> describe_token(0x41)
        '0x41'
        >>> describe_token(None)
        'end of input'
    """
    if token is None:
        return "end of input"
    if isinstance(token, int):
        return f"0x{token:02X}"
    return repr(token)


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and documents every error case in one place.
    """

    # =========================================================================
    # PARSE ERRORS (1000-1999)
    # =========================================================================

    @staticmethod
    def unexpected_token(
        found: object, expected: Sequence[str], span: SourceSpan | None = None
    ) -> Diagnostic:
        """Parser met a token it could not accept.

        Args:
            found: The offending token
            expected: Descriptions of acceptable input (may be empty)
            span: Location of the token

        Returns:
            Diagnostic for UNEXPECTED_TOKEN
        """
        msg = f"Unexpected {describe_token(found)}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_TOKEN,
            message=msg,
            span=span,
            expected=tuple(expected),
            found=describe_token(found),
        )

    @staticmethod
    def unexpected_eof(expected: Sequence[str], span: SourceSpan | None = None) -> Diagnostic:
        """Input ended while the parser still needed tokens.

        Args:
            expected: Descriptions of acceptable input (may be empty)
            span: Location of the end of input

        Returns:
            Diagnostic for UNEXPECTED_EOF
        """
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_EOF,
            message="Unexpected end of input",
            span=span,
            hint="Check for truncated input or unclosed constructs",
            expected=tuple(expected),
        )

    @staticmethod
    def expected(
        expected: Sequence[str], found: object, span: SourceSpan | None = None
    ) -> Diagnostic:
        """Labeled parser failed.

        Args:
            expected: Descriptions of acceptable input
            found: Token at the failure point (None at end of input)
            span: Location of the failure

        Returns:
            Diagnostic for EXPECTED
        """
        msg = "Expected " + " or ".join(expected)
        return Diagnostic(
            code=DiagnosticCode.EXPECTED,
            message=msg,
            span=span,
            expected=tuple(expected),
            found=describe_token(found),
        )

    # =========================================================================
    # DECODE ERRORS (2000-2999)
    # =========================================================================

    @staticmethod
    def invalid_utf8(data: bytes) -> Diagnostic:
        """Malformed UTF-8 byte sequence.

        Args:
            data: Bytes consumed by the failed decode attempt

        Returns:
            Diagnostic for INVALID_UTF8
        """
        msg = f"invalid utf8 byte sequence {list(data)}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_UTF8,
            message=msg,
            hint="The lossy decoder substitutes U+FFFD for this sequence",
            found=data.hex(" "),
        )

    # =========================================================================
    # CURSOR AND INPUT ERRORS (3000-3999)
    # =========================================================================

    @staticmethod
    def cursor_already_resolved(state: str) -> Diagnostic:
        """Cursor was restored or committed twice.

        Args:
            state: The state the cursor already resolved to

        Returns:
            Diagnostic for CURSOR_ALREADY_RESOLVED
        """
        msg = f"Cursor already resolved ({state})"
        return Diagnostic(
            code=DiagnosticCode.CURSOR_ALREADY_RESOLVED,
            message=msg,
            hint="A cursor resolves exactly once: restore() or commit(), not both",
        )

    @staticmethod
    def cursor_not_innermost(depth: int, live: int) -> Diagnostic:
        """Cursor resolved while a cursor opened after it was still live.

        Args:
            depth: Nesting depth of the cursor being resolved (1-based)
            live: Number of live cursors on the input

        Returns:
            Diagnostic for CURSOR_NOT_INNERMOST
        """
        msg = f"Cursor at depth {depth} resolved while {live} cursors are live"
        return Diagnostic(
            code=DiagnosticCode.CURSOR_NOT_INNERMOST,
            message=msg,
            hint="Cursors are strictly nested; resolve inner cursors first",
        )

    @staticmethod
    def input_mismatch() -> Diagnostic:
        """diff() called on views of different sources.

        Returns:
            Diagnostic for INPUT_MISMATCH
        """
        return Diagnostic(
            code=DiagnosticCode.INPUT_MISMATCH,
            message="Cannot diff inputs that do not share a source",
            hint="Only views derived from the same MaterializedInput can be diffed",
        )

    @staticmethod
    def span_reversed(start: int, end: int) -> Diagnostic:
        """diff() called with the later view first.

        Args:
            start: Offset of the receiver view
            end: Offset of the argument view

        Returns:
            Diagnostic for SPAN_REVERSED
        """
        msg = f"Cannot diff from offset {start} back to offset {end}"
        return Diagnostic(
            code=DiagnosticCode.SPAN_REVERSED,
            message=msg,
            hint="Call diff() on the earlier view with the later view as argument",
        )

    # =========================================================================
    # LIMIT ERRORS (4000-4999)
    # =========================================================================

    @staticmethod
    def depth_exceeded(max_depth: int) -> Diagnostic:
        """Recursive grammar nested deeper than the configured limit.

        Args:
            max_depth: The configured maximum depth

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        msg = f"Maximum parser nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=msg,
            hint="Check for left recursion or adversarially nested input",
        )
