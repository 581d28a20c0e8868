"""Tests for diagnostics: codes, templates, formatter, and exceptions.

Python 3.13+.
"""

from __future__ import annotations

import json

import pytest

from ravel.diagnostics import (
    CursorStateError,
    Diagnostic,
    DiagnosticCode,
    DiagnosticFormatter,
    ErrorTemplate,
    OutputFormat,
    RavelError,
    SourceSpan,
    describe_token,
)
from ravel.syntax import ParseError, Position

# ============================================================================
# SourceSpan and Diagnostic
# ============================================================================


class TestSourceSpan:
    """Test SourceSpan validation."""

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"start": -1, "end": 0, "line": 1, "column": 1}, "start must be >= 0"),
            ({"start": 3, "end": 2, "line": 1, "column": 1}, "must be >= start"),
            ({"start": 0, "end": 0, "line": 0, "column": 1}, "line must be >= 1"),
            ({"start": 0, "end": 0, "line": 1, "column": 0}, "column must be >= 1"),
        ],
    )
    def test_invalid_spans_rejected(self, kwargs: dict[str, int], message: str) -> None:
        """Negative offsets, reversed spans, and 0-based lines are rejected."""
        with pytest.raises(ValueError, match=message):
            SourceSpan(**kwargs)

    def test_diagnostic_str_is_message(self) -> None:
        """str(Diagnostic) is the bare message."""
        assert str(ErrorTemplate.input_mismatch()) == (
            "Cannot diff inputs that do not share a source"
        )


class TestDescribeToken:
    """Test printable token forms."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [("a", "'a'"), ("\n", "'\\n'"), (0x41, "0x41"), (7, "0x07"), (None, "end of input")],
    )
    def test_describe(self, token: object, expected: str) -> None:
        """Characters are quoted, bytes hex, None is end of input."""
        assert describe_token(token) == expected


# ============================================================================
# Formatter
# ============================================================================


def _unexpected() -> Diagnostic:
    return ParseError.unexpected(Position(3, 1, 4), "x", ("digit", "'.'")).to_diagnostic()


class TestDiagnosticFormatter:
    """Test the three output formats."""

    def test_rust_format(self) -> None:
        """Compiler-style output with location, expectations, and found token."""
        assert DiagnosticFormatter().format(_unexpected()).splitlines() == [
            "error[UNEXPECTED_TOKEN]: Unexpected 'x'",
            "  --> line 1, column 4",
            "  = expected: digit, '.'",
            "  = found: 'x'",
        ]

    def test_rust_format_with_hint(self) -> None:
        """Hints are rendered as help lines."""
        text = DiagnosticFormatter().format(ErrorTemplate.depth_exceeded(5))

        assert text.splitlines()[-1].startswith("  = help: Check for left recursion")

    def test_simple_format(self) -> None:
        """Single-line format includes the location."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)

        assert formatter.format(_unexpected()) == "UNEXPECTED_TOKEN at 1:4: Unexpected 'x'"
        assert formatter.format(ErrorTemplate.input_mismatch()) == (
            "INPUT_MISMATCH: Cannot diff inputs that do not share a source"
        )

    def test_json_format(self) -> None:
        """JSON output carries every structured field."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.JSON)
        data = json.loads(formatter.format(_unexpected()))

        assert data == {
            "code": "UNEXPECTED_TOKEN",
            "code_value": 1001,
            "message": "Unexpected 'x'",
            "severity": "error",
            "line": 1,
            "column": 4,
            "start": 3,
            "end": 3,
            "expected": ["digit", "'.'"],
            "found": "'x'",
        }

    def test_control_characters_escaped(self) -> None:
        """Control characters in messages cannot forge extra lines."""
        diagnostic = Diagnostic(code=DiagnosticCode.EXPECTED, message="a\nb\x1b")

        assert DiagnosticFormatter().format(diagnostic) == "error[EXPECTED]: a\\x0ab\\x1b"

    def test_sanitize_truncates(self) -> None:
        """sanitize=True truncates long content."""
        formatter = DiagnosticFormatter(
            output_format=OutputFormat.SIMPLE, sanitize=True, max_content_length=5
        )
        diagnostic = Diagnostic(code=DiagnosticCode.EXPECTED, message="abcdefgh")

        assert formatter.format(diagnostic) == "EXPECTED: abcde..."

    def test_color(self) -> None:
        """color=True wraps the severity in ANSI codes."""
        text = DiagnosticFormatter(color=True).format(ErrorTemplate.input_mismatch())

        assert text.startswith("\033[1;31merror\033[0m[INPUT_MISMATCH]")

    def test_format_all(self) -> None:
        """Multiple diagnostics are separated by blank lines."""
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        text = formatter.format_all([_unexpected(), ErrorTemplate.input_mismatch()])

        assert text.count("\n\n") == 1


# ============================================================================
# Exceptions
# ============================================================================


class TestExceptions:
    """Test the exception hierarchy."""

    def test_plain_message(self) -> None:
        """RavelError accepts a plain string."""
        err = RavelError("plain")

        assert str(err) == "plain"
        assert err.diagnostic is None

    def test_diagnostic_message(self) -> None:
        """A Diagnostic is formatted into the exception text."""
        err = CursorStateError(ErrorTemplate.cursor_not_innermost(1, 2))

        assert isinstance(err, RavelError)
        assert err.diagnostic is not None
        assert str(err).startswith(
            "error[CURSOR_NOT_INNERMOST]: Cursor at depth 1 resolved while 2 cursors are live"
        )
