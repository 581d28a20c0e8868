"""Positions in a token sequence.

Position is advanced one committed token at a time by the inputs; the
helper functions render a position against the original source text for
error reporting.

Line Ending Support:
    ``"\\n"`` (or byte 10 for byte sources) is the line delimiter. CRLF
    works because the LF is still present; CR-only line endings count as
    ordinary tokens.
"""

from __future__ import annotations

from dataclasses import dataclass

from ravel.diagnostics import SourceSpan

__all__ = [
    "Position",
    "format_position",
    "get_error_context",
    "get_line_content",
    "is_newline",
    "token_width",
]

_NEWLINE_BYTE = 0x0A


def is_newline(token: object) -> bool:
    """True for ``"\\n"`` and for byte 10."""
    return token == "\n" or (isinstance(token, int) and token == _NEWLINE_BYTE)


def token_width(token: object) -> int:
    """UTF-8 length of a character token; 1 for bytes and other tokens."""
    if isinstance(token, str):
        return len(token.encode("utf-8", "surrogatepass"))
    return 1


@dataclass(frozen=True, slots=True)
class Position:
    """Offset, line and column of the next unconsumed token.

    ``offset`` indexes tokens and is what inputs slice and errors merge
    on. ``byte_offset`` locates the same point in the encoded source: a
    character token counts its UTF-8 length, a byte or other token counts
    one, and a stream counts the bytes its decoder actually consumed.

    Attributes:
        offset: Tokens consumed since the start of the source (0-indexed)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        byte_offset: Source bytes consumed since the start (0-indexed)

    Example:
        >>> pos = Position()
        >>> pos.advance("é").advance("\\n")
        Position(offset=2, line=2, column=1, byte_offset=3)
    """

    offset: int = 0
    line: int = 1
    column: int = 1
    byte_offset: int = 0

    def advance(self, token: object, width: int | None = None) -> Position:
        """Position after consuming ``token``.

        Args:
            token: The consumed token
            width: Source bytes behind the token (default: token_width(token))
        """
        byte_offset = self.byte_offset + (token_width(token) if width is None else width)
        if is_newline(token):
            return Position(self.offset + 1, self.line + 1, 1, byte_offset)
        return Position(self.offset + 1, self.line, self.column + 1, byte_offset)

    def to_span(self, end: int | None = None) -> SourceSpan:
        """SourceSpan starting here and ending at ``end`` (default: here)."""
        return SourceSpan(
            start=self.offset,
            end=self.offset if end is None else end,
            line=self.line,
            column=self.column,
        )

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


def format_position(position: Position, zero_based: bool = False) -> str:
    """Format position as human-readable line:column string.

    Example:
        >>> format_position(Position(6, 2, 1))
        '2:1'
        >>> format_position(Position(6, 2, 1), zero_based=True)
        '1:0'
    """
    if zero_based:
        return f"{position.line - 1}:{position.column - 1}"
    return f"{position.line}:{position.column}"


def get_line_content(source: str, line_number: int) -> str:
    """Extract the content of a 1-indexed line (without trailing newline).

    Raises:
        ValueError: If the line does not exist

    Example:
        >>> get_line_content("hello\\nworld", 2)
        'world'
    """
    if line_number < 1:
        msg = f"Line number must be >= 1, got {line_number}"
        raise ValueError(msg)

    lines = source.split("\n")
    if line_number > len(lines):
        msg = f"Line {line_number} out of range (source has {len(lines)} lines)"
        raise ValueError(msg)

    return lines[line_number - 1].removesuffix("\r")


def get_error_context(
    source: str, position: Position, context_lines: int = 2, marker: str = "^"
) -> str:
    """Formatted error context showing position in source.

    Shows the error line with up to ``context_lines`` lines around it and
    a marker line under the failing column.

    Example:
        >>> source = "line1\\nline2\\nerror here\\nline4"
        >>> print(get_error_context(source, Position(12, 3, 1), context_lines=1))
           2 | line2
           3 | error here
             | ^
           4 | line4
    """
    lines = [line.removesuffix("\r") for line in source.split("\n")]
    line = min(max(position.line, 1), len(lines))

    start_line = max(1, line - context_lines)
    end_line = min(len(lines), line + context_lines)

    context = []
    for i in range(start_line, end_line + 1):
        prefix = f"{i:4} | "
        context.append(prefix + lines[i - 1])
        if i == line:
            context.append(" " * (len(prefix) - 2) + "| " + " " * (position.column - 1) + marker)

    return "\n".join(context)
