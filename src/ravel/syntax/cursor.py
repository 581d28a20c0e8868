"""Cursor protocol, parse results, and parse errors.

Implements the speculative-read protocol shared by both input backends
and the value types every parser returns.

Design Philosophy:
    - A parser returns ``ParseResult | ParseError``; failures are values,
      never exceptions
    - Speculation is scoped: ``with source.cursor() as cur:`` either
      restores explicitly or commits on scope exit, exactly once
    - Cursors are strictly nested; resolving out of order is a bug and
      raises CursorStateError
    - Errors carry the Position where they happened, so restoring the
      input afterwards does not lose diagnostics

Cursor State Machine:
    OPEN -> RESTORED   guard.restore(): offset and Position rewound
    OPEN -> COMMITTED  guard.commit() or scope exit without restore()

Pattern Reference:
    - Haskell Parsec (try / <|> / label)
    - Rust nom (recognize, error merging)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from ravel.diagnostics import (
    CursorStateError,
    Diagnostic,
    ErrorTemplate,
    describe_token,
)
from ravel.syntax.position import Position, get_error_context

if TYPE_CHECKING:
    from ravel.syntax.input import Input

__all__ = [
    "Cursor",
    "CursorGuard",
    "CursorState",
    "ErrorKind",
    "Outcome",
    "ParseError",
    "ParseResult",
]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Snapshot of an input taken when a cursor opens.

    Attributes:
        offset: Backend read offset (view offset for materialized input,
            ring buffer offset for streaming input)
        position: Position at acquisition time
    """

    offset: int
    position: Position


class CursorState(StrEnum):
    """Lifecycle of a CursorGuard."""

    OPEN = "open"
    RESTORED = "restored"
    COMMITTED = "committed"


class CursorGuard:
    """Scoped speculative-read handle.

    Returned by ``Input.cursor()``. Use as a context manager so the guard
    resolves on every exit path:

        >>> with source.cursor() as cur:
        ...     result = parser.parse(source)
        ...     if isinstance(result, ParseError):
        ...         cur.restore()

    Leaving the ``with`` block without calling restore() commits, also
    when an exception propagates.
    """

    __slots__ = ("_input", "_snapshot", "_state")

    def __init__(self, source: Input, snapshot: Cursor) -> None:
        self._input = source
        self._snapshot = snapshot
        self._state = CursorState.OPEN

    @property
    def snapshot(self) -> Cursor:
        """Offset and Position captured at acquisition."""
        return self._snapshot

    @property
    def state(self) -> CursorState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_open(self) -> bool:
        """True until restore() or commit() is called."""
        return self._state is CursorState.OPEN

    def restore(self) -> None:
        """Rewind the input to the snapshot and release the cursor.

        Raises:
            CursorStateError: If already resolved or not the innermost cursor
        """
        self._check_open()
        self._input._release(self, restore=True)  # noqa: SLF001 - cursor protocol
        self._state = CursorState.RESTORED

    def commit(self) -> None:
        """Keep everything consumed since the snapshot and release the cursor.

        Raises:
            CursorStateError: If already resolved or not the innermost cursor
        """
        self._check_open()
        self._input._release(self, restore=False)  # noqa: SLF001 - cursor protocol
        self._state = CursorState.COMMITTED

    def _check_open(self) -> None:
        if self._state is not CursorState.OPEN:
            raise CursorStateError(ErrorTemplate.cursor_already_resolved(self._state))

    def __enter__(self) -> CursorGuard:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Commit unless restore() or commit() was already called."""
        if self._state is CursorState.OPEN:
            self.commit()

    def __repr__(self) -> str:
        return f"CursorGuard({self._snapshot.position}, {self._state})"


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Successful parse: the value and the continuation input.

    Both input backends advance in place, so ``input`` is the object the
    parser was called with, now positioned after the consumed tokens.
    Combinators always continue from ``result.input``.

    Example:
        >>> source = MaterializedInput("hello")
        >>> result = token("h").parse(source)
        >>> result.value, result.input.fragment
        ('h', 'ello')
    """

    value: T
    input: Input


class ErrorKind(StrEnum):
    """Failure taxonomy.

    UNEXPECTED: a token (or the end of input, ``found is None``) was not
        accepted by a primitive
    EXPECTED: a labeled parser failed; ``expected`` names what it wanted
    """

    UNEXPECTED = "unexpected"
    EXPECTED = "expected"


@dataclass(frozen=True, slots=True)
class ParseError:
    """Parse failure with location and context.

    Attributes:
        kind: UNEXPECTED or EXPECTED
        position: Where the failure happened
        found: Offending token, or None at end of input
        expected: Descriptions of input that would have been accepted

    Example:
        >>> err = ParseError.unexpected(Position(3, 1, 4), "x", ("digit",))
        >>> err.format_error()
        "1:4: Unexpected 'x', expected digit"
    """

    kind: ErrorKind
    position: Position
    found: object = None
    expected: tuple[str, ...] = ()

    @classmethod
    def unexpected(
        cls, position: Position, found: object, expected: tuple[str, ...] = ()
    ) -> ParseError:
        """Unexpected token (``found=None`` means end of input)."""
        return cls(ErrorKind.UNEXPECTED, position, found, expected)

    @classmethod
    def expecting(
        cls, position: Position, description: str | tuple[str, ...], found: object = None
    ) -> ParseError:
        """Labeled failure: the parser expected ``description``."""
        expected = (description,) if isinstance(description, str) else description
        return cls(ErrorKind.EXPECTED, position, found, expected)

    @property
    def offset(self) -> int:
        """Token offset of the failure."""
        return self.position.offset

    @property
    def at_eof(self) -> bool:
        """True when the failure was caused by running out of input."""
        return self.found is None

    def merge(self, other: ParseError) -> ParseError:
        """Combine two alternative failures into one representative error.

        Rule (furthest progress wins):
            1. The error at the greater offset is returned unchanged.
            2. At equal offsets the errors combine: ``expected`` is the
               ordered union (this error's entries first), ``found`` is
               ``other.found`` when set, else ``self.found``, and the kind
               is EXPECTED if either error is EXPECTED.

        The rule is associative, so folding it over any number of
        alternatives is deterministic.

        Example:
            >>> a = ParseError.unexpected(Position(0), "x", ("'a'",))
            >>> b = ParseError.unexpected(Position(0), "x", ("'b'",))
            >>> a.merge(b).expected
            ("'a'", "'b'")
        """
        if other.position.offset > self.position.offset:
            return other
        if other.position.offset < self.position.offset:
            return self
        expected = tuple(dict.fromkeys(self.expected + other.expected))
        found = other.found if other.found is not None else self.found
        if ErrorKind.EXPECTED in (self.kind, other.kind):
            kind = ErrorKind.EXPECTED
        else:
            kind = ErrorKind.UNEXPECTED
        return ParseError(kind, self.position, found, expected)

    @property
    def message(self) -> str:
        """Human-readable description without location."""
        expected = " or ".join(self.expected)
        if self.kind is ErrorKind.EXPECTED:
            return f"Expected {expected}, found {describe_token(self.found)}"
        msg = f"Unexpected {describe_token(self.found)}"
        if expected:
            msg += f", expected {expected}"
        return msg

    def format_error(self) -> str:
        """Format error with line:column.

        Example:
            >>> ParseError.expecting(Position(7, 2, 2), "']'").format_error()
            "2:2: Expected ']', found end of input"
        """
        return f"{self.position}: {self.message}"

    def format_with_context(self, source: str, context_lines: int = 2) -> str:
        """Format error with source context and a caret under the column.

        Args:
            source: The text the failing input was built from
            context_lines: Number of lines to show before/after the error

        Example:
            >>> err = ParseError.expecting(Position(4, 2, 2), "digit", "x")
            >>> print(err.format_with_context("12\\n3x"))
            2:2: Expected digit, found 'x'
            <BLANKLINE>
               1 | 12
               2 | 3x
                 |  ^
        """
        context = get_error_context(source, self.position, context_lines)
        return f"{self.format_error()}\n\n{context}"

    def to_diagnostic(self) -> Diagnostic:
        """Structured diagnostic for formatters and exceptions."""
        span = self.position.to_span()
        if self.kind is ErrorKind.EXPECTED:
            return ErrorTemplate.expected(self.expected, self.found, span)
        if self.found is None:
            return ErrorTemplate.unexpected_eof(self.expected, span)
        return ErrorTemplate.unexpected_token(self.found, self.expected, span)


type Outcome[T] = ParseResult[T] | ParseError
