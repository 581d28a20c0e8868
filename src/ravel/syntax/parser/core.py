"""Parser abstraction and its binary operators.

A Parser wraps a function ``fn(input) -> ParseResult | ParseError``.
Parsers hold no state between invocations, so one value can be applied
speculatively any number of times and shared between grammars.

Composition always returns another Parser; there is one parser type no
matter how deeply combinators are nested.

Operators:
    ``a | b``   alternation (a.or_(b))
    ``a + b``   sequencing keeping both values as a tuple (a.and_(b))
    ``a >> b``  sequencing keeping the right value (a.andr(b))
    ``a << b``  sequencing keeping the left value (a.andl(b))

Error propagation:
    Sequencing returns the first ParseError unchanged and does NOT rewind
    the input; whichever speculative combinator encloses it (alt, opt,
    many, attempt, ...) restores the input before moving on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ravel.constants import LAZY_FRAMES_PER_LEVEL, MAX_DEPTH
from ravel.core import DepthGuard
from ravel.diagnostics import ParseFailure
from ravel.stream import Readable
from ravel.syntax.cursor import Outcome, ParseError, ParseResult
from ravel.syntax.input import Input, MaterializedInput, StreamInput

__all__ = ["Parser", "lazy", "parse", "to_input"]

logger = logging.getLogger(__name__)

type ParseFn[T] = Callable[[Input], Outcome[T]]


def to_input(source: Input | str | bytes | bytearray | memoryview | Readable) -> Input:
    """Wrap a source in the matching Input backend.

    Inputs pass through unchanged, in-memory sequences become a
    MaterializedInput, and objects with ``read()`` become a StreamInput.
    """
    if isinstance(source, Input):
        return source
    if isinstance(source, (str, bytes, bytearray, memoryview, tuple, list)):
        return MaterializedInput(source)
    if callable(getattr(source, "read", None)):
        return StreamInput(source)
    msg = f"cannot parse from {type(source).__name__}"
    raise TypeError(msg)


class Parser[T]:
    """Composable parser.

    Example:
        >>> digit = satisfy(str.isdigit, "digit")
        >>> number = digit.many1().map(lambda ds: int("".join(ds)))
        >>> number.parse_all("42")
        42
    """

    __slots__ = ("_fn", "name")

    def __init__(self, fn: ParseFn[T], name: str | None = None) -> None:
        self._fn = fn
        self.name = name or getattr(fn, "__name__", "parser")

    def parse(self, source: Input) -> Outcome[T]:
        """Run against ``source``; return ParseResult or ParseError."""
        return self._fn(source)

    __call__ = parse

    def parse_all(self, source: Input | str | bytes | bytearray | memoryview | Readable) -> T:
        """Parse the whole source and return the value.

        Raises:
            ParseFailure: If the parser fails or input remains afterwards
        """
        src = to_input(source)
        result = self.parse(src)
        if isinstance(result, ParseError):
            raise ParseFailure(result)
        rest = result.input
        token = rest.peek()
        if token is not None:
            raise ParseFailure(ParseError.unexpected(rest.pos, token, ("end of input",)))
        return result.value

    def __repr__(self) -> str:
        return f"<Parser {self.name}>"

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------

    def map[U](self, f: Callable[[T], U]) -> Parser[U]:
        """Transform the success value; consumption is unchanged."""

        def parse_map(source: Input) -> Outcome[U]:
            result = self.parse(source)
            if isinstance(result, ParseError):
                return result
            return ParseResult(f(result.value), result.input)

        return Parser(parse_map, f"{self.name}.map")

    def map_err(self, f: Callable[[ParseError], ParseError]) -> Parser[T]:
        """Transform the error value; consumption is unchanged."""

        def parse_map_err(source: Input) -> Outcome[T]:
            result = self.parse(source)
            if isinstance(result, ParseError):
                return f(result)
            return result

        return Parser(parse_map_err, f"{self.name}.map_err")

    def expect(self, description: str) -> Parser[T]:
        """On failure report ``Expected description`` at the starting position."""

        def parse_expect(source: Input) -> Outcome[T]:
            start, found = source.pos, source.peek()
            result = self.parse(source)
            if isinstance(result, ParseError):
                return ParseError.expecting(start, description, found)
            return result

        return Parser(parse_expect, description)

    label = expect

    def named(self, name: str) -> Parser[T]:
        """Same parser with a different name (repr only)."""
        return Parser(self._fn, name)

    # ------------------------------------------------------------------
    # Sequencing
    # ------------------------------------------------------------------

    def and_[U](self, other: Parser[U]) -> Parser[tuple[T, U]]:
        """Run both in order; value is the pair of values."""

        def parse_and(source: Input) -> Outcome[tuple[T, U]]:
            left = self.parse(source)
            if isinstance(left, ParseError):
                return left
            right = other.parse(left.input)
            if isinstance(right, ParseError):
                return right
            return ParseResult((left.value, right.value), right.input)

        return Parser(parse_and, f"({self.name} + {other.name})")

    def andl(self, other: Parser[Any]) -> Parser[T]:
        """Run both in order; keep the left value."""

        def parse_andl(source: Input) -> Outcome[T]:
            left = self.parse(source)
            if isinstance(left, ParseError):
                return left
            right = other.parse(left.input)
            if isinstance(right, ParseError):
                return right
            return ParseResult(left.value, right.input)

        return Parser(parse_andl, f"({self.name} << {other.name})")

    def andr[U](self, other: Parser[U]) -> Parser[U]:
        """Run both in order; keep the right value."""

        def parse_andr(source: Input) -> Outcome[U]:
            left = self.parse(source)
            if isinstance(left, ParseError):
                return left
            return other.parse(left.input)

        return Parser(parse_andr, f"({self.name} >> {other.name})")

    def and_then[U](self, f: Callable[[T], Parser[U]]) -> Parser[U]:
        """Feed the value into ``f`` and run the parser it returns."""

        def parse_and_then(source: Input) -> Outcome[U]:
            first = self.parse(source)
            if isinstance(first, ParseError):
                return first
            return f(first.value).parse(first.input)

        return Parser(parse_and_then, f"{self.name}.and_then")

    # ------------------------------------------------------------------
    # Alternation and speculative shortcuts
    # ------------------------------------------------------------------

    def or_(self, other: Parser[T]) -> Parser[T]:
        """Try this parser, then ``other`` from the same position."""
        from ravel.syntax.parser.combinators import alt  # noqa: PLC0415 - circular

        return alt(self, other)

    def opt(self) -> Parser[T | None]:
        """Value or None; never fails."""
        from ravel.syntax.parser.combinators import opt  # noqa: PLC0415 - circular

        return opt(self)

    def many(self) -> Parser[list[T]]:
        """Zero or more repetitions."""
        from ravel.syntax.parser.combinators import many  # noqa: PLC0415 - circular

        return many(self)

    def many1(self) -> Parser[list[T]]:
        """One or more repetitions."""
        from ravel.syntax.parser.combinators import many1  # noqa: PLC0415 - circular

        return many1(self)

    def sep_by(self, sep: Parser[Any]) -> Parser[list[T]]:
        """Zero or more repetitions separated by ``sep``."""
        from ravel.syntax.parser.combinators import sep_by  # noqa: PLC0415 - circular

        return sep_by(self, sep)

    def recognize(self) -> Parser[Any]:
        """Value is the consumed span instead of the parser's value."""
        from ravel.syntax.parser.combinators import recognize  # noqa: PLC0415 - circular

        return recognize(self)

    def __or__(self, other: Parser[T]) -> Parser[T]:
        return self.or_(other)

    def __add__[U](self, other: Parser[U]) -> Parser[tuple[T, U]]:
        return self.and_(other)

    def __rshift__[U](self, other: Parser[U]) -> Parser[U]:
        return self.andr(other)

    def __lshift__(self, other: Parser[Any]) -> Parser[T]:
        return self.andl(other)


def parse[T](
    parser: Parser[T], source: Input | str | bytes | bytearray | memoryview | Readable
) -> Outcome[T]:
    """Run ``parser`` against any supported source.

    Example:
        >>> result = parse(string("ab"), "abc")
        >>> result.value, result.input.fragment
        ('ab', 'c')
    """
    return parser.parse(to_input(source))


def lazy[T](factory: Callable[[], Parser[T]], max_depth: int = MAX_DEPTH) -> Parser[T]:
    """Parser built on first use; enables recursive grammars.

    The factory runs once. Nesting depth of this parser within a single
    parse is limited by a DepthGuard; ``max_depth`` is clamped so that
    many levels fit the interpreter recursion limit at
    LAZY_FRAMES_PER_LEVEL frames each.

    Raises:
        DepthLimitExceededError: At parse time, when nesting exceeds max_depth

    Example:
        >>> expr = lazy(lambda: between(token("("), expr, token(")")) | token("x"))
        >>> expr.parse_all("((x))")
        'x'
    """
    guard = DepthGuard(max_depth, frames_per_level=LAZY_FRAMES_PER_LEVEL)
    cell: list[Parser[T]] = []

    def parse_lazy(source: Input) -> Outcome[T]:
        if not cell:
            cell.append(factory())
            logger.debug("Built lazy parser %s", cell[0].name)
        with guard:
            return cell[0].parse(source)

    return Parser(parse_lazy, "lazy")
