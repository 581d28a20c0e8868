"""Parser combinators.

Combinators fall into two groups:

Sequencing (seq, pair, between, preceded, terminated, count, ...):
    Run parsers one after another and return the first ParseError
    unchanged. The input is NOT rewound on failure.

Speculative (alt, attempt, opt, many, sep_by, chainl1, peek, not_, ...):
    Run a parser under a cursor and restore it on failure, so the
    alternative or the caller continues from the original position.

Repetition stops at the first failure or at the first success that
consumed nothing; an empty success is not added to the values, which
keeps ``many(opt(p))`` from looping forever.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ravel.syntax.cursor import Outcome, ParseError, ParseResult
from ravel.syntax.input import Input, MaterializedInput, Span
from ravel.syntax.parser.core import Parser

__all__ = [
    "alt",
    "attempt",
    "between",
    "chainl",
    "chainl1",
    "chainr",
    "chainr1",
    "cond",
    "count",
    "empty",
    "end_by",
    "end_by1",
    "fail",
    "many",
    "many1",
    "many_till",
    "not_",
    "opt",
    "opt_or",
    "pair",
    "peek",
    "preceded",
    "pure",
    "recognize",
    "repeat",
    "repeat_range",
    "sep_by",
    "sep_by1",
    "seq",
    "skip",
    "skip_many",
    "skip_many1",
    "skip_till",
    "terminated",
    "value",
    "verify",
]


def _attempt[T](parser: Parser[T], source: Input) -> Outcome[T]:
    """Run ``parser``; on failure rewind ``source`` and return the error."""
    with source.cursor() as cur:
        result = parser.parse(source)
        if isinstance(result, ParseError):
            cur.restore()
    return result


def _repeat[T](parser: Parser[T], source: Input, values: list[T], limit: int | None) -> None:
    """Append successes of ``parser`` to ``values`` until failure or ``limit``."""
    while limit is None or len(values) < limit:
        before = source.pos.offset
        result = _attempt(parser, source)
        if isinstance(result, ParseError) or source.pos.offset == before:
            return
        values.append(result.value)


# ----------------------------------------------------------------------
# Trivial parsers
# ----------------------------------------------------------------------


def pure[T](result: T) -> Parser[T]:
    """Succeed with ``result`` without consuming input."""
    return Parser(lambda source: ParseResult(result, source), "pure")


def empty() -> Parser[None]:
    """Succeed with None without consuming input."""
    return pure(None)


def fail(description: str) -> Parser[Any]:
    """Always fail with ``Expected description`` at the current position."""

    def parse_fail(source: Input) -> Outcome[Any]:
        return ParseError.expecting(source.pos, description, source.peek())

    return Parser(parse_fail, "fail")


def value[T](result: T, parser: Parser[Any]) -> Parser[T]:
    """Run ``parser`` and replace its value with ``result``."""
    return parser.map(lambda _: result)


# ----------------------------------------------------------------------
# Sequencing
# ----------------------------------------------------------------------


def seq(*parsers: Parser[Any]) -> Parser[tuple[Any, ...]]:
    """Run parsers in order; the value is the tuple of their values."""

    def parse_seq(source: Input) -> Outcome[tuple[Any, ...]]:
        values = []
        for parser in parsers:
            result = parser.parse(source)
            if isinstance(result, ParseError):
                return result
            values.append(result.value)
            source = result.input
        return ParseResult(tuple(values), source)

    return Parser(parse_seq, "seq")


def pair[L, R](left: Parser[L], sep: Parser[Any], right: Parser[R]) -> Parser[tuple[L, R]]:
    """``left sep right``; the value is ``(left, right)``."""
    return (left << sep) + right


def between[T](open_: Parser[Any], parser: Parser[T], close: Parser[Any]) -> Parser[T]:
    """``open parser close``; the value is the middle one."""
    return open_ >> parser << close


def preceded[T](prefix: Parser[Any], parser: Parser[T]) -> Parser[T]:
    """``prefix parser``; keep the second value."""
    return prefix >> parser


def terminated[T](parser: Parser[T], suffix: Parser[Any]) -> Parser[T]:
    """``parser suffix``; keep the first value."""
    return parser << suffix


def count[T](parser: Parser[T], n: int) -> Parser[list[T]]:
    """Exactly ``n`` repetitions; the first failure is returned."""
    if n < 0:
        msg = f"n must be >= 0, got {n}"
        raise ValueError(msg)

    def parse_count(source: Input) -> Outcome[list[T]]:
        values = []
        for _ in range(n):
            result = parser.parse(source)
            if isinstance(result, ParseError):
                return result
            values.append(result.value)
            source = result.input
        return ParseResult(values, source)

    return Parser(parse_count, f"count({n})")


repeat = count


def skip(parser: Parser[Any], n: int) -> Parser[None]:
    """Exactly ``n`` repetitions, values discarded."""
    return count(parser, n).map(lambda _: None)


# ----------------------------------------------------------------------
# Alternation and lookahead
# ----------------------------------------------------------------------


def alt[T](*parsers: Parser[T]) -> Parser[T]:
    """First parser that succeeds, each tried from the same position.

    When every alternative fails, their errors are merged (furthest
    offset wins, ties union their expectations).

    Example:
        >>> sign = alt(token("+"), token("-"))
        >>> sign.parse(MaterializedInput("*")).format_error()
        "1:1: Unexpected '*', expected '+' or '-'"
    """
    if not parsers:
        msg = "alt() needs at least one parser"
        raise ValueError(msg)

    def parse_alt(source: Input) -> Outcome[T]:
        error: ParseError | None = None
        for parser in parsers:
            result = _attempt(parser, source)
            if not isinstance(result, ParseError):
                return result
            error = result if error is None else error.merge(result)
        assert error is not None  # noqa: S101 - at least one parser ran
        return error

    return Parser(parse_alt, " | ".join(p.name for p in parsers))


def attempt[T](parser: Parser[T]) -> Parser[T]:
    """Run ``parser``; on failure rewind the input before returning the error."""
    return Parser(lambda source: _attempt(parser, source), f"attempt({parser.name})")


def opt[T](parser: Parser[T]) -> Parser[T | None]:
    """Value of ``parser``, or None (input restored) if it fails."""
    return opt_or(parser, None)


def opt_or[T, D](parser: Parser[T], default: D) -> Parser[T | D]:
    """Value of ``parser``, or ``default`` (input restored) if it fails."""

    def parse_opt(source: Input) -> Outcome[T | D]:
        result = _attempt(parser, source)
        if isinstance(result, ParseError):
            return ParseResult(default, source)
        return result

    return Parser(parse_opt, f"opt({parser.name})")


def cond[T](condition: Parser[Any], parser: Parser[T]) -> Parser[T | None]:
    """When ``condition`` matches, ``parser`` must follow; otherwise None."""

    def parse_cond(source: Input) -> Outcome[T | None]:
        head = _attempt(condition, source)
        if isinstance(head, ParseError):
            return ParseResult(None, source)
        return parser.parse(head.input)

    return Parser(parse_cond, f"cond({condition.name})")


def peek[T](parser: Parser[T]) -> Parser[T]:
    """Run ``parser`` and restore the input on success and on failure."""

    def parse_peek(source: Input) -> Outcome[T]:
        with source.cursor() as cur:
            result = parser.parse(source)
            cur.restore()
        if isinstance(result, ParseError):
            return result
        return ParseResult(result.value, source)

    return Parser(parse_peek, f"peek({parser.name})")


def not_(parser: Parser[Any]) -> Parser[None]:
    """Succeed with None, consuming nothing, only when ``parser`` fails."""

    def parse_not(source: Input) -> Outcome[None]:
        start, found = source.pos, source.peek()
        with source.cursor() as cur:
            result = parser.parse(source)
            cur.restore()
        if isinstance(result, ParseError):
            return ParseResult(None, source)
        return ParseError.unexpected(start, found, (f"not {parser.name}",))

    return Parser(parse_not, f"not({parser.name})")


def verify[T](parser: Parser[T], predicate: Callable[[T], bool]) -> Parser[T]:
    """Run ``parser``; fail at its start position unless ``predicate(value)``."""

    def parse_verify(source: Input) -> Outcome[T]:
        start, found = source.pos, source.peek()
        result = parser.parse(source)
        if isinstance(result, ParseError):
            return result
        if not predicate(result.value):
            return ParseError.unexpected(start, found, (f"valid {parser.name}",))
        return result

    return Parser(parse_verify, f"verify({parser.name})")


def recognize(parser: Parser[Any]) -> Parser[Span]:
    """The tokens ``parser`` consumed, instead of its value.

    Materialized input yields a zero-copy slice of the source. Stream
    input replays the tokens kept by a cursor held for the duration.

    Example:
        >>> digits = recognize(many1(satisfy(str.isdigit)))
        >>> digits.parse_all("2024")
        '2024'
    """

    def parse_recognize(source: Input) -> Outcome[Span]:
        if isinstance(source, MaterializedInput):
            start = source.clone()
            result = parser.parse(source)
            if isinstance(result, ParseError):
                return result
            return ParseResult(start.diff(source).fragment, source)
        with source.cursor() as cur:
            result = parser.parse(source)
            if isinstance(result, ParseError):
                return result
            span = source.consumed_since(cur.snapshot)
        return ParseResult(span, source)

    return Parser(parse_recognize, f"recognize({parser.name})")


# ----------------------------------------------------------------------
# Repetition
# ----------------------------------------------------------------------


def many[T](parser: Parser[T]) -> Parser[list[T]]:
    """Zero or more repetitions; never fails.

    Example:
        >>> many(token("a")).parse(MaterializedInput("aab")).value
        ['a', 'a']
    """

    def parse_many(source: Input) -> Outcome[list[T]]:
        values: list[T] = []
        _repeat(parser, source, values, None)
        return ParseResult(values, source)

    return Parser(parse_many, f"many({parser.name})")


def many1[T](parser: Parser[T]) -> Parser[list[T]]:
    """One or more repetitions; the first failure is returned."""

    def parse_many1(source: Input) -> Outcome[list[T]]:
        first = parser.parse(source)
        if isinstance(first, ParseError):
            return first
        values = [first.value]
        _repeat(parser, source, values, None)
        return ParseResult(values, source)

    return Parser(parse_many1, f"many1({parser.name})")


def repeat_range[T](parser: Parser[T], low: int, high: int | None = None) -> Parser[list[T]]:
    """Between ``low`` and ``high`` (inclusive, None for no bound) repetitions."""
    if low < 0 or (high is not None and high < low):
        msg = f"invalid repetition range [{low}, {high}]"
        raise ValueError(msg)
    head = count(parser, low)

    def parse_range(source: Input) -> Outcome[list[T]]:
        result = head.parse(source)
        if isinstance(result, ParseError):
            return result
        values = result.value
        _repeat(parser, source, values, high)
        return ParseResult(values, source)

    return Parser(parse_range, f"repeat_range({parser.name}, {low}, {high})")


def skip_many(parser: Parser[Any]) -> Parser[None]:
    """Zero or more repetitions, values discarded."""
    return many(parser).map(lambda _: None)


def skip_many1(parser: Parser[Any]) -> Parser[None]:
    """One or more repetitions, values discarded."""
    return many1(parser).map(lambda _: None)


def _separated[T](
    parser: Parser[T], sep: Parser[Any], source: Input, values: list[T]
) -> None:
    """Append ``sep parser`` pairs; a pair that fails anywhere is rewound whole."""
    step = sep >> parser
    _repeat(step, source, values, None)


def sep_by[T](parser: Parser[T], sep: Parser[Any]) -> Parser[list[T]]:
    """Zero or more ``parser`` separated by ``sep``.

    A trailing separator is left unconsumed.

    Example:
        >>> items = sep_by(one_of("abc"), token(","))
        >>> items.parse(MaterializedInput("a,b,")).value
        ['a', 'b']
    """

    def parse_sep_by(source: Input) -> Outcome[list[T]]:
        first = _attempt(parser, source)
        if isinstance(first, ParseError):
            return ParseResult([], source)
        values = [first.value]
        _separated(parser, sep, source, values)
        return ParseResult(values, source)

    return Parser(parse_sep_by, f"sep_by({parser.name})")


def sep_by1[T](parser: Parser[T], sep: Parser[Any]) -> Parser[list[T]]:
    """One or more ``parser`` separated by ``sep``."""

    def parse_sep_by1(source: Input) -> Outcome[list[T]]:
        first = parser.parse(source)
        if isinstance(first, ParseError):
            return first
        values = [first.value]
        _separated(parser, sep, source, values)
        return ParseResult(values, source)

    return Parser(parse_sep_by1, f"sep_by1({parser.name})")


def _ended[T](
    parser: Parser[T], sep: Parser[Any], source: Input, values: list[T]
) -> ParseError | None:
    """Append ``parser sep`` items; an item without its separator is an error."""
    while True:
        before = source.pos.offset
        item = _attempt(parser, source)
        if isinstance(item, ParseError):
            return None
        end = sep.parse(source)
        if isinstance(end, ParseError):
            return end
        if source.pos.offset == before:
            return None
        values.append(item.value)


def end_by[T](parser: Parser[T], sep: Parser[Any]) -> Parser[list[T]]:
    """Zero or more ``parser``, each followed by ``sep``.

    Example:
        >>> stmts = end_by(one_of("xy"), token(";"))
        >>> stmts.parse_all("x;y;")
        ['x', 'y']
    """

    def parse_end_by(source: Input) -> Outcome[list[T]]:
        values: list[T] = []
        error = _ended(parser, sep, source, values)
        if error is not None:
            return error
        return ParseResult(values, source)

    return Parser(parse_end_by, f"end_by({parser.name})")


def end_by1[T](parser: Parser[T], sep: Parser[Any]) -> Parser[list[T]]:
    """One or more ``parser``, each followed by ``sep``."""
    first = parser << sep

    def parse_end_by1(source: Input) -> Outcome[list[T]]:
        head = first.parse(source)
        if isinstance(head, ParseError):
            return head
        values = [head.value]
        error = _ended(parser, sep, source, values)
        if error is not None:
            return error
        return ParseResult(values, source)

    return Parser(parse_end_by1, f"end_by1({parser.name})")


def many_till[T](parser: Parser[T], end: Parser[Any]) -> Parser[list[T]]:
    """Repeat ``parser`` until ``end`` would match.

    ``end`` is checked with lookahead before each repetition and is left
    unconsumed. A failing ``parser`` before ``end`` matches is returned;
    a success that consumed nothing ends the loop without being kept.

    Example:
        >>> body = many_till(any_token(), string("*/"))
        >>> body.parse(MaterializedInput("ab*/")).input.fragment
        '*/'
    """
    stop = peek(end)

    def parse_many_till(source: Input) -> Outcome[list[T]]:
        values: list[T] = []
        while isinstance(stop.parse(source), ParseError):
            before = source.pos.offset
            result = parser.parse(source)
            if isinstance(result, ParseError):
                return result
            if source.pos.offset == before:
                break
            values.append(result.value)
        return ParseResult(values, source)

    return Parser(parse_many_till, f"many_till({parser.name})")


def skip_till(parser: Parser[Any], end: Parser[Any]) -> Parser[None]:
    """``many_till`` with the values discarded."""
    return many_till(parser, end).map(lambda _: None)


# ----------------------------------------------------------------------
# Operator chains
# ----------------------------------------------------------------------


type BinaryOp[T] = Callable[[T, T], T]


def _operands[T](
    parser: Parser[T], op: Parser[BinaryOp[T]], source: Input
) -> Outcome[tuple[list[T], list[BinaryOp[T]]]]:
    """``p (op p)*`` as parallel lists of operands and operators."""
    first = parser.parse(source)
    if isinstance(first, ParseError):
        return first
    operands = [first.value]
    operators: list[BinaryOp[T]] = []
    step = op + parser
    while True:
        before = source.pos.offset
        result = _attempt(step, source)
        if isinstance(result, ParseError) or source.pos.offset == before:
            break
        operator, operand = result.value
        operators.append(operator)
        operands.append(operand)
    return ParseResult((operands, operators), source)


def chainl1[T](parser: Parser[T], op: Parser[BinaryOp[T]]) -> Parser[T]:
    """One or more operands joined by left-associative operators.

    ``op`` yields the function that combines two operands.

    Example:
        >>> num = satisfy(str.isdigit).map(int)
        >>> minus = token("-").map(lambda _: lambda a, b: a - b)
        >>> chainl1(num, minus).parse_all("9-3-2")
        4
    """

    def parse_chainl1(source: Input) -> Outcome[T]:
        result = _operands(parser, op, source)
        if isinstance(result, ParseError):
            return result
        operands, operators = result.value
        acc = operands[0]
        for operator, operand in zip(operators, operands[1:], strict=True):
            acc = operator(acc, operand)
        return ParseResult(acc, source)

    return Parser(parse_chainl1, f"chainl1({parser.name})")


def chainr1[T](parser: Parser[T], op: Parser[BinaryOp[T]]) -> Parser[T]:
    """One or more operands joined by right-associative operators.

    Example:
        >>> num = satisfy(str.isdigit).map(int)
        >>> power = token("^").map(lambda _: lambda a, b: a**b)
        >>> chainr1(num, power).parse_all("2^3^2")
        512
    """

    def parse_chainr1(source: Input) -> Outcome[T]:
        result = _operands(parser, op, source)
        if isinstance(result, ParseError):
            return result
        operands, operators = result.value
        acc = operands[-1]
        for operator, operand in zip(
            reversed(operators), reversed(operands[:-1]), strict=True
        ):
            acc = operator(operand, acc)
        return ParseResult(acc, source)

    return Parser(parse_chainr1, f"chainr1({parser.name})")


def chainl[T](parser: Parser[T], op: Parser[BinaryOp[T]], default: T) -> Parser[T]:
    """``chainl1``, or ``default`` (input restored) when there is no first operand."""
    return opt_or(chainl1(parser, op), default)


def chainr[T](parser: Parser[T], op: Parser[BinaryOp[T]], default: T) -> Parser[T]:
    """``chainr1``, or ``default`` (input restored) when there is no first operand."""
    return opt_or(chainr1(parser, op), default)
