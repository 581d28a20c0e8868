"""Primitive parsers: single tokens, literals, and token runs.

Primitives inspect the next token with ``peek()`` and only consume it on
a match, so a failing primitive leaves the input where the mismatch
happened. A literal that matched a prefix keeps that prefix consumed;
wrap it in ``attempt`` when the caller needs all-or-nothing.

Every failure is an UNEXPECTED ParseError at the offending token's
position, with ``expected`` describing what would have matched.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from ravel.diagnostics import describe_token
from ravel.syntax.cursor import Outcome, ParseError, ParseResult
from ravel.syntax.input import Input, Span, Token
from ravel.syntax.parser.core import Parser

__all__ = [
    "any_token",
    "char",
    "eof",
    "none_of",
    "one_of",
    "satisfy",
    "string",
    "string_ci",
    "take",
    "take_till",
    "take_till1",
    "take_while",
    "take_while1",
    "token",
]

_ASCII_LIMIT = 0x80


def satisfy(predicate: Callable[[Any], bool], description: str | None = None) -> Parser[Any]:
    """Match one token for which ``predicate`` is true.

    Args:
        predicate: Test applied to the next token
        description: What the predicate accepts, for error messages

    Example:
        >>> satisfy(str.isdigit, "digit").parse_all("7")
        '7'
    """
    expected = () if description is None else (description,)

    def parse_satisfy(source: Input) -> Outcome[Any]:
        token = source.peek()
        if token is None or not predicate(token):
            return ParseError.unexpected(source.pos, token, expected)
        source.next()
        return ParseResult(token, source)

    return Parser(parse_satisfy, description or "satisfy")


def token(expected: Token) -> Parser[Any]:
    """Match exactly ``expected``."""
    return satisfy(lambda t: t == expected, describe_token(expected))


char = token


def any_token() -> Parser[Any]:
    """Match any single token; fails only at end of input."""
    return satisfy(lambda _: True, "any token")


def one_of(tokens: Iterable[Token]) -> Parser[Any]:
    """Match one token contained in ``tokens``.

    Example:
        >>> one_of("+-").parse_all("-")
        '-'
    """
    choices, description = _token_set(tokens)
    return satisfy(lambda t: t in choices, f"one of {description}")


def none_of(tokens: Iterable[Token]) -> Parser[Any]:
    """Match one token NOT contained in ``tokens``."""
    choices, description = _token_set(tokens)
    return satisfy(lambda t: t not in choices, f"none of {description}")


def _token_set(tokens: Iterable[Token]) -> tuple[frozenset[Token], str]:
    ordered = tuple(tokens)
    return frozenset(ordered), ", ".join(describe_token(t) for t in ordered)


def _fold(token: object) -> object:
    """Case-fold a character or an ASCII byte value."""
    if isinstance(token, str):
        return token.casefold()
    if isinstance(token, int) and token < _ASCII_LIMIT:
        return chr(token).casefold()
    return token


def _literal(
    expected: Sequence[Token], match: Callable[[object, object], bool], name: str
) -> Parser[Any]:
    description = repr(expected)

    def parse_literal(source: Input) -> Outcome[Any]:
        with source.cursor() as cur:
            for want in expected:
                got = source.peek()
                if got is None or not match(want, got):
                    return ParseError.unexpected(source.pos, got, (description,))
                source.next()
            span = source.consumed_since(cur.snapshot)
        return ParseResult(span, source)

    return Parser(parse_literal, name)


def string(expected: Sequence[Token]) -> Parser[Any]:
    """Match the tokens of ``expected`` in order.

    The value is the matched span (``str`` for text input, ``bytes`` for
    byte input).

    Example:
        >>> string("let").parse_all("let")
        'let'
    """
    return _literal(expected, lambda want, got: want == got, f"string({expected!r})")


def string_ci(expected: Sequence[Token]) -> Parser[Any]:
    """Case-insensitive ``string``; the value is the text as it appears in the input.

    Byte sources compare ASCII letters case-insensitively.

    Example:
        >>> string_ci("select").parse_all("SeLeCt")
        'SeLeCt'
    """
    return _literal(
        expected, lambda want, got: _fold(want) == _fold(got), f"string_ci({expected!r})"
    )


def eof() -> Parser[None]:
    """Succeed with None only at end of input."""

    def parse_eof(source: Input) -> Outcome[None]:
        token = source.peek()
        if token is not None:
            return ParseError.unexpected(source.pos, token, ("end of input",))
        return ParseResult(None, source)

    return Parser(parse_eof, "eof")


# ----------------------------------------------------------------------
# Token runs
# ----------------------------------------------------------------------


def _run(
    predicate: Callable[[Any], bool], minimum: int, description: str | None, name: str
) -> Parser[Span]:
    expected = () if description is None else (description,)

    def parse_run(source: Input) -> Outcome[Span]:
        with source.cursor() as cur:
            count = 0
            while (token := source.peek()) is not None and predicate(token):
                source.next()
                count += 1
            if count < minimum:
                return ParseError.unexpected(source.pos, token, expected)
            span = source.consumed_since(cur.snapshot)
        return ParseResult(span, source)

    return Parser(parse_run, name)


def take(count: int) -> Parser[Span]:
    """Exactly ``count`` tokens as a span.

    Fails at end of input if fewer remain; the tokens before that point
    stay consumed.
    """
    if count < 0:
        msg = f"count must be >= 0, got {count}"
        raise ValueError(msg)

    def parse_take(source: Input) -> Outcome[Span]:
        with source.cursor() as cur:
            for _ in range(count):
                if source.next() is None:
                    return ParseError.unexpected(source.pos, None, (f"{count} tokens",))
            span = source.consumed_since(cur.snapshot)
        return ParseResult(span, source)

    return Parser(parse_take, f"take({count})")


def take_while(predicate: Callable[[Any], bool]) -> Parser[Span]:
    """Longest (possibly empty) run of tokens satisfying ``predicate``."""
    return _run(predicate, 0, None, "take_while")


def take_while1(predicate: Callable[[Any], bool], description: str | None = None) -> Parser[Span]:
    """Like take_while but requires at least one token."""
    return _run(predicate, 1, description, "take_while1")


def take_till(predicate: Callable[[Any], bool]) -> Parser[Span]:
    """Longest (possibly empty) run of tokens up to one satisfying ``predicate``."""
    return _run(lambda t: not predicate(t), 0, None, "take_till")


def take_till1(predicate: Callable[[Any], bool], description: str | None = None) -> Parser[Span]:
    """Like take_till but requires at least one token."""
    return _run(lambda t: not predicate(t), 1, description, "take_till1")
