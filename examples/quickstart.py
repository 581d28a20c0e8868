"""Quickstart Example - Parser Combinators Over Text and Streams.

Demonstrates:

1. Building a grammar from primitives and combinators
2. Parsing in-memory text with parse_all()
3. Parsing a byte stream incrementally with StreamInput
4. Reading parse errors and diagnostics

Python 3.13+.
"""

from __future__ import annotations

import io
import logging

from ravel import ParseFailure, Parser, StreamInput, lazy
from ravel.syntax import (
    alt,
    between,
    none_of,
    one_of,
    recognize,
    satisfy,
    sep_by,
    skip_many,
    string,
    token,
    value,
)


def build_json() -> Parser[object]:
    """A compact JSON value grammar (no escapes inside strings)."""
    ws = skip_many(one_of(" \t\r\n"))

    def lexeme[T](parser: Parser[T]) -> Parser[T]:
        return parser << ws

    digits = satisfy(str.isdigit, "digit").many1()
    number = lexeme(recognize(token("-").opt() + digits)).map(int).expect("number")
    text = lexeme(between(token('"'), recognize(none_of('"').many()), token('"')))
    literal = lexeme(
        alt(
            value(True, string("true")),
            value(False, string("false")),
            value(None, string("null")),
        )
    )

    def punct(symbol: str) -> Parser[str]:
        return lexeme(token(symbol))

    json_value: Parser[object] = lazy(lambda: alt(number, text, literal, array, obj))
    array = between(punct("["), sep_by(json_value, punct(",")), punct("]"))
    member = (text << punct(":")) + json_value
    obj = between(punct("{"), sep_by(member, punct(",")), punct("}")).map(dict)
    return ws >> json_value


def example_1_text() -> None:
    """Parse an in-memory string."""
    print("=" * 60)
    print("Example 1: Materialized input")
    print("=" * 60)

    doc = build_json().parse_all('{"name": "ravel", "tags": ["parser", "stream"], "n": -3}')
    print(doc)
    print()


def example_2_stream() -> None:
    """Parse bytes as they are read, with bounded lookahead."""
    print("=" * 60)
    print("Example 2: Streaming input")
    print("=" * 60)

    reader = io.BytesIO('[1, 2, {"ok": true}, "héllo"]'.encode())
    stream = StreamInput(reader)
    print(build_json().parse_all(stream))
    print(f"Tokens still buffered: {stream.buffered}")
    print()


def example_3_errors() -> None:
    """Show the error value and its formatted diagnostic."""
    print("=" * 60)
    print("Example 3: Errors")
    print("=" * 60)

    source = '{"a": [1, 2,, 3]}'
    try:
        build_json().parse_all(source)
    except ParseFailure as failure:
        print(failure.error.format_with_context(source))
        print()
        print(failure)
    print()


def main() -> None:
    """Run all examples."""
    logging.basicConfig(level=logging.INFO)

    example_1_text()
    example_2_stream()
    example_3_errors()


if __name__ == "__main__":
    main()
