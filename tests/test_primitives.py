"""Tests for syntax/parser/primitives.py.

Python 3.13+.
"""

from __future__ import annotations

import pytest
from hypothesis import event, given, settings
from hypothesis import strategies as st

from ravel.syntax import (
    ErrorKind,
    MaterializedInput,
    ParseError,
    Position,
    StreamInput,
    any_token,
    char,
    eof,
    none_of,
    one_of,
    satisfy,
    string,
    string_ci,
    take,
    take_till,
    take_till1,
    take_while,
    take_while1,
    token,
)

# ============================================================================
# Single Tokens
# ============================================================================


class TestSingleToken:
    """Test token, satisfy, one_of, none_of, any_token."""

    def test_token_match(self) -> None:
        """A matching token is consumed and returned."""
        source = MaterializedInput("ab")
        result = token("a").parse(source)

        assert not isinstance(result, ParseError)
        assert result.value == "a"
        assert result.input.fragment == "b"

    def test_token_mismatch_consumes_nothing(self) -> None:
        """A mismatch fails at the token's position without consuming it."""
        source = MaterializedInput("b")
        result = char("a").parse(source)

        assert isinstance(result, ParseError)
        assert result.kind is ErrorKind.UNEXPECTED
        assert result.found == "b"
        assert result.expected == ("'a'",)
        assert source.offset == 0

    def test_token_at_end_of_input(self) -> None:
        """At end of input the error has found=None."""
        result = token("a").parse(MaterializedInput(""))

        assert isinstance(result, ParseError)
        assert result.at_eof

    def test_byte_token(self) -> None:
        """Byte sources compare integer tokens."""
        result = token(0x7B).parse(MaterializedInput(b"{"))

        assert not isinstance(result, ParseError)
        assert result.value == 0x7B

    def test_satisfy_description(self) -> None:
        """satisfy reports its description as the expectation."""
        result = satisfy(str.isdigit, "digit").parse(MaterializedInput("x"))

        assert isinstance(result, ParseError)
        assert result.format_error() == "1:1: Unexpected 'x', expected digit"

    def test_one_of(self) -> None:
        """one_of accepts any listed token."""
        sign = one_of("+-")

        assert sign.parse_all("-") == "-"
        result = sign.parse(MaterializedInput("*"))
        assert isinstance(result, ParseError)
        assert result.expected == ("one of '+', '-'",)

    def test_none_of(self) -> None:
        """none_of rejects listed tokens."""
        plain = none_of('"\\')

        assert plain.parse_all("a") == "a"
        assert isinstance(plain.parse(MaterializedInput('"')), ParseError)

    def test_one_of_generator(self) -> None:
        """Token sets may be any iterable, consumed once."""
        digit = one_of(str(d) for d in range(10))

        assert digit.parse_all("7") == "7"

    def test_any_token(self) -> None:
        """any_token fails only at end of input."""
        assert any_token().parse_all("\n") == "\n"
        result = any_token().parse(MaterializedInput(""))
        assert isinstance(result, ParseError)
        assert result.at_eof


# ============================================================================
# Literals
# ============================================================================


class TestLiterals:
    """Test string and string_ci."""

    def test_string_match(self) -> None:
        """string returns the matched span."""
        source = MaterializedInput("letx")
        result = string("let").parse(source)

        assert not isinstance(result, ParseError)
        assert result.value == "let"
        assert source.fragment == "x"

    def test_string_partial_match_keeps_prefix(self) -> None:
        """A failing literal leaves its matched prefix consumed."""
        source = MaterializedInput("abcx")
        result = string("abcd").parse(source)

        assert isinstance(result, ParseError)
        assert result.position == Position(3, 1, 4, 3)
        assert result.found == "x"
        assert result.expected == ("'abcd'",)
        assert source.offset == 3

    def test_bytes_literal(self) -> None:
        """Byte literals match byte sources and return bytes."""
        assert string(b"GET").parse_all(b"GET") == b"GET"

    def test_string_ci_returns_input_text(self) -> None:
        """Case-insensitive matching returns the text as written."""
        assert string_ci("select").parse_all("SeLeCt") == "SeLeCt"

    def test_string_ci_bytes_ascii(self) -> None:
        """Byte sources fold ASCII letters."""
        assert string_ci(b"host").parse_all(b"HOST") == b"HOST"

    def test_string_ci_mismatch(self) -> None:
        """Non-matching letters still fail."""
        assert isinstance(string_ci("abc").parse(MaterializedInput("abd")), ParseError)

    def test_string_on_stream(self) -> None:
        """Literals work on streams; the value is the decoded text."""
        stream = StreamInput.from_bytes("héllo".encode())
        result = string("hé").parse(stream)

        assert not isinstance(result, ParseError)
        assert result.value == "hé"
        assert stream.buffered == 0

    def test_eof(self) -> None:
        """eof succeeds only when nothing remains."""
        assert eof().parse_all("") is None
        result = eof().parse(MaterializedInput("x"))
        assert isinstance(result, ParseError)
        assert result.expected == ("end of input",)


# ============================================================================
# Token Runs
# ============================================================================


class TestTokenRuns:
    """Test take and the take_while/take_till family."""

    def test_take(self) -> None:
        """take(n) returns exactly n tokens."""
        source = MaterializedInput("abcdef")
        result = take(4).parse(source)

        assert not isinstance(result, ParseError)
        assert result.value == "abcd"
        assert source.fragment == "ef"

    def test_take_too_many(self) -> None:
        """take fails at end of input when fewer tokens remain."""
        result = take(5).parse(MaterializedInput("abc"))

        assert isinstance(result, ParseError)
        assert result.at_eof
        assert result.offset == 3

    def test_take_negative(self) -> None:
        """Negative counts are rejected when the parser is built."""
        with pytest.raises(ValueError, match="count"):
            take(-1)

    def test_take_while_may_be_empty(self) -> None:
        """take_while succeeds with an empty span."""
        assert take_while(str.isdigit).parse(MaterializedInput("abc")).value == ""

    def test_take_while1(self) -> None:
        """take_while1 needs at least one token."""
        source = MaterializedInput("123abc")

        assert take_while1(str.isdigit).parse(source).value == "123"
        result = take_while1(str.isdigit, "digit").parse(source)
        assert isinstance(result, ParseError)
        assert result.expected == ("digit",)

    def test_take_till(self) -> None:
        """take_till stops before the first token matching the predicate."""
        source = MaterializedInput("key=value")

        assert take_till(lambda c: c == "=").parse(source).value == "key"
        assert source.fragment == "=value"

    def test_take_till1(self) -> None:
        """take_till1 fails when the stop token comes first."""
        result = take_till1(lambda c: c == "=").parse(MaterializedInput("=x"))

        assert isinstance(result, ParseError)

    def test_take_while_bytes(self) -> None:
        """Runs over byte sources return bytes."""
        is_digit = lambda b: 0x30 <= b <= 0x39  # noqa: E731
        assert take_while(is_digit).parse(MaterializedInput(b"42!")).value == b"42"

    def test_take_while_on_stream(self) -> None:
        """Runs on streams release their replay buffer afterwards."""
        stream = StreamInput.from_bytes(b"aaab")
        result = take_while(lambda c: c == "a").parse(stream)

        assert result.value == "aaa"
        assert stream.peek() == "b"
        assert stream.buffered == 1


class TestPrimitiveProperties:
    """Agreement between primitives and plain string operations."""

    @given(text=st.text(alphabet="0123456789ab", max_size=40))
    @settings(max_examples=200)
    def test_take_while_matches_prefix(self, text: str) -> None:
        """PROPERTY: take_while returns the longest predicate-satisfying prefix."""
        source = MaterializedInput(text)
        span = take_while(str.isdigit).parse(source).value
        event(f"empty={span == ''}")

        expected = len(text) - len(text.lstrip("0123456789"))
        assert span == text[:expected]
        assert source.fragment == text[expected:]

    @given(text=st.text(max_size=20))
    @settings(max_examples=200)
    def test_string_matches_itself_on_both_backends(self, text: str) -> None:
        """PROPERTY: string(s) accepts exactly s on either backend."""
        assert string(text).parse_all(text) == text
        assert string(text).parse_all(StreamInput.from_bytes(text.encode())) == text
