"""Parsing package: inputs, positions, cursors, and the combinator algebra.

Python 3.13+.
"""

from .cursor import Cursor, CursorGuard, CursorState, ErrorKind, Outcome, ParseError, ParseResult
from .input import Input, MaterializedInput, Span, StreamInput, Token
from .parser import (
    Parser,
    alt,
    any_token,
    attempt,
    between,
    chainl,
    chainl1,
    chainr,
    chainr1,
    char,
    cond,
    count,
    empty,
    end_by,
    end_by1,
    eof,
    fail,
    lazy,
    many,
    many1,
    many_till,
    none_of,
    not_,
    one_of,
    opt,
    opt_or,
    pair,
    parse,
    peek,
    preceded,
    pure,
    recognize,
    repeat,
    repeat_range,
    satisfy,
    sep_by,
    sep_by1,
    seq,
    skip,
    skip_many,
    skip_many1,
    skip_till,
    string,
    string_ci,
    take,
    take_till,
    take_till1,
    take_while,
    take_while1,
    terminated,
    to_input,
    token,
    value,
    verify,
)
from .position import Position, format_position, get_error_context, get_line_content

__all__ = [
    "Cursor",
    "CursorGuard",
    "CursorState",
    "ErrorKind",
    "Input",
    "MaterializedInput",
    "Outcome",
    "ParseError",
    "ParseResult",
    "Parser",
    "Position",
    "Span",
    "StreamInput",
    "Token",
    "alt",
    "any_token",
    "attempt",
    "between",
    "chainl",
    "chainl1",
    "chainr",
    "chainr1",
    "char",
    "cond",
    "count",
    "empty",
    "end_by",
    "end_by1",
    "eof",
    "fail",
    "format_position",
    "get_error_context",
    "get_line_content",
    "lazy",
    "many",
    "many1",
    "many_till",
    "none_of",
    "not_",
    "one_of",
    "opt",
    "opt_or",
    "pair",
    "parse",
    "peek",
    "preceded",
    "pure",
    "recognize",
    "repeat",
    "repeat_range",
    "satisfy",
    "sep_by",
    "sep_by1",
    "seq",
    "skip",
    "skip_many",
    "skip_many1",
    "skip_till",
    "string",
    "string_ci",
    "take",
    "take_till",
    "take_till1",
    "take_while",
    "take_while1",
    "terminated",
    "to_input",
    "token",
    "value",
    "verify",
]
