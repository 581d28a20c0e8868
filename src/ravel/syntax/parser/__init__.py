"""Parser combinator module.

Module Organization:
- core.py: Parser class, operators, parse() and lazy()
- primitives.py: Token, literal, and token-run parsers
- combinators.py: Sequencing, alternation, repetition, lookahead, chains

Public API:
    Parser: Composable parser wrapping ``fn(input) -> ParseResult | ParseError``
    parse: Run a parser against a str/bytes/reader/Input
    lazy: Deferred parser for recursive grammars
"""

from ravel.syntax.parser.combinators import (
    alt,
    attempt,
    between,
    chainl,
    chainl1,
    chainr,
    chainr1,
    cond,
    count,
    empty,
    end_by,
    end_by1,
    fail,
    many,
    many1,
    many_till,
    not_,
    opt,
    opt_or,
    pair,
    peek,
    preceded,
    pure,
    recognize,
    repeat,
    repeat_range,
    sep_by,
    sep_by1,
    seq,
    skip,
    skip_many,
    skip_many1,
    skip_till,
    terminated,
    value,
    verify,
)
from ravel.syntax.parser.core import Parser, lazy, parse, to_input
from ravel.syntax.parser.primitives import (
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

__all__ = [
    "Parser",
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
