"""Ravel - parser combinators over materialized and streaming input.

Parsers are plain values composed with methods, operators, and
combinator functions. The same grammar runs over an in-memory
``str``/``bytes`` source or over a byte stream decoded incrementally as
UTF-8; backtracking is scoped by cursors, and a stream only buffers the
tokens an open cursor may need to replay.

Public API:
    Parser - Composable parser (map, and_, or_, expect, ...)
    parse - Run a parser against a str/bytes/reader/Input
    MaterializedInput - Zero-copy view over an in-memory source
    StreamInput - Lossy UTF-8 input over a byte reader
    ParseResult / ParseError - Parse outcomes (failures are values)
    Position - Offset, line and column of a token
    token, string, satisfy, ... - Primitives
    alt, many, sep_by, chainl1, ... - Combinators
    StreamConfig, RingBuffer, Utf8Decoder - Streaming building blocks

Exceptions:
    RavelError - Base exception class
    ParseFailure - Raised by Parser.parse_all()
    CursorStateError - Cursor resolved twice or out of order
    DepthLimitExceededError - Recursive grammar nested too deeply

Submodules:
    ravel.syntax.parser - Primitives and combinators
    ravel.stream - RingBuffer and UTF-8 decoders
    ravel.diagnostics - Diagnostic codes, templates, and formatting
"""

from .diagnostics import (
    CursorStateError,
    DepthLimitExceededError,
    InputMismatchError,
    ParseFailure,
    RavelError,
)
from .stream import (
    DecodeError,
    LossyUtf8Decoder,
    RingBuffer,
    StreamConfig,
    Utf8Decoder,
    decode_utf8,
)
from .syntax import (
    Cursor,
    CursorGuard,
    ErrorKind,
    Input,
    MaterializedInput,
    ParseError,
    ParseResult,
    Parser,
    Position,
    StreamInput,
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
    token,
    value,
    verify,
)

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("ravel")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "Cursor",
    "CursorGuard",
    "CursorStateError",
    "DecodeError",
    "DepthLimitExceededError",
    "ErrorKind",
    "Input",
    "InputMismatchError",
    "LossyUtf8Decoder",
    "MaterializedInput",
    "ParseError",
    "ParseFailure",
    "ParseResult",
    "Parser",
    "Position",
    "RavelError",
    "RingBuffer",
    "StreamConfig",
    "StreamInput",
    "Utf8Decoder",
    "__version__",
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
    "decode_utf8",
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
    "token",
    "value",
    "verify",
]
