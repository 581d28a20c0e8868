"""Diagnostic system for ravel errors.

Provides structured error diagnostics with codes, spans, and hints,
and the exception hierarchy raised outside the combinator algebra.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .errors import (
    CursorStateError,
    DepthLimitExceededError,
    InputMismatchError,
    ParseFailure,
    RavelError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate, describe_token

__all__ = [
    "CursorStateError",
    "DepthLimitExceededError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "InputMismatchError",
    "OutputFormat",
    "ParseFailure",
    "RavelError",
    "SourceSpan",
    "describe_token",
]
