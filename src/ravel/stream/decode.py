"""Incremental UTF-8 decoding over a byte source.

Three layers, each an iterator over the one below:

- ByteReader: single bytes from any object with ``read(size)``, pulled in
  fixed-size chunks. Interrupted reads are retried.
- Utf8Decoder: Unicode scalar values (one-character ``str``) or a
  DecodeError value per malformed sequence. Decoding resumes after every
  error; one bad byte never stops the stream.
- LossyUtf8Decoder: U+FFFD in place of every DecodeError. StreamInput
  reads through this layer.

Error recovery:
    When a continuation byte is out of range, the decoder does not
    swallow it. The byte is pushed back and becomes the lead byte of the
    next attempt, and the DecodeError carries only the bytes consumed
    before it. ``b"\\xe4A"`` therefore decodes to ``[DecodeError(b"\\xe4"), "A"]``.

Validity:
    Only Unicode scalar values are produced. Overlong forms, surrogates
    (U+D800..U+DFFF), and values above U+10FFFF are rejected through the
    allowed range of the byte following the lead byte (Unicode Table 3-7).

I/O errors:
    Any OSError other than InterruptedError propagates out of ``next()``.
    I/O failures are never reported as DecodeError.

Python 3.13+.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from ravel.constants import READ_CHUNK_SIZE, REPLACEMENT_CHARACTER
from ravel.diagnostics import Diagnostic, ErrorTemplate

__all__ = [
    "ByteReader",
    "DecodeError",
    "LossyUtf8Decoder",
    "Readable",
    "Utf8Decoder",
    "as_reader",
    "decode_utf8",
]

logger = logging.getLogger(__name__)

type ByteSource = Readable | bytes | bytearray | memoryview

# Lowest valid continuation byte and highest, for every position except the
# one directly after a lead byte listed in _SECOND_BYTE_RANGE.
_CONT_LOW = 0x80
_CONT_HIGH = 0xBF

# Restricted range for the byte after these lead bytes.
_SECOND_BYTE_RANGE: dict[int, tuple[int, int]] = {
    0xE0: (0xA0, 0xBF),  # no overlong 3-byte forms
    0xED: (0x80, 0x9F),  # no surrogates
    0xF0: (0x90, 0xBF),  # no overlong 4-byte forms
    0xF4: (0x80, 0x8F),  # nothing above U+10FFFF
}


class Readable(Protocol):
    """Anything with a blocking ``read(size)`` returning bytes."""

    def read(self, size: int = -1, /) -> bytes | None: ...


def as_reader(source: ByteSource) -> Readable:
    """Wrap bytes-like objects in BytesIO; pass readers through.

    Raises:
        TypeError: If source is neither bytes-like nor has read()
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source))
    if not callable(getattr(source, "read", None)):
        msg = f"expected a bytes-like object or a reader, got {type(source).__name__}"
        raise TypeError(msg)
    return source


@dataclass(frozen=True, slots=True)
class DecodeError:
    """Malformed UTF-8 sequence.

    A value, not an exception: the decoder yields it in place of a
    character and keeps going.

    Attributes:
        bytes: The bytes consumed by the failed attempt (1 to 3 bytes)

    Example:
        >>> err = DecodeError(b"\\xe4\\xb8")
        >>> err.length
        2
        >>> str(err)
        'invalid utf8 byte sequence [228, 184]'
    """

    bytes: bytes

    @property
    def length(self) -> int:
        """Number of bytes consumed."""
        return len(self.bytes)

    def __str__(self) -> str:
        return self.to_diagnostic().message

    def to_diagnostic(self) -> Diagnostic:
        """Structured diagnostic for this error."""
        return ErrorTemplate.invalid_utf8(self.bytes)


class ByteReader:
    """Iterator over the bytes of a reader, read in fixed-size chunks.

    Iteration ends at the first empty read. ``InterruptedError`` is
    retried transparently; any other OSError propagates.
    """

    __slots__ = ("_buf", "_chunk_size", "_eof", "_pos", "_reader")

    def __init__(self, reader: Readable, chunk_size: int = READ_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            msg = f"chunk_size must be positive, got {chunk_size}"
            raise ValueError(msg)
        self._reader = reader
        self._chunk_size = chunk_size
        self._buf = b""
        self._pos = 0
        self._eof = False

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        while self._pos >= len(self._buf):
            if self._eof:
                raise StopIteration
            self._fill()
        byte = self._buf[self._pos]
        self._pos += 1
        return byte

    def _fill(self) -> None:
        while True:
            try:
                chunk = self._reader.read(self._chunk_size)
            except InterruptedError:
                logger.debug("Interrupted read, retrying")
                continue
            break
        if not chunk:
            self._eof = True
            self._buf = b""
        else:
            self._buf = bytes(chunk)
        self._pos = 0


class Utf8Decoder:
    """Incremental UTF-8 decoder yielding ``str | DecodeError``.

    ``last_width`` is the number of source bytes behind the item returned
    last; a byte pushed back after an invalid continuation is counted
    with the item it starts.

    Example:
        >>> list(Utf8Decoder(b"\\xe4\\xb8\\xad"))
        ['中']
        >>> list(Utf8Decoder(b"\\xe4\\xb8"))
        [DecodeError(bytes=b'\\xe4\\xb8')]
    """

    __slots__ = ("_bytes", "_pending", "_width")

    def __init__(self, source: ByteSource, chunk_size: int = READ_CHUNK_SIZE) -> None:
        self._bytes = ByteReader(as_reader(source), chunk_size)
        self._pending: int | None = None
        self._width = 0

    @property
    def last_width(self) -> int:
        """Source bytes consumed by the most recent item."""
        return self._width

    def __iter__(self) -> Iterator[str | DecodeError]:
        return self

    def __next__(self) -> str | DecodeError:
        if self._pending is not None:
            lead = self._pending
            self._pending = None
        else:
            lead = next(self._bytes)

        self._width = 1
        if lead <= 0x7F:
            return chr(lead)
        if 0xC2 <= lead <= 0xDF:
            need, point = 1, lead & 0x1F
        elif 0xE0 <= lead <= 0xEF:
            need, point = 2, lead & 0x0F
        elif 0xF0 <= lead <= 0xF4:
            need, point = 3, lead & 0x07
        else:
            return DecodeError(bytes((lead,)))

        consumed = [lead]
        low, high = _SECOND_BYTE_RANGE.get(lead, (_CONT_LOW, _CONT_HIGH))
        for _ in range(need):
            byte = next(self._bytes, None)
            if byte is None:
                return DecodeError(bytes(consumed))
            if not low <= byte <= high:
                self._pending = byte
                return DecodeError(bytes(consumed))
            consumed.append(byte)
            self._width += 1
            point = (point << 6) | (byte & 0x3F)
            low, high = _CONT_LOW, _CONT_HIGH
        return chr(point)


class LossyUtf8Decoder:
    """UTF-8 decoder substituting U+FFFD for malformed sequences.

    Only true end of source ends iteration.

    Example:
        >>> "".join(LossyUtf8Decoder(b"a\\xffb"))
        'a�b'
    """

    __slots__ = ("_decoder", "_replacements")

    def __init__(self, source: ByteSource, chunk_size: int = READ_CHUNK_SIZE) -> None:
        self._decoder = Utf8Decoder(source, chunk_size)
        self._replacements = 0

    @property
    def replacements(self) -> int:
        """Number of malformed sequences replaced so far."""
        return self._replacements

    @property
    def last_width(self) -> int:
        """Source bytes behind the most recent character or U+FFFD."""
        return self._decoder.last_width

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        item = next(self._decoder)
        if isinstance(item, DecodeError):
            self._replacements += 1
            logger.debug("Replacing %s with U+FFFD", item)
            return REPLACEMENT_CHARACTER
        return item


def decode_utf8(data: bytes | bytearray | memoryview) -> list[str | DecodeError]:
    """Decode a whole bytes-like object, keeping errors in place.

    Example:
        >>> decode_utf8(b"a\\xc3")
        ['a', DecodeError(bytes=b'\\xc3')]
    """
    return list(Utf8Decoder(data))
