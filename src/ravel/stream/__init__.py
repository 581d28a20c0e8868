"""Streaming building blocks: ring buffer and incremental UTF-8 decoding.

Exports:
    RingBuffer: Growable FIFO circular buffer
    ByteReader: Chunked byte iterator over a reader
    Utf8Decoder: Resumable UTF-8 decoder yielding str | DecodeError
    LossyUtf8Decoder: UTF-8 decoder substituting U+FFFD
    DecodeError: Malformed byte sequence value
    decode_utf8: Decode a bytes-like object eagerly
    StreamConfig: StreamInput tuning parameters

Python 3.13+.
"""

from .config import StreamConfig
from .decode import (
    ByteReader,
    DecodeError,
    LossyUtf8Decoder,
    Readable,
    Utf8Decoder,
    as_reader,
    decode_utf8,
)
from .ring_buffer import RingBuffer, next_capacity

__all__ = [
    "ByteReader",
    "DecodeError",
    "LossyUtf8Decoder",
    "Readable",
    "RingBuffer",
    "StreamConfig",
    "Utf8Decoder",
    "as_reader",
    "decode_utf8",
    "next_capacity",
]
