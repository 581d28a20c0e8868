"""Token-sequence inputs.

Two backends share one capability set (``next``, ``peek``, ``pos``,
``cursor``):

MaterializedInput:
    A view over an immutable ``str``/``bytes``/tuple source. The read
    offset and Position are three small fields, so ``clone()`` is a
    structural copy and ``diff()`` yields the consumed span as another view
    without copying. Restoring a cursor just resets the offset.

StreamInput:
    A non-rewindable byte source decoded incrementally (lossy UTF-8).
    Tokens read while a cursor is live are kept in a RingBuffer so a
    restore can replay them; the buffer is truncated as soon as the last
    live cursor resolves.

Buffer window (StreamInput):
    buffer:  [ committed-but-replayable ... | peeked / replay ]
                                            ^ offset
    With no live cursor the offset is always 0 and the buffer only holds
    tokens produced by peek().
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Hashable, Iterator, Sequence
from typing import Self

from ravel.diagnostics import CursorStateError, ErrorTemplate, InputMismatchError
from ravel.stream import LossyUtf8Decoder, Readable, RingBuffer, StreamConfig
from ravel.syntax.cursor import Cursor, CursorGuard
from ravel.syntax.position import Position

__all__ = ["Input", "MaterializedInput", "Span", "StreamInput", "Token"]

logger = logging.getLogger(__name__)

type Token = Hashable
type Span = str | bytes | tuple[Token, ...]


class Input(ABC):
    """Abstract token sequence with speculative cursors.

    Subclasses implement token access and the snapshot/rewind hooks; the
    cursor stack and Position bookkeeping live here.
    """

    __slots__ = ("_cursors", "_position")

    def __init__(self, position: Position | None = None) -> None:
        self._cursors: list[CursorGuard] = []
        self._position = Position() if position is None else position

    # ------------------------------------------------------------------
    # Token access
    # ------------------------------------------------------------------

    @abstractmethod
    def next(self) -> Token | None:
        """Consume and return the next token, or None at end of input."""

    @abstractmethod
    def peek(self) -> Token | None:
        """Return the next token without consuming it."""

    @abstractmethod
    def consumed_since(self, cursor: Cursor) -> Span:
        """Tokens consumed since ``cursor`` was taken.

        Only meaningful while that cursor is still open.
        """

    @property
    def pos(self) -> Position:
        """Position of the next unconsumed token."""
        return self._position

    def position(self) -> Position:
        """Position of the next unconsumed token."""
        return self._position

    def is_eof(self) -> bool:
        """True when no tokens remain."""
        return self.peek() is None

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next()
        if token is None:
            raise StopIteration
        return token

    # ------------------------------------------------------------------
    # Cursor protocol
    # ------------------------------------------------------------------

    @property
    def live_cursors(self) -> int:
        """Number of open cursors on this input."""
        return len(self._cursors)

    def cursor(self) -> CursorGuard:
        """Open a speculative region at the current position.

        Returns:
            A CursorGuard; use it as a context manager.
        """
        guard = CursorGuard(self, Cursor(self._read_offset(), self._position))
        self._cursors.append(guard)
        return guard

    def _release(self, guard: CursorGuard, *, restore: bool) -> None:
        """Resolve ``guard``; called by CursorGuard.restore()/commit()."""
        if not self._cursors or self._cursors[-1] is not guard:
            depth = next(
                (i + 1 for i, live in enumerate(self._cursors) if live is guard), 0
            )
            raise CursorStateError(
                ErrorTemplate.cursor_not_innermost(depth, len(self._cursors))
            )
        self._cursors.pop()
        if restore:
            self._rewind(guard.snapshot)
        if not self._cursors:
            self._settle()

    @abstractmethod
    def _read_offset(self) -> int:
        """Backend offset recorded in cursor snapshots."""

    @abstractmethod
    def _rewind(self, snapshot: Cursor) -> None:
        """Reset offset and Position to ``snapshot``."""

    def _settle(self) -> None:
        """Hook run when the last live cursor resolves."""


class MaterializedInput(Input):
    """Zero-copy view over an in-memory source.

    Tokens are characters for ``str`` sources, integers for ``bytes``
    sources, and the elements themselves for tuples and lists.

    Example:
        >>> source = MaterializedInput("123abc")
        >>> start = source.clone()
        >>> source.next(), source.next(), source.next()
        ('1', '2', '3')
        >>> start.diff(source).fragment, source.fragment
        ('123', 'abc')
    """

    __slots__ = ("_end", "_offset", "_source")

    def __init__(
        self,
        source: str | bytes | bytearray | memoryview | Sequence[Token],
        start: int = 0,
        end: int | None = None,
    ) -> None:
        super().__init__()
        if isinstance(source, (bytearray, memoryview)):
            source = bytes(source)
        elif not isinstance(source, (str, bytes, tuple)):
            source = tuple(source)
        length = len(source)
        end = length if end is None else end
        if not 0 <= start <= end <= length:
            msg = f"invalid view [{start}:{end}] over a source of length {length}"
            raise ValueError(msg)
        self._source: str | bytes | tuple[Token, ...] = source
        self._offset = start
        self._end = end
        if start:
            position = Position()
            for token in source[:start]:
                position = position.advance(token)
            self._position = position

    @classmethod
    def _view(
        cls,
        source: str | bytes | tuple[Token, ...],
        offset: int,
        end: int,
        position: Position,
    ) -> Self:
        view = cls.__new__(cls)
        Input.__init__(view, position)
        view._source = source
        view._offset = offset
        view._end = end
        return view

    @property
    def source(self) -> str | bytes | tuple[Token, ...]:
        """The whole underlying source (shared by every view)."""
        return self._source

    @property
    def offset(self) -> int:
        """Index of the next token in the source."""
        return self._offset

    @property
    def end(self) -> int:
        """Exclusive end of the view in the source."""
        return self._end

    @property
    def fragment(self) -> Span:
        """Tokens left in the view, as a slice of the source."""
        return self._source[self._offset : self._end]

    remaining = fragment

    def __len__(self) -> int:
        return self._end - self._offset

    def next(self) -> Token | None:
        if self._offset >= self._end:
            return None
        token = self._source[self._offset]
        self._offset += 1
        self._position = self._position.advance(token)
        return token

    def peek(self) -> Token | None:
        if self._offset >= self._end:
            return None
        return self._source[self._offset]

    def clone(self) -> Self:
        """Independent view at the same offset (no live cursors)."""
        return self._view(self._source, self._offset, self._end, self._position)

    def diff(self, other: MaterializedInput) -> Self:
        """View of exactly the tokens between this view and ``other``.

        Args:
            other: A later view of the same source

        Raises:
            InputMismatchError: If the views do not share a source, or
                ``other`` is before this view
        """
        if other._source is not self._source:
            raise InputMismatchError(ErrorTemplate.input_mismatch())
        if other._offset < self._offset:
            raise InputMismatchError(ErrorTemplate.span_reversed(self._offset, other._offset))
        return self._view(self._source, self._offset, other._offset, self._position)

    def consumed_since(self, cursor: Cursor) -> Span:
        return self._source[cursor.offset : self._offset]

    def _read_offset(self) -> int:
        return self._offset

    def _rewind(self, snapshot: Cursor) -> None:
        self._offset = snapshot.offset
        self._position = snapshot.position

    def __repr__(self) -> str:
        return f"MaterializedInput({self.fragment!r}, pos={self._position})"


class StreamInput(Input):
    """Input over a byte source, decoded as lossy UTF-8.

    Lookahead is bounded by the window outstanding cursors need: tokens
    are buffered only while a cursor is live (plus one peeked token), and
    the buffer is truncated when the last cursor resolves. Each buffered
    token is stored with the number of bytes it was decoded from, so
    ``pos.byte_offset`` stays exact across replay and U+FFFD substitution.

    Example:
        >>> stream = StreamInput.from_bytes("héllo".encode())
        >>> with stream.cursor() as cur:
        ...     stream.next(), stream.next()
        ...     cur.restore()
        ('h', 'é')
        >>> stream.next()
        'h'
    """

    __slots__ = ("_buf", "_decoder", "_offset")

    def __init__(
        self,
        reader: Readable | bytes | bytearray | memoryview,
        capacity: int | None = None,
        *,
        config: StreamConfig | None = None,
    ) -> None:
        """Create a stream input.

        Args:
            reader: Object with ``read(size)`` (or a bytes-like object)
            capacity: Initial ring buffer capacity, overrides config
            config: Buffer and read-chunk settings (default: StreamConfig())
        """
        super().__init__()
        config = StreamConfig() if config is None else config
        self._decoder = LossyUtf8Decoder(reader, config.chunk_size)
        self._buf = RingBuffer[tuple[str, int]](
            config.capacity if capacity is None else capacity
        )
        self._offset = 0

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview, **kwargs: object) -> Self:
        """Stream over an in-memory byte string."""
        return cls(data, **kwargs)  # type: ignore[arg-type]

    @property
    def buffered(self) -> int:
        """Number of tokens currently held in the ring buffer."""
        return len(self._buf)

    @property
    def buffer_capacity(self) -> int:
        """Current ring buffer capacity."""
        return self._buf.capacity

    @property
    def replacements(self) -> int:
        """Malformed byte sequences replaced with U+FFFD so far."""
        return self._decoder.replacements

    def next(self) -> str | None:
        if self._offset < len(self._buf):
            if self._cursors:
                token, width = self._buf[self._offset]
                self._offset += 1
            else:
                token, width = self._buf.pop_front()  # type: ignore[misc]
        else:
            token = next(self._decoder, None)
            if token is None:
                return None
            width = self._decoder.last_width
            if self._cursors:
                self._buf.push_back((token, width))
                self._offset += 1
        self._position = self._position.advance(token, width)
        return token

    def peek(self) -> str | None:
        if self._offset < len(self._buf):
            return self._buf[self._offset][0]
        token = next(self._decoder, None)
        if token is not None:
            self._buf.push_back((token, self._decoder.last_width))
        return token

    def consumed_since(self, cursor: Cursor) -> str:
        if not self._cursors or cursor.offset > self._offset:
            msg = "consumed_since() needs a cursor that is still open"
            raise CursorStateError(msg)
        return "".join(self._buf[i][0] for i in range(cursor.offset, self._offset))

    def _read_offset(self) -> int:
        return self._offset

    def _rewind(self, snapshot: Cursor) -> None:
        self._offset = snapshot.offset
        self._position = snapshot.position

    def _settle(self) -> None:
        if self._offset:
            self._buf.truncate_front(self._offset)
            logger.debug(
                "Released %d replay tokens, %d still buffered", self._offset, len(self._buf)
            )
            self._offset = 0

    def __repr__(self) -> str:
        return (
            f"StreamInput(pos={self._position}, buffered={len(self._buf)}, "
            f"cursors={len(self._cursors)})"
        )
