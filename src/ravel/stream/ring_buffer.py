"""Growable ring buffer for streaming input.

A fixed-capacity circular store with amortized O(1) push_back/pop_front,
O(1) indexed reads relative to the oldest element, and growth on demand.
StreamInput keeps decoded-but-uncommitted tokens here so an open cursor can
replay them after a restore.

collections.deque is not used: indexing into the middle of a deque is
O(n), and replay reads arbitrary offsets.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ravel.constants import RING_BUFFER_GROWTH_THRESHOLD

__all__ = ["RingBuffer", "next_capacity"]

logger = logging.getLogger(__name__)


def next_capacity(capacity: int) -> int:
    """Capacity after one growth step.

    Doubles below RING_BUFFER_GROWTH_THRESHOLD, then grows by a quarter.

    Example:
        >>> next_capacity(5)
        10
        >>> next_capacity(2048)
        2560
    """
    if capacity < RING_BUFFER_GROWTH_THRESHOLD:
        return capacity * 2
    return capacity + capacity // 4


class RingBuffer[T]:
    """FIFO circular buffer with doubling growth.

    Index ``buf[i]`` is the i-th oldest element still present, whatever the
    physical position of the head.

    Example:
        >>> buf = RingBuffer[str](2)
        >>> buf.push_back("a")
        >>> buf.push_back("b")
        >>> buf.push_back("c")  # grows to 4
        >>> buf.capacity, buf.grow_count
        (4, 1)
        >>> buf.pop_front(), buf[0], len(buf)
        ('a', 'b', 2)

    Thread Safety:
        Not thread-safe. Owned exclusively by a single StreamInput.
    """

    __slots__ = ("_grow_count", "_head", "_len", "_slots", "_tail")

    def __init__(self, capacity: int) -> None:
        """Create an empty buffer.

        Args:
            capacity: Initial number of slots (must be positive)

        Raises:
            ValueError: If capacity is not positive
        """
        if capacity <= 0:
            msg = f"capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self._slots: list[T | None] = [None] * capacity
        self._head = 0
        self._tail = 0
        self._len = 0
        self._grow_count = 0

    @property
    def capacity(self) -> int:
        """Number of slots currently allocated."""
        return len(self._slots)

    @property
    def grow_count(self) -> int:
        """Number of growth events since construction."""
        return self._grow_count

    def __len__(self) -> int:
        return self._len

    def __bool__(self) -> bool:
        return self._len > 0

    def is_empty(self) -> bool:
        """True when no elements are present."""
        return self._len == 0

    def is_full(self) -> bool:
        """True when the next push_back will grow the buffer."""
        return self._len == len(self._slots)

    def push_back(self, value: T) -> None:
        """Append value as the newest element, growing if full."""
        if self.is_full():
            self._grow()
        self._slots[self._tail] = value
        self._tail = (self._tail + 1) % len(self._slots)
        self._len += 1

    def pop_front(self) -> T | None:
        """Remove and return the oldest element, or None when empty."""
        if self._len == 0:
            return None
        value = self._slots[self._head]
        self._slots[self._head] = None
        self._head = (self._head + 1) % len(self._slots)
        self._len -= 1
        return value

    def truncate_front(self, count: int) -> None:
        """Discard the ``count`` oldest elements.

        Raises:
            IndexError: If count is negative or exceeds len()
        """
        if count < 0 or count > self._len:
            msg = f"cannot truncate {count} elements from a buffer of {self._len}"
            raise IndexError(msg)
        cap = len(self._slots)
        for i in range(count):
            self._slots[(self._head + i) % cap] = None
        self._head = (self._head + count) % cap
        self._len -= count

    def clear(self) -> None:
        """Discard every element, keeping the current capacity."""
        self.truncate_front(self._len)

    def __getitem__(self, index: int) -> T:
        """Return the index-th oldest element.

        Raises:
            IndexError: If index is outside 0..len()-1
        """
        if index < 0 or index >= self._len:
            msg = f"ring buffer index {index} out of range for length {self._len}"
            raise IndexError(msg)
        return self._slots[(self._head + index) % len(self._slots)]  # type: ignore[return-value]

    def __iter__(self) -> Iterator[T]:
        """Iterate oldest to newest."""
        for i in range(self._len):
            yield self[i]

    def __repr__(self) -> str:
        return (
            f"RingBuffer({list(self)!r}, capacity={self.capacity}, "
            f"head={self._head}, tail={self._tail})"
        )

    def _grow(self) -> None:
        """Reallocate with a larger capacity, preserving logical order.

        The occupied region wraps at most once, so it is copied in two
        slices: head..end of storage, then start of storage..tail.
        """
        old_cap = len(self._slots)
        new_cap = next_capacity(old_cap)
        slots: list[T | None] = [None] * new_cap
        first = old_cap - self._head
        slots[:first] = self._slots[self._head :]
        slots[first : first + self._tail] = self._slots[: self._tail]
        self._slots = slots
        self._head = 0
        self._tail = self._len % new_cap
        self._grow_count += 1
        logger.debug("Ring buffer grew from %d to %d slots", old_cap, new_cap)
