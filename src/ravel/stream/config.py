"""Stream input configuration.

Provides a single frozen dataclass with the tuning parameters of a
StreamInput.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass

from ravel.constants import DEFAULT_BUFFER_CAPACITY, READ_CHUNK_SIZE

__all__ = ["StreamConfig"]


@dataclass(frozen=True, slots=True)
class StreamConfig:
    """Immutable configuration for StreamInput.

    Attributes:
        capacity: Initial ring buffer capacity in tokens (default: 5).
            The buffer grows on demand; this only sets the starting size.
        chunk_size: Bytes requested per read() on the byte source
            (default: 1024).

    Example:
        >>> config = StreamConfig(capacity=64, chunk_size=4096)
        >>> stream = StreamInput(reader, config=config)
    """

    capacity: int = DEFAULT_BUFFER_CAPACITY
    chunk_size: int = READ_CHUNK_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If capacity or chunk_size is not positive.
        """
        if self.capacity <= 0:
            msg = "capacity must be positive"
            raise ValueError(msg)
        if self.chunk_size <= 0:
            msg = "chunk_size must be positive"
            raise ValueError(msg)
