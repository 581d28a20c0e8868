"""Shared constants for ravel.

Centralized configuration constants used across the stream and syntax
packages. Placing constants here avoids circular imports and provides a
single source of truth.

Constants are grouped by domain:
- Buffer limits: ring buffer sizing for streaming input
- Decoder settings: byte reader chunking and lossy substitution
- Depth limits: recursion protection for recursive grammars

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Buffer limits
    "DEFAULT_BUFFER_CAPACITY",
    "RING_BUFFER_GROWTH_THRESHOLD",
    # Decoder settings
    "READ_CHUNK_SIZE",
    "REPLACEMENT_CHARACTER",
    # Depth limits
    "MAX_DEPTH",
    "LAZY_FRAMES_PER_LEVEL",
]

# ============================================================================
# BUFFER LIMITS
# ============================================================================

# Initial capacity of the ring buffer owned by a StreamInput.
# Small on purpose: the buffer only holds tokens an open cursor may replay,
# and it grows on demand.
DEFAULT_BUFFER_CAPACITY: int = 5

# Below this capacity the ring buffer doubles when full; at or above it the
# buffer grows by a quarter of its current capacity.
RING_BUFFER_GROWTH_THRESHOLD: int = 1024

# ============================================================================
# DECODER SETTINGS
# ============================================================================

# Number of bytes requested from the underlying reader per read() call.
READ_CHUNK_SIZE: int = 1024

# Substituted for every malformed byte sequence by the lossy decoder.
REPLACEMENT_CHARACTER: str = "�"

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting of lazy() parsers within a single parse.
# Sized so MAX_DEPTH * LAZY_FRAMES_PER_LEVEL stays under the default
# recursion limit of 1000 with room for the caller's own frames.
MAX_DEPTH: int = 40

# Interpreter frames assumed per lazy() nesting level when clamping the
# depth limit. An expression grammar built from chainl1, alt and between
# uses about 14 frames per level.
LAZY_FRAMES_PER_LEVEL: int = 20
