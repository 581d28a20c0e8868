"""Depth limiting for recursive grammars.

Recursive grammars are built with lazy(), which re-enters the parser
tree on every nested construct. A DepthGuard bounds that nesting so
left recursion or deeply nested input fails with DepthLimitExceededError
instead of RecursionError.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from ravel.constants import MAX_DEPTH
from ravel.diagnostics import DepthLimitExceededError, ErrorTemplate

__all__ = ["DepthGuard", "depth_clamp"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DepthGuard:
    """Context manager for tracking and limiting recursion depth.

    Usage:
        guard = DepthGuard(max_depth=50)
        with guard:
            result = inner.parse(source)

    Mutability Note:
        Intentionally mutable (not frozen=True). current_depth is
        incremented on __enter__ and decremented on __exit__, so it is back
        to zero once the outermost parse returns.

    Attributes:
        max_depth: Maximum allowed depth (default: MAX_DEPTH)
        frames_per_level: Interpreter frames one guarded level uses, for clamping
        current_depth: Current recursion depth
    """

    max_depth: int = MAX_DEPTH
    frames_per_level: int = 1
    current_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        """Clamp max_depth against Python recursion limit."""
        self.max_depth = depth_clamp(self.max_depth, frames_per_level=self.frames_per_level)

    def __enter__(self) -> DepthGuard:
        """Enter guarded section, increment depth.

        Checks the limit BEFORE incrementing: __exit__ is not called when
        __enter__ raises, so incrementing first would leave current_depth
        permanently elevated.
        """
        if self.current_depth >= self.max_depth:
            raise DepthLimitExceededError(ErrorTemplate.depth_exceeded(self.max_depth))
        self.current_depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit guarded section, decrement depth."""
        self.current_depth -= 1

    @property
    def depth(self) -> int:
        """Current depth (alias for current_depth)."""
        return self.current_depth

    def is_exceeded(self) -> bool:
        """Check if depth limit has been reached."""
        return self.current_depth >= self.max_depth


def depth_clamp(requested_depth: int, reserve_frames: int = 50, frames_per_level: int = 1) -> int:
    """Clamp requested depth against Python recursion limit.

    The frames left after ``reserve_frames`` are shared by the nesting
    levels, each of which costs ``frames_per_level`` interpreter frames.

    Args:
        requested_depth: Desired maximum depth
        reserve_frames: Stack frames to reserve for call overhead (default: 50)
        frames_per_level: Interpreter frames one level of nesting uses (default: 1)

    Returns:
        Safe depth value, clamped if necessary

    Example:
        >>> depth_clamp(10)
        10
        >>> limit = sys.getrecursionlimit()
        >>> depth_clamp(limit, frames_per_level=10) == (limit - 50) // 10
        True
    """
    max_safe_depth = (sys.getrecursionlimit() - reserve_frames) // frames_per_level
    if requested_depth > max_safe_depth:
        logger.warning(
            "Requested depth %d exceeds Python recursion limit (%d) at %d frames per level. "
            "Clamping to %d to prevent RecursionError.",
            requested_depth,
            sys.getrecursionlimit(),
            frames_per_level,
            max_safe_depth,
        )
        return max_safe_depth
    return requested_depth
