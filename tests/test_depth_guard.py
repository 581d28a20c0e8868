"""Tests for core/depth_guard.py.

Tests the DepthGuard context manager and depth_clamp(), with Hypothesis
for property-based testing.

Python 3.13+.
"""

from __future__ import annotations

import doctest
import logging
import sys

import pytest
from hypothesis import event, given, settings
from hypothesis import strategies as st

from ravel.constants import LAZY_FRAMES_PER_LEVEL, MAX_DEPTH
from ravel.core import DepthGuard, depth_clamp
from ravel.core import depth_guard as depth_guard_module
from ravel.diagnostics import DepthLimitExceededError, DiagnosticCode

# ============================================================================
# Construction
# ============================================================================


class TestDepthGuardConstruction:
    """Test DepthGuard construction and defaults."""

    def test_default_construction(self) -> None:
        """DepthGuard uses MAX_DEPTH by default."""
        guard = DepthGuard()

        assert guard.max_depth == MAX_DEPTH
        assert guard.current_depth == 0
        assert guard.depth == 0

    def test_max_depth_constant(self) -> None:
        """MAX_DEPTH fits the default recursion limit at LAZY_FRAMES_PER_LEVEL."""
        assert MAX_DEPTH == 40
        assert MAX_DEPTH * LAZY_FRAMES_PER_LEVEL + 50 < 1000

    def test_post_init_clamps_max_depth(self) -> None:
        """__post_init__ clamps max_depth against the recursion limit."""
        limit = sys.getrecursionlimit()
        guard = DepthGuard(max_depth=limit + 1000)

        assert guard.max_depth == limit - 50


# ============================================================================
# Context Manager
# ============================================================================


class TestDepthGuardContextManager:
    """Test DepthGuard as context manager."""

    def test_nested_entries_count(self) -> None:
        """Nested entries increment and exits decrement."""
        guard = DepthGuard(max_depth=10)

        with guard:
            assert guard.current_depth == 1
            with guard:
                assert guard.current_depth == 2

        assert guard.current_depth == 0

    def test_raises_when_exceeded(self) -> None:
        """Entering past max_depth raises DepthLimitExceededError."""
        guard = DepthGuard(max_depth=3)

        with guard, guard, guard:  # noqa: SIM117
            assert guard.is_exceeded()
            with pytest.raises(DepthLimitExceededError) as exc_info:
                with guard:
                    pass

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.MAX_DEPTH_EXCEEDED
        assert "(3)" in str(exc_info.value)

    def test_depth_restored_on_error(self) -> None:
        """Depth is restored even if an exception leaves the block."""
        guard = DepthGuard(max_depth=10)

        with guard:
            with pytest.raises(ValueError, match="boom"), guard:
                raise ValueError("boom")
            assert guard.current_depth == 1

        assert guard.current_depth == 0

    def test_failed_enter_does_not_increment(self) -> None:
        """current_depth is unchanged when __enter__ raises."""
        guard = DepthGuard(max_depth=2)

        with guard, guard:
            with pytest.raises(DepthLimitExceededError), guard:
                pass
            assert guard.current_depth == 2

        assert guard.current_depth == 0

    def test_returns_self(self) -> None:
        """__enter__ returns self for 'as' binding."""
        guard = DepthGuard()

        with guard as g:
            assert g is guard


# ============================================================================
# depth_clamp
# ============================================================================


class TestDepthClamp:
    """Test depth_clamp()."""

    def test_safe_value_unchanged(self) -> None:
        """Values below the safe maximum pass through."""
        assert depth_clamp(10) == 10

    def test_unsafe_value_clamped_and_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Values above the recursion limit are clamped with a warning."""
        limit = sys.getrecursionlimit()

        with caplog.at_level(logging.WARNING, logger="ravel.core.depth_guard"):
            assert depth_clamp(limit * 2) == limit - 50

        assert "Clamping" in caplog.text

    def test_frames_per_level_divides_budget(self, caplog: pytest.LogCaptureFixture) -> None:
        """Each level costs frames_per_level frames of the recursion budget."""
        limit = sys.getrecursionlimit()

        with caplog.at_level(logging.WARNING, logger="ravel.core.depth_guard"):
            assert depth_clamp(limit, frames_per_level=20) == (limit - 50) // 20

        assert "20 frames per level" in caplog.text

    def test_guard_clamps_with_frames_per_level(self) -> None:
        """DepthGuard passes its frame cost to depth_clamp."""
        limit = sys.getrecursionlimit()
        guard = DepthGuard(max_depth=limit, frames_per_level=LAZY_FRAMES_PER_LEVEL)

        assert guard.max_depth == (limit - 50) // LAZY_FRAMES_PER_LEVEL
        assert DepthGuard(frames_per_level=LAZY_FRAMES_PER_LEVEL).max_depth == MAX_DEPTH

    def test_docstring_examples_keep_recursion_limit(self) -> None:
        """The module's examples pass and leave the interpreter limit alone."""
        limit = sys.getrecursionlimit()

        results = doctest.testmod(depth_guard_module)

        assert results.failed == 0
        assert results.attempted > 0
        assert sys.getrecursionlimit() == limit

    @given(requested=st.integers(min_value=1, max_value=100_000))
    @settings(max_examples=100)
    def test_clamp_never_exceeds_limit(self, requested: int) -> None:
        """PROPERTY: the clamped value never exceeds limit - reserve."""
        result = depth_clamp(requested)
        event(f"clamped={result != requested}")

        assert result <= max(requested, 0)
        assert result <= sys.getrecursionlimit() - 50
