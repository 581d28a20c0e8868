"""Tests for the cursor protocol (syntax/cursor.py CursorGuard).

Both backends are exercised through the same parametrized fixture: a
cursor must resolve exactly once, innermost first, and commit on scope
exit unless restored.

Python 3.13+.
"""

from __future__ import annotations

import pytest

from ravel.diagnostics import CursorStateError, DiagnosticCode
from ravel.syntax import CursorState, Input, MaterializedInput, Position, StreamInput


@pytest.fixture(params=["materialized", "stream"])
def make_input(request: pytest.FixtureRequest):
    """Factory building either backend over the same text."""

    def build(text: str) -> Input:
        if request.param == "materialized":
            return MaterializedInput(text)
        return StreamInput.from_bytes(text.encode())

    return build


# ============================================================================
# State Machine
# ============================================================================


class TestCursorStateMachine:
    """Test OPEN -> RESTORED / COMMITTED transitions."""

    def test_new_cursor_is_open(self, make_input) -> None:
        """cursor() returns an OPEN guard and counts it as live."""
        source = make_input("abc")
        guard = source.cursor()

        assert guard.state is CursorState.OPEN
        assert guard.is_open
        assert source.live_cursors == 1
        guard.commit()

    def test_snapshot_records_position(self, make_input) -> None:
        """The snapshot holds the Position at acquisition."""
        source = make_input("a\nb")
        source.next()
        source.next()

        with source.cursor() as cur:
            assert cur.snapshot.position == Position(2, 2, 1, 2)

    def test_restore_transitions(self, make_input) -> None:
        """restore() marks the guard RESTORED and releases it."""
        source = make_input("abc")
        with source.cursor() as cur:
            source.next()
            cur.restore()
            assert cur.state is CursorState.RESTORED
            assert source.live_cursors == 0

    def test_scope_exit_commits(self, make_input) -> None:
        """Leaving the block without restore() commits."""
        source = make_input("abc")
        with source.cursor() as cur:
            source.next()

        assert cur.state is CursorState.COMMITTED
        assert source.peek() == "b"

    def test_exception_exit_commits(self, make_input) -> None:
        """An exception leaving the block still resolves the cursor (commit)."""
        source = make_input("abc")
        with pytest.raises(RuntimeError), source.cursor() as cur:
            source.next()
            raise RuntimeError

        assert cur.state is CursorState.COMMITTED
        assert source.live_cursors == 0
        assert source.peek() == "b"

    def test_repr(self, make_input) -> None:
        """repr shows the snapshot position and state."""
        source = make_input("x")
        with source.cursor() as cur:
            assert repr(cur) == "CursorGuard(1:1, open)"


# ============================================================================
# Protocol Violations
# ============================================================================


class TestCursorViolations:
    """Test misuse detection."""

    def test_double_restore(self, make_input) -> None:
        """A cursor resolves exactly once."""
        source = make_input("abc")
        with source.cursor() as cur:
            cur.restore()
            with pytest.raises(CursorStateError) as exc_info:
                cur.restore()

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.CURSOR_ALREADY_RESOLVED
        assert "restored" in str(exc_info.value)

    def test_commit_after_restore(self, make_input) -> None:
        """commit() after restore() is a violation too."""
        source = make_input("abc")
        cur = source.cursor()
        cur.restore()

        with pytest.raises(CursorStateError, match="already resolved"):
            cur.commit()

    def test_outer_resolved_before_inner(self, make_input) -> None:
        """Resolving an outer cursor while an inner one is live fails."""
        source = make_input("abc")
        outer = source.cursor()
        inner = source.cursor()

        with pytest.raises(CursorStateError) as exc_info:
            outer.restore()

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.CURSOR_NOT_INNERMOST
        assert outer.is_open
        assert source.live_cursors == 2

        inner.commit()
        outer.commit()
        assert source.live_cursors == 0


# ============================================================================
# Nesting
# ============================================================================


class TestNestedCursors:
    """Test strictly nested speculation."""

    def test_inner_restore_outer_commit(self, make_input) -> None:
        """Inner restore rewinds to the inner snapshot only."""
        source = make_input("abcd")
        with source.cursor():
            source.next()
            with source.cursor() as inner:
                source.next()
                source.next()
                inner.restore()

        assert source.pos.offset == 1
        assert source.next() == "b"

    def test_outer_restore_undoes_committed_inner(self, make_input) -> None:
        """A committed inner region is still undone by an outer restore."""
        source = make_input("abcd")
        with source.cursor() as outer:
            source.next()
            with source.cursor():
                source.next()
            outer.restore()

        assert source.pos == Position()
        assert source.next() == "a"

    def test_deep_nesting(self, make_input) -> None:
        """Many nested cursors restore back to each snapshot in turn."""
        source = make_input("abcdefghij")
        guards = []
        for _ in range(10):
            guards.append(source.cursor())
            source.next()

        for depth, guard in reversed(list(enumerate(guards))):
            guard.restore()
            assert source.pos.offset == depth

        assert source.live_cursors == 0
        assert source.next() == "a"
