"""Tests for IncrementIdAllocator and DepthGuard."""

from __future__ import annotations

import sys

import pytest
from hypothesis import given
from hypothesis import strategies as st

from cafsynth.core import DepthGuard, IncrementIdAllocator
from cafsynth.core.depth_guard import depth_clamp
from cafsynth.diagnostics import DiagnosticCode, SynthesisDepthError


class TestIncrementIdAllocator:
    """Dense id allocation."""

    @given(n=st.integers(min_value=0, max_value=200))
    def test_dense_sequence(self, n: int) -> None:
        """n calls return 0..n-1 in order."""
        alloc = IncrementIdAllocator()
        assert [alloc() for _ in range(n)] == list(range(n))
        assert alloc.count == n

    def test_peek_does_not_allocate(self) -> None:
        """peek() reports the next id without consuming it."""
        alloc = IncrementIdAllocator()
        assert alloc.peek() == 0
        assert alloc.peek() == 0
        assert alloc() == 0
        assert alloc.peek() == 1

    def test_start(self) -> None:
        """Allocation can start at an offset."""
        alloc = IncrementIdAllocator(start=10)
        assert alloc() == 10

    def test_negative_start_rejected(self) -> None:
        """Ids are never negative."""
        with pytest.raises(ValueError, match="start"):
            IncrementIdAllocator(start=-1)

    def test_allocators_are_independent(self) -> None:
        """Two allocators do not share state."""
        first, second = IncrementIdAllocator(), IncrementIdAllocator()
        first()
        first()
        assert second() == 0


class TestDepthGuard:
    """Depth limiting context manager."""

    def test_tracks_depth(self) -> None:
        """Depth rises on enter and falls on exit."""
        guard = DepthGuard(max_depth=3)
        with guard:
            assert guard.depth == 1
            with guard:
                assert guard.depth == 2
        assert guard.depth == 0

    def test_limit(self) -> None:
        """Entering beyond max_depth raises SynthesisDepthError."""
        guard = DepthGuard(max_depth=2)
        with guard, guard:
            with pytest.raises(SynthesisDepthError) as info:
                guard.__enter__()
        assert info.value.diagnostic is not None
        assert info.value.diagnostic.code is DiagnosticCode.MAX_DEPTH_EXCEEDED
        assert guard.depth == 0

    def test_exit_on_exception(self) -> None:
        """Depth is restored when the guarded block raises."""
        guard = DepthGuard(max_depth=5)
        with pytest.raises(RuntimeError), guard:
            raise RuntimeError
        assert guard.depth == 0

    def test_clamp(self) -> None:
        """Requests beyond the recursion budget are clamped."""
        limit = (sys.getrecursionlimit() - 50) // 2
        assert depth_clamp(10) == 10
        assert depth_clamp(10**9) == limit
        assert DepthGuard(max_depth=10**9).max_depth == limit
