"""Explicit id allocators.

Every id series (function ids, signature ids, value node ids, variable
numbers) is drawn from its own allocator object owned by the component that
needs it. There are no process-wide counters, so sequences are
deterministic per owner and can be tested in isolation.

Python 3.13+. Zero external dependencies.
"""

__all__ = ["IncrementIdAllocator"]


class IncrementIdAllocator:
    """Dense, strictly increasing id allocator.

    Calling the allocator returns the next id: 0, 1, 2, ...

    Example:
        >>> alloc = IncrementIdAllocator()
        >>> alloc(), alloc(), alloc()
        (0, 1, 2)
        >>> alloc.count
        3
    """

    __slots__ = ("_next",)

    def __init__(self, start: int = 0) -> None:
        """Initialize allocator.

        Args:
            start: First id to hand out (default: 0)
        """
        if start < 0:
            msg = f"start must be >= 0, got {start}"
            raise ValueError(msg)
        self._next = start

    def __call__(self) -> int:
        """Allocate the next id."""
        allocated = self._next
        self._next += 1
        return allocated

    def peek(self) -> int:
        """Return the id the next call will allocate, without allocating it."""
        return self._next

    @property
    def count(self) -> int:
        """Number of ids handed out so far (for allocators starting at 0)."""
        return self._next

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"IncrementIdAllocator(next={self._next})"
