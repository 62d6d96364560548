"""Core utilities shared across the metadata, test-case and synthesis layers.

Exports:
    DepthGuard: Context manager for recursion depth limiting
    IncrementIdAllocator: Dense id allocator owned by one id series
    format_float: JavaScript literal of a double

Python 3.13+.
"""

from .depth_guard import DepthGuard
from .identity import IncrementIdAllocator
from .literals import format_float

__all__ = ["DepthGuard", "IncrementIdAllocator", "format_float"]
