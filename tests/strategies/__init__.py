"""Hypothesis strategies for cafsynth property-based testing.

Strategies are organized by domain:

- metadata: value kinds, kind sets and function signatures
- values: identity-bearing value graphs built in a ValuePool

Usage:
    from tests.strategies import kind_sets, signatures
    from tests.strategies.values import value_graphs, js_strings

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - kind_sets, value_graphs, js_strings
"""

from .metadata import kind_sets, signature_lists, signatures, value_kinds
from .values import int32s, js_strings, value_graphs

__all__ = [
    "int32s",
    "js_strings",
    "kind_sets",
    "signature_lists",
    "signatures",
    "value_graphs",
    "value_kinds",
]
