"""JavaScript spelling of numeric literals.

Shared by the emission strategies and the test-case listing so that a
double reads the same in generated code and in ``show`` output.
"""

import math

__all__ = ["format_float"]


def format_float(number: float) -> str:
    """Shortest round-trip literal of a double, with JS names for non-finite values."""
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    return repr(number)
