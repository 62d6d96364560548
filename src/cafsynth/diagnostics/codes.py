"""Diagnostic codes and data structures.

Defines error codes and the structured diagnostic carried by every
cafsynth exception.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Metadata errors (corrupt or incompatible metadata store)
        2000-2999: Test-case errors (malformed value graph or call sequence)
        3000-3999: Synthesis errors (invalid input or protocol misuse)
    """

    # Metadata errors (1000-1999)
    FUNCTION_NOT_FOUND = 1001
    CONSTRUCTOR_NOT_FOUND = 1002
    TYPE_NOT_FOUND = 1003
    SIGNATURE_NOT_FOUND = 1004
    METADATA_MALFORMED = 1005
    METADATA_ID_MISMATCH = 1006
    UNKNOWN_VALUE_KIND = 1007
    ARGUMENT_COUNT_MISMATCH = 1008
    ARGUMENT_KIND_MISMATCH = 1009
    RECEIVER_KIND_MISMATCH = 1010

    # Test-case errors (2000-2999)
    TEST_CASE_MALFORMED = 2001
    VALUE_REFERENCE_INVALID = 2002
    PLACEHOLDER_OUT_OF_RANGE = 2003

    # Synthesis errors (3000-3999)
    PLACEHOLDER_NOT_SYNTHESISABLE = 3001
    CONSTRUCTOR_WITH_RECEIVER = 3002
    PROTOCOL_VIOLATION = 3003
    MAX_DEPTH_EXCEEDED = 3004
    UNKNOWN_TARGET = 3005


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        location: Where in the input the problem was found (e.g. "call #3")
        function_name: Export name of the function involved, if any
        expected: Expected kinds/shape, rendered for humans
        received: Received kind/shape, rendered for humans
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    location: str | None = None
    function_name: str | None = None
    expected: str | None = None
    received: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like a compiler error.

        Example output:
            error[FUNCTION_NOT_FOUND]: Function id 42 not found in metadata store
              = help: The test case was produced against a different metadata store

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
