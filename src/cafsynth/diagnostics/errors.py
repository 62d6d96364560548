"""cafsynth exception hierarchy with structured diagnostics.

All exceptions accept either a plain message or a Diagnostic object. When a
Diagnostic is given, the exception message is its formatted rendering and
the Diagnostic stays available on ``.diagnostic`` for tooling.

Hierarchy:
    CafError
    ├─ MetadataError (corrupt or incompatible metadata store)
    │  ├─ MetadataLoadError
    │  ├─ MetadataReferenceError
    │  └─ SignatureMismatchError
    ├─ TestCaseError (malformed value graph / call sequence)
    │  ├─ TestCaseLoadError
    │  └─ TestCaseReferenceError
    └─ SynthesisError (invalid synthesis input or protocol misuse)
       ├─ UnsupportedValueError
       ├─ UnsupportedCallShapeError
       ├─ SynthesisStateError
       ├─ SynthesisDepthError
       └─ UnknownTargetError

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class CafError(Exception):
    """Base exception for all cafsynth errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize CafError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class MetadataError(CafError):
    """An id, index or record required by the input is missing from the metadata store.

    Fatal: it means a test case was paired with an incompatible store. There
    is no fallback value; the caller has to fix the pairing.
    """


class MetadataLoadError(MetadataError):
    """The JSON description of a metadata store is structurally invalid."""


class MetadataReferenceError(MetadataError):
    """A function, constructor, type or signature id does not exist in the store."""


class SignatureMismatchError(MetadataError):
    """A call disagrees with the signature recorded for its callee.

    Only raised when synthesis runs with validation enabled.
    """


class TestCaseError(CafError):
    """The test case itself is malformed."""

    __test__ = False  # not a pytest test class


class TestCaseLoadError(TestCaseError):
    """The JSON description of a test case is structurally invalid."""


class TestCaseReferenceError(TestCaseError):
    """A placeholder or value reference points outside the test case."""


class SynthesisError(CafError):
    """The synthesis engine was given input or a call order it cannot handle."""


class UnsupportedValueError(SynthesisError):
    """A placeholder value reached constant synthesis.

    Placeholders only exist while a test case is constructed; they must be
    resolved to earlier call results before synthesis.
    """


class UnsupportedCallShapeError(SynthesisError):
    """A constructor call was requested together with an explicit receiver."""


class SynthesisStateError(SynthesisError):
    """The enter/synthesise/leave/get_code protocol was violated."""


class SynthesisDepthError(SynthesisError):
    """Array nesting exceeds the configured maximum depth."""


class UnknownTargetError(SynthesisError):
    """No emission strategy is registered under the requested target name."""
