"""Diagnostic system for cafsynth errors.

Provides structured error diagnostics with codes, hints and locations, plus
the exception hierarchy that carries them.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    CafError,
    MetadataError,
    MetadataLoadError,
    MetadataReferenceError,
    SignatureMismatchError,
    SynthesisDepthError,
    SynthesisError,
    SynthesisStateError,
    TestCaseError,
    TestCaseLoadError,
    TestCaseReferenceError,
    UnknownTargetError,
    UnsupportedCallShapeError,
    UnsupportedValueError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "CafError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "MetadataError",
    "MetadataLoadError",
    "MetadataReferenceError",
    "OutputFormat",
    "SignatureMismatchError",
    "SynthesisDepthError",
    "SynthesisError",
    "SynthesisStateError",
    "TestCaseError",
    "TestCaseLoadError",
    "TestCaseReferenceError",
    "UnknownTargetError",
    "UnsupportedCallShapeError",
    "UnsupportedValueError",
]
