"""cafsynth - JavaScript test-case synthesis for API fuzzing.

Compiles fuzzer test cases (typed, identity-bearing value graphs plus a
sequence of API calls) into JavaScript programs for a bare engine shell,
Node.js or headless Chrome. A read-only metadata store describes the
target's exported functions, constructors and their signatures.

Public API:
    load_store - Build a MetadataStore from its JSON description
    load_test_case - Build a TestCase from its JSON description
    synthesise_test_case - Test case to program text, in one call
    create_builder - Low-level synthesis session for a target
    SynthesisConfig - Engine and target configuration
    TargetKind - js / nodejs / chrome

Exceptions:
    CafError - Base exception class
    MetadataError - Test case and metadata store disagree
    TestCaseError - Malformed test case
    SynthesisError - Unsupported value, call shape or protocol misuse

Submodules:
    cafsynth.metadata - Kind sets, signatures, callback registry, store
    cafsynth.testcase - Value nodes, ValuePool, FunctionCall, TestCase
    cafsynth.synthesis - SynthesisBuilder and the target strategies
    cafsynth.diagnostics - Diagnostic codes, templates and formatter
"""

from .config import SynthesisConfig
from .diagnostics import CafError, MetadataError, SynthesisError, TestCaseError
from .enums import TargetKind, ValueKind
from .metadata import FunctionSignature, MetadataStore, ValueKindSet, load_store, load_store_file
from .synthesis import create_builder, synthesise_test_case
from .testcase import FunctionCall, TestCase, ValuePool, load_test_case, load_test_case_file

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("cafsynth")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CafError",
    "FunctionCall",
    "FunctionSignature",
    "MetadataError",
    "MetadataStore",
    "SynthesisConfig",
    "SynthesisError",
    "TargetKind",
    "TestCase",
    "TestCaseError",
    "ValueKind",
    "ValueKindSet",
    "ValuePool",
    "__version__",
    "create_builder",
    "load_store",
    "load_store_file",
    "load_test_case",
    "load_test_case_file",
    "synthesise_test_case",
]
