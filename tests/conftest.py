"""Pytest configuration for the cafsynth test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: CI runs with 50 examples (fast feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- HYPOTHESIS_PROFILE env var -> explicit override
- CI=true environment variable -> "ci" profile
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/

Fuzzing Test Separation:
Tests marked with @pytest.mark.fuzz are excluded from normal test runs.
These are intensive property tests designed for fuzzing, not unit testing.
Run them via: pytest -m fuzz
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from cafsynth.enums import ValueKind
from cafsynth.metadata import FunctionSignature, MetadataStore, ValueKindSet

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)

settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)


def _detect_profile() -> str:
    """Pick the Hypothesis profile for this run.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var
    3. Default to "dev"
    """
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# FUZZING TEST SEPARATION
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register the 'fuzz' marker for intensive property tests."""
    config.addinivalue_line(
        "markers",
        "fuzz: Intensive property tests for fuzzing (excluded from normal test runs)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip fuzz-marked tests unless explicitly requested.

    Behavior:
    - Normal test run (pytest tests/): Fuzz tests are SKIPPED
    - Explicit fuzz run (pytest -m fuzz): Fuzz tests run, others skipped
    """
    marker_expr = config.getoption("-m", default="")
    if "fuzz" in str(marker_expr):
        return

    skip_fuzz = pytest.mark.skip(reason="Fuzzing test - run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


# =============================================================================
# SHARED FIXTURES
# =============================================================================


def _kinds(*kinds: ValueKind) -> ValueKindSet:
    return ValueKindSet.from_kinds(kinds)


@pytest.fixture
def sample_store() -> MetadataStore:
    """Published store used across synthesis tests.

    Functions (id: name):
        0: foo            (any, any)
        1: fs.readFileSync (String)
        2: fs.writeFileSync (String, String)
        3: path.join      (String, String)
        4: Buffer.prototype.write (receiver Array/Function, String)
        5: print          (any)
    Types / constructors:
        type 0 Buffer, constructor 0 "Buffer" (Integer)
    """
    store = MetadataStore()
    full = ValueKindSet.create_full()
    string = _kinds(ValueKind.STRING)

    any_two = FunctionSignature(full.copy())
    any_two.add_param_kinds(full.copy())
    any_two.add_param_kinds(full.copy())
    sig_any_two = store.add_signature(any_two)

    one_string = FunctionSignature(full.copy())
    one_string.add_param_kinds(string.copy())
    sig_one_string = store.add_signature(one_string)

    two_strings = FunctionSignature(full.copy())
    two_strings.add_param_kinds(string.copy())
    two_strings.add_param_kinds(string.copy())
    sig_two_strings = store.add_signature(two_strings)

    method = FunctionSignature(_kinds(ValueKind.ARRAY, ValueKind.FUNCTION))
    method.add_param_kinds(string.copy())
    sig_method = store.add_signature(method)

    one_any = FunctionSignature(full.copy())
    one_any.add_param_kinds(full.copy())
    sig_one_any = store.add_signature(one_any)

    ctor = FunctionSignature(_kinds(ValueKind.UNDEFINED))
    ctor.add_param_kinds(_kinds(ValueKind.INTEGER))
    sig_ctor = store.add_signature(ctor)

    store.add_function("foo", sig_any_two)
    store.add_function("fs.readFileSync", sig_one_string)
    store.add_function("fs.writeFileSync", sig_two_strings)
    store.add_function("path.join", sig_two_strings)
    store.add_function("Buffer.prototype.write", sig_method)
    store.add_function("print", sig_one_any)

    buffer_type = store.add_type("Buffer")
    store.add_constructor(buffer_type.id, sig_ctor)

    store.publish()
    return store
