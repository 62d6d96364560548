"""Tests for the target registry and whole-test-case synthesis.

Python 3.13+.
"""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from cafsynth.config import SynthesisConfig
from cafsynth.diagnostics import (
    DiagnosticCode,
    MetadataReferenceError,
    SignatureMismatchError,
    TestCaseReferenceError,
    UnknownTargetError,
    UnsupportedCallShapeError,
)
from cafsynth.enums import TargetKind
from cafsynth.metadata import FunctionSignature, MetadataStore, ValueKindSet
from cafsynth.synthesis import (
    ChromeStrategy,
    JavaScriptStrategy,
    NodejsStrategy,
    TestCaseSynthesiser,
    available_targets,
    create_builder,
    create_strategy,
    parse_target,
    synthesise_test_case,
)
from cafsynth.testcase import FunctionCall, TestCase, ValuePool, load_test_case


def _tc(document: dict[str, Any]) -> TestCase:
    return load_test_case(document)


class TestTargets:
    """Target registry."""

    def test_available(self) -> None:
        """All three targets are registered."""
        assert set(available_targets()) == {"js", "nodejs", "chrome"}

    @pytest.mark.parametrize(
        ("name", "strategy_type"),
        [
            ("js", JavaScriptStrategy),
            ("NodeJS", NodejsStrategy),
            (TargetKind.CHROME, ChromeStrategy),
        ],
    )
    def test_create_strategy(self, name: str, strategy_type: type) -> None:
        """Names are case-insensitive; enum members are accepted."""
        assert type(create_strategy(name, MetadataStore())) is strategy_type

    def test_unknown_target(self) -> None:
        """Unknown names raise UnknownTargetError."""
        with pytest.raises(UnknownTargetError) as info:
            parse_target("firefox")
        assert info.value.diagnostic is not None
        assert info.value.diagnostic.code is DiagnosticCode.UNKNOWN_TARGET

    def test_builder_gets_fresh_strategy(self) -> None:
        """Each builder owns its own strategy instance."""
        store = MetadataStore()
        config = SynthesisConfig(variable_prefix="x")
        a, b = create_builder("nodejs", store, config), create_builder("nodejs", store, config)
        assert a.strategy is not b.strategy
        assert a.config is config


class TestSynthesiser:
    """TestCaseSynthesiser and synthesise_test_case()."""

    def test_literal_arguments(self, sample_store: MetadataStore) -> None:
        """foo(5, "hi") end to end."""
        tc = _tc(
            {
                "values": [{"kind": "Integer", "value": 5}, {"kind": "String", "value": "hi"}],
                "calls": [{"function": 0, "args": [0, 1]}],
            }
        )
        assert synthesise_test_case(tc, sample_store) == (
            'let v0 = 5;\nlet v1 = "hi";\nlet v2 = foo(v0, v1);\n'
        )

    def test_shared_value_defined_once(self, sample_store: MetadataStore) -> None:
        """A value used by several calls is defined before its first use only."""
        tc = _tc(
            {
                "values": [{"kind": "String", "value": "/a"}],
                "calls": [
                    {"function": 1, "args": [0]},
                    {"function": 2, "args": [0, 0]},
                ],
            }
        )
        code = synthesise_test_case(tc, sample_store, "nodejs")
        assert code == (
            'let v0 = "/a";\n'
            'const fs = require("fs");\n'
            "let v1 = fs.readFileSync(v0);\n"
            "let v2 = fs.writeFileSync(v0, v0);\n"
        )

    def test_placeholder_names_earlier_result(self, sample_store: MetadataStore) -> None:
        """Placeholders resolve to earlier call results, receivers use the member name."""
        tc = _tc(
            {
                "values": [
                    {"kind": "Array"},
                    {"kind": "Placeholder", "index": 0},
                    {"kind": "String", "value": "x"},
                ],
                "calls": [
                    {"function": 5, "args": [0]},
                    {"function": 4, "this": 1, "args": [2]},
                    {"function": 5, "args": [1]},
                ],
            }
        )
        assert synthesise_test_case(tc, sample_store) == (
            "let v0 = [];\n"
            "let v1 = print(v0);\n"
            'let v2 = "x";\n'
            "let v3 = v1.write(v2);\n"
            "let v4 = print(v1);\n"
        )

    def test_constructor_call(self, sample_store: MetadataStore) -> None:
        """Constructor calls resolve the constructor's name and use new."""
        tc = _tc(
            {
                "values": [{"kind": "Integer", "value": 16}],
                "calls": [{"function": 0, "ctor": True, "args": [0]}],
            }
        )
        assert synthesise_test_case(tc, sample_store) == "let v0 = 16;\nlet v1 = new Buffer(v0);\n"

    def test_constructor_with_receiver(self, sample_store: MetadataStore) -> None:
        """new on a receiver is rejected."""
        tc = _tc(
            {
                "values": [{"kind": "Array"}],
                "calls": [{"function": 0, "ctor": True, "this": 0}],
            }
        )
        with pytest.raises(UnsupportedCallShapeError):
            synthesise_test_case(tc, sample_store)

    @pytest.mark.parametrize("index", [0, 1, 5])
    def test_placeholder_out_of_range(self, sample_store: MetadataStore, index: int) -> None:
        """Placeholders may only name calls that come before."""
        tc = _tc(
            {
                "values": [{"kind": "Placeholder", "index": index}],
                "calls": [{"function": 5}, {"function": 5, "args": [0]}],
            }
        )
        if index == 0:
            assert synthesise_test_case(tc, sample_store).endswith("let v1 = print(v0);\n")
            return
        with pytest.raises(TestCaseReferenceError):
            synthesise_test_case(tc, sample_store)

    def test_unknown_function(self, sample_store: MetadataStore) -> None:
        """Calls to ids missing from the store are reported."""
        tc = TestCase([FunctionCall(function_id=77)])
        with pytest.raises(MetadataReferenceError):
            synthesise_test_case(tc, sample_store)

    def test_chrome_target(self, sample_store: MetadataStore) -> None:
        """The Chrome target wraps the same statements."""
        tc = TestCase([FunctionCall(function_id=5)])
        code = synthesise_test_case(tc, sample_store, TargetKind.CHROME)
        assert code == ".open about:blank\nlet v0 = print();\nclose();\n"

    def test_synthesiser_object(self, sample_store: MetadataStore) -> None:
        """The driver can be used with an explicitly built builder."""
        synthesiser = TestCaseSynthesiser(sample_store, create_builder("js", sample_store))
        synthesiser.synthesise(TestCase([FunctionCall(function_id=5)]))
        assert synthesiser.get_code() == "let v0 = print();\n"

    @given(count=st.integers(min_value=0, max_value=10))
    def test_one_result_per_call(self, count: int) -> None:
        """Every call yields exactly one statement under the plain target."""
        store = MetadataStore()
        signature_id = store.add_signature(FunctionSignature(ValueKindSet.create_full()))
        store.add_function("gc", signature_id)
        tc = TestCase([FunctionCall(function_id=0) for _ in range(count)])
        event(f"calls={count}")
        lines = synthesise_test_case(tc, store).splitlines()
        assert lines == [f"let v{i} = gc();" for i in range(count)]


class TestValidation:
    """Signature checks with validate=True."""

    def test_valid_calls_pass(self, sample_store: MetadataStore) -> None:
        """Calls matching their signatures synthesise normally."""
        tc = _tc(
            {
                "values": [
                    {"kind": "String", "value": "a"},
                    {"kind": "Array"},
                    {"kind": "Placeholder", "index": 0},
                ],
                "calls": [
                    {"function": 3, "args": [0, 0]},
                    {"function": 4, "this": 1, "args": [0]},
                    {"function": 5, "args": [2]},
                ],
            }
        )
        assert synthesise_test_case(tc, sample_store, validate=True).count("\n") == 5

    @pytest.mark.parametrize(
        ("document", "code"),
        [
            (
                {"values": [{"kind": "String", "value": "a"}], "calls": [{"function": 3, "args": [0]}]},
                DiagnosticCode.ARGUMENT_COUNT_MISMATCH,
            ),
            (
                {
                    "values": [{"kind": "Integer", "value": 1}],
                    "calls": [{"function": 1, "args": [0]}],
                },
                DiagnosticCode.ARGUMENT_KIND_MISMATCH,
            ),
            (
                {
                    "values": [{"kind": "Null"}, {"kind": "String", "value": "a"}],
                    "calls": [{"function": 4, "this": 0, "args": [1]}],
                },
                DiagnosticCode.RECEIVER_KIND_MISMATCH,
            ),
            (
                {
                    "values": [{"kind": "String", "value": "16"}],
                    "calls": [{"function": 0, "ctor": True, "args": [0]}],
                },
                DiagnosticCode.ARGUMENT_KIND_MISMATCH,
            ),
        ],
    )
    def test_mismatches(
        self, sample_store: MetadataStore, document: dict[str, Any], code: DiagnosticCode
    ) -> None:
        """Each kind of signature violation has its own code."""
        with pytest.raises(SignatureMismatchError) as info:
            synthesise_test_case(_tc(document), sample_store, validate=True)
        assert info.value.diagnostic is not None
        assert info.value.diagnostic.code is code

    def test_without_validation_mismatch_is_emitted(self, sample_store: MetadataStore) -> None:
        """Validation is opt-in; the fuzzer may call APIs with any values."""
        tc = _tc(
            {
                "values": [{"kind": "Integer", "value": 1}],
                "calls": [{"function": 1, "args": [0]}],
            }
        )
        assert synthesise_test_case(tc, sample_store).endswith("fs.readFileSync(v0);\n")

    def test_placeholder_receiver_not_checked(self, sample_store: MetadataStore) -> None:
        """Call results have no static kind."""
        pool = ValuePool()
        tc = TestCase(
            [
                FunctionCall(5, (pool.create_null(),)),
                FunctionCall(4, (pool.create_string("a"),), this=pool.create_placeholder(0)),
            ]
        )
        code = synthesise_test_case(tc, sample_store, validate=True)
        assert code.endswith("let v3 = v1.write(v2);\n")
