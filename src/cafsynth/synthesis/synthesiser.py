"""Drive a whole test case through a synthesis session.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging

from cafsynth.config import SynthesisConfig
from cafsynth.constants import MODULE_SEPARATOR
from cafsynth.diagnostics import ErrorTemplate, SignatureMismatchError, TestCaseReferenceError
from cafsynth.enums import TargetKind
from cafsynth.metadata import FunctionSignature, MetadataStore
from cafsynth.testcase import FunctionCall, PlaceholderValue, TestCase, Value

from .builder import SynthesisBuilder
from .targets import create_builder
from .variable import SynthesisVariable

__all__ = ["TestCaseSynthesiser", "synthesise_test_case"]

logger = logging.getLogger(__name__)


class TestCaseSynthesiser:
    """Synthesise every call of a test case, in order, through one builder.

    Receivers and arguments are synthesised as constants (memoized by node
    identity) right before the call that uses them. Placeholders resolve to
    the variable bound to the result of the call they name.

    Usage:
        synthesiser = TestCaseSynthesiser(store, create_builder("js", store))
        synthesiser.synthesise(tc)
        code = synthesiser.get_code()
    """

    __test__ = False  # not a pytest test class

    def __init__(self, store: MetadataStore, builder: SynthesisBuilder) -> None:
        self._store = store
        self._builder = builder
        self._results: list[SynthesisVariable] = []

    def synthesise(self, tc: TestCase, *, validate: bool = False) -> None:
        """Run the full session protocol for ``tc``.

        Args:
            tc: Test case to synthesise
            validate: Check every call against its callee's signature first

        Raises:
            MetadataReferenceError: If a call or function value names an unknown id
            SignatureMismatchError: If validate is set and a call breaks its signature
            TestCaseReferenceError: If a placeholder does not name an earlier call
            SynthesisError: If the builder rejects a value or call shape
        """
        self._builder.enter_main_function()
        for index, call in enumerate(tc):
            function_name = self._callee_name(call)
            if validate:
                self._validate_call(index, call, function_name)

            receiver = None
            if call.this is not None:
                receiver = self._synthesis_value(call.this, index)
                function_name = function_name.rsplit(MODULE_SEPARATOR, 1)[-1]
            args = [self._synthesis_value(arg, index) for arg in call.args]

            self._results.append(
                self._builder.synthesis_function_call(
                    function_name, call.is_ctor_call, receiver, args
                )
            )
        self._builder.leave_function()
        logger.info("Synthesised test case with %d call(s)", len(tc))

    def get_code(self) -> str:
        """Program text; valid once, after synthesise()."""
        return self._builder.get_code()

    def _callee_name(self, call: FunctionCall) -> str:
        if call.is_ctor_call:
            return self._store.get_constructor(call.function_id).name
        return self._store.get_function(call.function_id).name

    def _callee_signature(self, call: FunctionCall) -> FunctionSignature:
        if call.is_ctor_call:
            return self._store.get_constructor_signature(call.function_id)
        return self._store.get_function_signature(call.function_id)

    def _synthesis_value(self, value: Value, call_index: int) -> SynthesisVariable:
        if isinstance(value, PlaceholderValue):
            if value.index >= call_index:
                raise TestCaseReferenceError(
                    ErrorTemplate.placeholder_out_of_range(value.index, call_index)
                )
            return self._results[value.index]
        return self._builder.synthesis_constant(value)

    def _validate_call(self, index: int, call: FunctionCall, function_name: str) -> None:
        signature = self._callee_signature(call)
        location = f"call #{index}"

        if call.this is not None and not isinstance(call.this, PlaceholderValue):
            this_kinds = signature.this_kinds
            if call.this.kind not in this_kinds:
                raise SignatureMismatchError(
                    ErrorTemplate.receiver_kind_mismatch(
                        function_name, this_kinds.names(), call.this.kind.display_name, location
                    )
                )

        if call.arg_count != signature.param_count:
            raise SignatureMismatchError(
                ErrorTemplate.argument_count_mismatch(
                    function_name, signature.param_count, call.arg_count, location
                )
            )
        for arg_index, arg in enumerate(call.args):
            # Call results are opaque; their kind is unknown until run time.
            if isinstance(arg, PlaceholderValue):
                continue
            allowed = signature.get_param_value_kinds(arg_index)
            if arg.kind not in allowed:
                raise SignatureMismatchError(
                    ErrorTemplate.argument_kind_mismatch(
                        function_name, arg_index, allowed.names(), arg.kind.display_name, location
                    )
                )


def synthesise_test_case(
    tc: TestCase,
    store: MetadataStore,
    target: TargetKind | str = TargetKind.JS,
    config: SynthesisConfig | None = None,
    *,
    validate: bool = False,
) -> str:
    """Synthesise ``tc`` for ``target`` and return the program text.

    Raises:
        UnknownTargetError: If target names no registered strategy
        CafError: Any error raised by TestCaseSynthesiser.synthesise()
    """
    synthesiser = TestCaseSynthesiser(store, create_builder(target, store, config))
    synthesiser.synthesise(tc, validate=validate)
    return synthesiser.get_code()
