"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable

from .codes import Diagnostic, DiagnosticCode


def _join_names(names: Iterable[str]) -> str:
    rendered = ", ".join(names)
    return rendered or "(none)"


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Every factory returns a Diagnostic that the caller wraps in the matching
    exception class.
    """

    _INCOMPATIBLE_STORE_HINT = (
        "The test case was probably produced against a different metadata store"
    )

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @staticmethod
    def function_not_found(function_id: int) -> Diagnostic:
        """Function id not present in the metadata store.

        Args:
            function_id: The function id that was looked up

        Returns:
            Diagnostic for FUNCTION_NOT_FOUND
        """
        msg = f"Function id {function_id} not found in metadata store"
        return Diagnostic(
            code=DiagnosticCode.FUNCTION_NOT_FOUND,
            message=msg,
            hint=ErrorTemplate._INCOMPATIBLE_STORE_HINT,
        )

    @staticmethod
    def constructor_not_found(constructor_id: int) -> Diagnostic:
        """Constructor id not present in the metadata store."""
        msg = f"Constructor id {constructor_id} not found in metadata store"
        return Diagnostic(
            code=DiagnosticCode.CONSTRUCTOR_NOT_FOUND,
            message=msg,
            hint=ErrorTemplate._INCOMPATIBLE_STORE_HINT,
        )

    @staticmethod
    def type_not_found(type_id: int) -> Diagnostic:
        """Type id not present in the metadata store."""
        msg = f"Type id {type_id} not found in metadata store"
        return Diagnostic(
            code=DiagnosticCode.TYPE_NOT_FOUND,
            message=msg,
            hint=ErrorTemplate._INCOMPATIBLE_STORE_HINT,
        )

    @staticmethod
    def signature_not_found(signature_id: int) -> Diagnostic:
        """Signature id not present in the metadata store."""
        msg = f"Signature id {signature_id} not found in metadata store"
        return Diagnostic(
            code=DiagnosticCode.SIGNATURE_NOT_FOUND,
            message=msg,
            hint="Signatures must be declared before the records that use them",
        )

    @staticmethod
    def metadata_malformed(location: str, detail: str) -> Diagnostic:
        """Metadata JSON does not have the expected structure.

        Args:
            location: JSON path of the offending element (e.g. "functions[3]")
            detail: What is wrong with it

        Returns:
            Diagnostic for METADATA_MALFORMED
        """
        msg = f"Malformed metadata at {location}: {detail}"
        return Diagnostic(
            code=DiagnosticCode.METADATA_MALFORMED,
            message=msg,
            location=location,
        )

    @staticmethod
    def metadata_id_mismatch(series: str, expected: int, actual: int) -> Diagnostic:
        """Explicit record id breaks the dense id sequence of its series."""
        msg = f"Non-dense {series} id: expected {expected}, got {actual}"
        return Diagnostic(
            code=DiagnosticCode.METADATA_ID_MISMATCH,
            message=msg,
            expected=str(expected),
            received=str(actual),
            hint="Record ids must be 0, 1, 2, ... in declaration order",
        )

    @staticmethod
    def unknown_value_kind(location: str, name: object) -> Diagnostic:
        """Kind name in metadata or test case is not a ValueKind."""
        msg = f"Unknown value kind {name!r} at {location}"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_VALUE_KIND,
            message=msg,
            location=location,
            hint="Valid kinds: Undefined, Null, Boolean, String, Function, Integer, Float, Array",
        )

    @staticmethod
    def argument_count_mismatch(
        function_name: str, expected: int, actual: int, location: str
    ) -> Diagnostic:
        """Call passes a different number of arguments than the signature declares."""
        msg = f"Call to '{function_name}' passes {actual} argument(s), signature declares {expected}"
        return Diagnostic(
            code=DiagnosticCode.ARGUMENT_COUNT_MISMATCH,
            message=msg,
            location=location,
            function_name=function_name,
            expected=str(expected),
            received=str(actual),
        )

    @staticmethod
    def argument_kind_mismatch(
        function_name: str,
        index: int,
        expected: Iterable[str],
        received: str,
        location: str,
    ) -> Diagnostic:
        """Argument kind is not allowed at its parameter position."""
        msg = f"Argument {index} of '{function_name}' has kind {received}"
        return Diagnostic(
            code=DiagnosticCode.ARGUMENT_KIND_MISMATCH,
            message=msg,
            location=location,
            function_name=function_name,
            expected=_join_names(expected),
            received=received,
        )

    @staticmethod
    def receiver_kind_mismatch(
        function_name: str,
        expected: Iterable[str],
        received: str,
        location: str,
    ) -> Diagnostic:
        """Receiver kind is not allowed by the signature's this-kinds."""
        msg = f"Receiver of '{function_name}' has kind {received}"
        return Diagnostic(
            code=DiagnosticCode.RECEIVER_KIND_MISMATCH,
            message=msg,
            location=location,
            function_name=function_name,
            expected=_join_names(expected),
            received=received,
        )

    # ------------------------------------------------------------------
    # Test cases
    # ------------------------------------------------------------------

    @staticmethod
    def test_case_malformed(location: str, detail: str) -> Diagnostic:
        """Test-case JSON does not have the expected structure."""
        msg = f"Malformed test case at {location}: {detail}"
        return Diagnostic(
            code=DiagnosticCode.TEST_CASE_MALFORMED,
            message=msg,
            location=location,
        )

    @staticmethod
    def value_reference_invalid(location: str, index: object, available: int) -> Diagnostic:
        """Value reference does not name an already-defined value."""
        msg = f"Value reference {index!r} at {location} does not name one of {available} earlier values"
        return Diagnostic(
            code=DiagnosticCode.VALUE_REFERENCE_INVALID,
            message=msg,
            location=location,
            hint="Array elements and call arguments must reference values declared before them",
        )

    @staticmethod
    def placeholder_out_of_range(index: int, call_index: int) -> Diagnostic:
        """Placeholder refers to a call that has not produced a result yet."""
        msg = f"Placeholder #{index} used by call #{call_index} does not name an earlier call"
        return Diagnostic(
            code=DiagnosticCode.PLACEHOLDER_OUT_OF_RANGE,
            message=msg,
            location=f"call #{call_index}",
            hint="Placeholders may only reference results of preceding calls",
        )

    # ------------------------------------------------------------------
    # Synthesis
    # ------------------------------------------------------------------

    @staticmethod
    def placeholder_not_synthesisable(node_id: int) -> Diagnostic:
        """Placeholder value handed to constant synthesis."""
        msg = f"Cannot synthesise placeholder value (node {node_id}) as a constant"
        return Diagnostic(
            code=DiagnosticCode.PLACEHOLDER_NOT_SYNTHESISABLE,
            message=msg,
            hint="Resolve placeholders to earlier call results before synthesis",
        )

    @staticmethod
    def constructor_with_receiver(function_name: str) -> Diagnostic:
        """Constructor call requested with an explicit receiver."""
        msg = f"Constructor call '{function_name}' cannot take an explicit receiver"
        return Diagnostic(
            code=DiagnosticCode.CONSTRUCTOR_WITH_RECEIVER,
            message=msg,
            function_name=function_name,
        )

    @staticmethod
    def protocol_violation(operation: str, state: str) -> Diagnostic:
        """Synthesis operation invoked in the wrong session state."""
        msg = f"Cannot {operation} while synthesis session is {state}"
        return Diagnostic(
            code=DiagnosticCode.PROTOCOL_VIOLATION,
            message=msg,
            hint=(
                "Call enter_main_function() once, then synthesis operations, "
                "then leave_function() once, then get_code() once"
            ),
        )

    @staticmethod
    def max_depth_exceeded(max_depth: int) -> Diagnostic:
        """Array nesting deeper than the configured limit."""
        msg = f"Maximum array nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=msg,
            hint="Raise SynthesisConfig.max_depth or flatten the test case",
        )

    @staticmethod
    def unknown_target(name: str, available: Iterable[str]) -> Diagnostic:
        """Target name without a registered strategy."""
        msg = f"Unknown synthesis target: {name!r}"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_TARGET,
            message=msg,
            expected=_join_names(available),
            received=name,
        )
