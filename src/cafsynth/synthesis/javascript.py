"""Plain JavaScript emission strategy.

Produces a flat script for a bare engine shell (d8, jsshell): one ``let``
binding per value or call result, arrays filled with ``push``.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Sequence

from cafsynth.config import SynthesisConfig
from cafsynth.core.literals import format_float
from cafsynth.diagnostics import ErrorTemplate, UnsupportedValueError
from cafsynth.metadata import MetadataStore
from cafsynth.testcase.values import (
    ArrayValue,
    BooleanValue,
    FloatValue,
    FunctionValue,
    IntegerValue,
    NullValue,
    PlaceholderValue,
    StringValue,
    UndefinedValue,
    Value,
)

__all__ = ["JavaScriptStrategy", "escape_string", "format_float"]

_SIMPLE_ESCAPES: dict[str, str] = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _needs_unicode_escape(code: int) -> bool:
    return (
        code < 0x20
        or code == 0x7F
        or code in (0x2028, 0x2029)
        or 0xD800 <= code <= 0xDFFF
    )


def escape_string(text: str) -> str:
    """Render text as a double-quoted JavaScript string literal.

    The result is also a valid JSON string literal, so ``json.loads`` is an
    exact inverse for any text without surrogate code points.

    Example:
        >>> escape_string('say "hi"\\n')
        '"say \\\\"hi\\\\"\\\\n"'
    """
    output: list[str] = ['"']
    for ch in text:
        simple = _SIMPLE_ESCAPES.get(ch)
        if simple is not None:
            output.append(simple)
        elif _needs_unicode_escape(ord(ch)):
            output.append(f"\\u{ord(ch):04x}")
        else:
            output.append(ch)
    output.append('"')
    return "".join(output)


class JavaScriptStrategy:
    """Emission strategy for plain JavaScript.

    Function values render the export name recorded in the metadata store.
    Subclasses add target specifics by overriding the write methods and
    lifecycle hooks, delegating syntax back here through ``super()``.
    """

    def __init__(self, store: MetadataStore, config: SynthesisConfig | None = None) -> None:
        self._store = store
        self._config = config if config is not None else SynthesisConfig()

    @property
    def store(self) -> MetadataStore:
        return self._store

    @property
    def config(self) -> SynthesisConfig:
        return self._config

    @property
    def reserved_names(self) -> frozenset[str]:
        return frozenset()

    def enter_main_function(self, output: list[str]) -> None:
        pass

    def leave_function(self, output: list[str]) -> None:
        pass

    def format_literal(self, value: Value) -> str:
        """Render a literal value.

        Raises:
            UnsupportedValueError: For placeholders
            TypeError: For arrays (they have no literal form here)
            MetadataReferenceError: For function ids missing from the store
        """
        match value:
            case UndefinedValue():
                return "undefined"
            case NullValue():
                return "null"
            case BooleanValue(value=flag):
                return "true" if flag else "false"
            case IntegerValue(value=number):
                return str(number)
            case FloatValue(value=number):
                return format_float(number)
            case StringValue(value=text):
                return escape_string(text)
            case FunctionValue(function_id=function_id):
                return self._store.get_function(function_id).name
            case PlaceholderValue():
                raise UnsupportedValueError(
                    ErrorTemplate.placeholder_not_synthesisable(value.node_id)
                )
            case ArrayValue():
                msg = "Array values are defined element by element, not as literals"
                raise TypeError(msg)

    def write_variable_def(self, output: list[str], name: str, value: Value) -> None:
        output.append(f"let {name} = {self.format_literal(value)};\n")

    def write_empty_array_def(self, output: list[str], name: str) -> None:
        output.append(f"let {name} = [];\n")

    def write_array_push(self, output: list[str], array_name: str, element_name: str) -> None:
        output.append(f"{array_name}.push({element_name});\n")

    def write_function_call(
        self,
        output: list[str],
        result_name: str,
        function_name: str,
        receiver_name: str | None,
        is_ctor_call: bool,
        arg_names: Sequence[str],
    ) -> None:
        if is_ctor_call:
            callee = f"new {function_name}"
        elif receiver_name is not None:
            callee = f"{receiver_name}.{function_name}"
        else:
            callee = function_name
        output.append(f"let {result_name} = {callee}({', '.join(arg_names)});\n")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(store={self._store!r})"
