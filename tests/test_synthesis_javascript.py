"""Tests for the plain JavaScript strategy: literals and escaping.

Python 3.13+.
"""

from __future__ import annotations

import json
import math

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from cafsynth.diagnostics import MetadataReferenceError, UnsupportedValueError
from cafsynth.metadata import MetadataStore
from cafsynth.synthesis import JavaScriptStrategy, escape_string, format_float
from cafsynth.testcase import ValuePool
from tests.strategies import js_strings


class TestEscapeString:
    """escape_string()."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", '""'),
            ("hi", '"hi"'),
            ('say "hi"', '"say \\"hi\\""'),
            ("a\\b", '"a\\\\b"'),
            ("line\nnext", '"line\\nnext"'),
            ("\t\r\b\f", '"\\t\\r\\b\\f"'),
            ("\x00", '"\\u0000"'),
            ("\x7f", '"\\u007f"'),
            ("\u2028\u2029", '"\\u2028\\u2029"'),
            ("'single'", "\"'single'\""),
            ("café", '"café"'),
        ],
    )
    def test_examples(self, text: str, expected: str) -> None:
        """Quotes, backslashes and control characters are escaped."""
        assert escape_string(text) == expected

    def test_lone_surrogate_escaped(self) -> None:
        """Surrogate code points never reach the output unescaped."""
        assert escape_string("\ud800") == '"\\ud800"'

    @given(text=js_strings())
    def test_reversible(self, text: str) -> None:
        """The literal decodes back to the original text."""
        literal = escape_string(text)
        event(f"escaped={literal != json.dumps(text, ensure_ascii=False)}")
        assert json.loads(literal) == text

    @given(text=js_strings())
    def test_single_line(self, text: str) -> None:
        """Literals never contain a raw JavaScript line terminator."""
        literal = escape_string(text)
        for terminator in ("\n", "\r", "\u2028", "\u2029"):
            assert terminator not in literal


class TestFormatFloat:
    """format_float()."""

    @pytest.mark.parametrize(
        ("number", "expected"),
        [
            (math.nan, "NaN"),
            (math.inf, "Infinity"),
            (-math.inf, "-Infinity"),
            (0.5, "0.5"),
            (-0.0, "-0.0"),
            (1e300, "1e+300"),
        ],
    )
    def test_examples(self, number: float, expected: str) -> None:
        """Non-finite values use the JavaScript global names."""
        assert format_float(number) == expected

    @given(number=st.floats(allow_nan=False, allow_infinity=False))
    def test_finite_round_trip(self, number: float) -> None:
        """Finite literals parse back to the same double."""
        assert float(format_float(number)) == number


class TestLiterals:
    """JavaScriptStrategy.format_literal() and write methods."""

    def test_literal_forms(self, sample_store: MetadataStore) -> None:
        """Every scalar kind has a literal form."""
        strategy = JavaScriptStrategy(sample_store)
        pool = ValuePool()
        assert strategy.format_literal(pool.get_undefined()) == "undefined"
        assert strategy.format_literal(pool.get_null()) == "null"
        assert strategy.format_literal(pool.get_boolean(True)) == "true"
        assert strategy.format_literal(pool.get_boolean(False)) == "false"
        assert strategy.format_literal(pool.create_integer(-2147483648)) == "-2147483648"
        assert strategy.format_literal(pool.create_float(2.5)) == "2.5"
        assert strategy.format_literal(pool.create_string("x")) == '"x"'
        assert strategy.format_literal(pool.create_function(5)) == "print"

    def test_unknown_function_id(self, sample_store: MetadataStore) -> None:
        """Function values must name a store function."""
        strategy = JavaScriptStrategy(sample_store)
        with pytest.raises(MetadataReferenceError):
            strategy.format_literal(ValuePool().create_function(42))

    def test_no_array_literal(self) -> None:
        """Arrays are built with push, never as literals."""
        with pytest.raises(TypeError):
            JavaScriptStrategy(MetadataStore()).format_literal(ValuePool().create_array())

    def test_no_placeholder_literal(self) -> None:
        """Placeholders have no literal form."""
        with pytest.raises(UnsupportedValueError):
            JavaScriptStrategy(MetadataStore()).format_literal(ValuePool().create_placeholder(0))

    def test_write_methods(self) -> None:
        """Each write method appends one complete line."""
        strategy = JavaScriptStrategy(MetadataStore())
        output: list[str] = []
        strategy.enter_main_function(output)
        strategy.write_variable_def(output, "v0", ValuePool().create_integer(1))
        strategy.write_empty_array_def(output, "v1")
        strategy.write_array_push(output, "v1", "v0")
        strategy.write_function_call(output, "v2", "f", None, False, ["v0", "v1"])
        strategy.write_function_call(output, "v3", "m", "v1", False, [])
        strategy.write_function_call(output, "v4", "C", None, True, ["v0"])
        strategy.leave_function(output)
        assert output == [
            "let v0 = 1;\n",
            "let v1 = [];\n",
            "v1.push(v0);\n",
            "let v2 = f(v0, v1);\n",
            "let v3 = v1.m();\n",
            "let v4 = new C(v0);\n",
        ]

    def test_no_reserved_names(self) -> None:
        """Plain scripts bind nothing of their own."""
        assert JavaScriptStrategy(MetadataStore()).reserved_names == frozenset()
