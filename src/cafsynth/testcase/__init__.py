"""Test cases: value graphs and the call sequences over them.

A test case is produced by the fuzzer's mutator (or loaded from JSON) and
consumed by the synthesis engine. Value nodes are identity-bearing: the
ValuePool that creates them assigns each a node id.

Python 3.13+.
"""

from .dumper import dump_test_case, format_value
from .loader import load_test_case, load_test_case_file
from .pool import ValuePool
from .testcase import FunctionCall, TestCase
from .values import (
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

__all__ = [
    "ArrayValue",
    "BooleanValue",
    "FloatValue",
    "FunctionCall",
    "FunctionValue",
    "IntegerValue",
    "NullValue",
    "PlaceholderValue",
    "StringValue",
    "TestCase",
    "UndefinedValue",
    "Value",
    "ValuePool",
    "dump_test_case",
    "format_value",
    "load_test_case",
    "load_test_case_file",
]
