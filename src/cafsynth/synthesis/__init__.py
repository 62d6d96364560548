"""Synthesis: compile value graphs into JavaScript programs.

Exports:
    SynthesisBuilder: Memoizing core engine, one per test case
    EmissionStrategy: Protocol of target-specific syntax
    JavaScriptStrategy, NodejsStrategy, ChromeStrategy: The three targets
    create_strategy, create_builder: Construction by target name
    TestCaseSynthesiser, synthesise_test_case: Whole-test-case driver

Python 3.13+.
"""

from .builder import EmissionStrategy, SynthesisBuilder
from .chrome import ChromeStrategy
from .javascript import JavaScriptStrategy, escape_string, format_float
from .nodejs import NodejsStrategy, module_of
from .synthesiser import TestCaseSynthesiser, synthesise_test_case
from .targets import available_targets, create_builder, create_strategy, parse_target
from .variable import SynthesisVariable

__all__ = [
    "ChromeStrategy",
    "EmissionStrategy",
    "JavaScriptStrategy",
    "NodejsStrategy",
    "SynthesisBuilder",
    "SynthesisVariable",
    "TestCaseSynthesiser",
    "available_targets",
    "create_builder",
    "create_strategy",
    "escape_string",
    "format_float",
    "module_of",
    "parse_target",
    "synthesise_test_case",
]
