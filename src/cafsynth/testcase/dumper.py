"""Human-readable listing of a test case (the ``show`` command).

Python 3.13+. Zero external dependencies.
"""

from cafsynth.core.literals import format_float
from cafsynth.metadata import MetadataStore

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

__all__ = ["dump_test_case", "format_value"]

_MAX_STRING_PREVIEW = 40


def format_value(value: Value, store: MetadataStore | None = None) -> str:
    """One-line description of a value node.

    Function references resolve to their export name when a store is given.
    Long strings are truncated.
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
            if len(text) > _MAX_STRING_PREVIEW:
                text = text[:_MAX_STRING_PREVIEW] + "..."
            return repr(text)
        case FunctionValue(function_id=function_id):
            if store is None:
                return f"<function #{function_id}>"
            return f"<function {store.get_function(function_id).name}>"
        case PlaceholderValue(index=index):
            return f"<result of call #{index}>"
        case ArrayValue(elements=elements):
            return f"<array node {value.node_id}, {len(elements)} element(s)>"


def _callee_name(call: FunctionCall, store: MetadataStore) -> str:
    if call.is_ctor_call:
        return f"new {store.get_constructor(call.function_id).name}"
    return store.get_function(call.function_id).name


def dump_test_case(tc: TestCase, store: MetadataStore, *, verbose: bool = False) -> str:
    """List the calls of a test case, one ``CALL #i: name`` line each.

    Args:
        tc: Test case to list
        store: Store resolving function and constructor ids to names
        verbose: Also list the receiver and arguments of every call

    Returns:
        Listing text, newline terminated

    Raises:
        MetadataReferenceError: If a call names an id missing from the store
    """
    output: list[str] = []
    for index, call in enumerate(tc):
        output.append(f"CALL #{index}: {_callee_name(call, store)}\n")
        if not verbose:
            continue
        if call.this is not None:
            output.append(f"    this: {format_value(call.this, store)}\n")
        for arg_index, arg in enumerate(call.args):
            output.append(f"    arg #{arg_index}: {format_value(arg, store)}\n")
    return "".join(output)
