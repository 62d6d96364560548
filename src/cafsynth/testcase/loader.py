"""Build a test case from its JSON description.

Document shape::

    {
      "values": [
        {"kind": "Integer", "value": 5},
        {"kind": "String", "value": "hi"},
        {"kind": "Array", "elements": [0, 1]},
        {"kind": "Placeholder", "index": 0}
      ],
      "calls": [
        {"function": 3, "args": [0, 1]},
        {"function": 0, "ctor": true, "args": [2]},
        {"function": 7, "this": 3, "args": []}
      ]
    }

Values are created in document order; ``elements``, ``args`` and ``this``
refer to values by position in ``values``. An array may only reference
values listed before it, which keeps the graph acyclic. Several calls may
reference the same value; it is shared, not copied.

Float payloads are JSON numbers or one of the strings "NaN", "Infinity",
"-Infinity".

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from cafsynth.constants import INT32_MAX, INT32_MIN
from cafsynth.diagnostics import ErrorTemplate, TestCaseLoadError
from cafsynth.enums import ValueKind

from .pool import ValuePool
from .testcase import FunctionCall, TestCase
from .values import Value

__all__ = ["load_test_case", "load_test_case_file"]

logger = logging.getLogger(__name__)

_SPECIAL_FLOATS: dict[str, float] = {
    "NaN": math.nan,
    "Infinity": math.inf,
    "-Infinity": -math.inf,
}


def _malformed(location: str, detail: str) -> TestCaseLoadError:
    return TestCaseLoadError(ErrorTemplate.test_case_malformed(location, detail))


def _expect_object(data: object, location: str) -> Mapping[str, Any]:
    if not isinstance(data, dict):
        raise _malformed(location, f"expected an object, got {type(data).__name__}")
    return data


def _expect_list(data: object, location: str) -> Sequence[Any]:
    if not isinstance(data, list):
        raise _malformed(location, f"expected an array, got {type(data).__name__}")
    return data


def _expect_int(data: object, location: str) -> int:
    # bool is an int subclass; JSON true/false is never a valid id
    if not isinstance(data, int) or isinstance(data, bool):
        raise _malformed(location, f"expected an integer, got {type(data).__name__}")
    return data


def _resolve(ref: object, values: Sequence[Value], location: str) -> Value:
    if not isinstance(ref, int) or isinstance(ref, bool) or not 0 <= ref < len(values):
        raise TestCaseLoadError(
            ErrorTemplate.value_reference_invalid(location, ref, len(values))
        )
    return values[ref]


def _parse_float(data: object, location: str) -> float:
    if isinstance(data, str):
        special = _SPECIAL_FLOATS.get(data)
        if special is None:
            raise _malformed(location, f"unknown float literal {data!r}")
        return special
    if isinstance(data, (int, float)) and not isinstance(data, bool):
        try:
            return float(data)
        except OverflowError:
            raise _malformed(location, "number does not fit a double") from None
    raise _malformed(location, f"expected a number, got {type(data).__name__}")


def _parse_value(
    entry: object, index: int, values: Sequence[Value], pool: ValuePool
) -> Value:
    location = f"values[{index}]"
    obj = _expect_object(entry, location)
    try:
        kind = ValueKind.parse(obj.get("kind"))  # type: ignore[arg-type]
    except ValueError:
        raise _malformed(location, f"unknown value kind {obj.get('kind')!r}") from None

    match kind:
        case ValueKind.UNDEFINED:
            return pool.create_undefined()
        case ValueKind.NULL:
            return pool.create_null()
        case ValueKind.BOOLEAN:
            payload = obj.get("value")
            if not isinstance(payload, bool):
                raise _malformed(location, "Boolean value needs a true/false 'value'")
            return pool.create_boolean(payload)
        case ValueKind.STRING:
            payload = obj.get("value")
            if not isinstance(payload, str):
                raise _malformed(location, "String value needs a string 'value'")
            return pool.create_string(payload)
        case ValueKind.INTEGER:
            payload = _expect_int(obj.get("value"), f"{location}.value")
            if not INT32_MIN <= payload <= INT32_MAX:
                raise _malformed(location, f"integer {payload} outside the 32-bit signed range")
            return pool.create_integer(payload)
        case ValueKind.FLOAT:
            return pool.create_float(_parse_float(obj.get("value"), f"{location}.value"))
        case ValueKind.FUNCTION:
            function_id = _expect_int(obj.get("function"), f"{location}.function")
            if function_id < 0:
                raise _malformed(location, f"negative function id {function_id}")
            return pool.create_function(function_id)
        case ValueKind.ARRAY:
            refs = _expect_list(obj.get("elements", []), f"{location}.elements")
            elements = [
                _resolve(ref, values, f"{location}.elements[{i}]") for i, ref in enumerate(refs)
            ]
            return pool.create_array(elements)
        case ValueKind.PLACEHOLDER:
            placeholder = _expect_int(obj.get("index"), f"{location}.index")
            if placeholder < 0:
                raise _malformed(location, f"negative placeholder index {placeholder}")
            return pool.create_placeholder(placeholder)


def _parse_call(entry: object, index: int, values: Sequence[Value]) -> FunctionCall:
    location = f"calls[{index}]"
    obj = _expect_object(entry, location)
    function_id = _expect_int(obj.get("function"), f"{location}.function")
    if function_id < 0:
        raise _malformed(location, f"negative function id {function_id}")
    refs = _expect_list(obj.get("args", []), f"{location}.args")
    args = tuple(_resolve(ref, values, f"{location}.args[{i}]") for i, ref in enumerate(refs))
    this_ref = obj.get("this")
    this = None if this_ref is None else _resolve(this_ref, values, f"{location}.this")
    is_ctor = obj.get("ctor", False)
    if not isinstance(is_ctor, bool):
        raise _malformed(f"{location}.ctor", "expected true or false")
    return FunctionCall(function_id=function_id, args=args, this=this, is_ctor_call=is_ctor)


def load_test_case(document: object, pool: ValuePool | None = None) -> TestCase:
    """Build a test case from a parsed JSON document.

    Args:
        document: Parsed JSON (object with "values" and "calls")
        pool: Arena receiving the value nodes (default: a fresh pool)

    Returns:
        The test case. Function and constructor ids are not checked against
        any metadata store here; synthesis resolves them.

    Raises:
        TestCaseLoadError: If the document is structurally invalid
    """
    if pool is None:
        pool = ValuePool()
    root = _expect_object(document, "$")
    values: list[Value] = []
    for index, entry in enumerate(_expect_list(root.get("values", []), "values")):
        values.append(_parse_value(entry, index, values, pool))

    tc = TestCase()
    for index, entry in enumerate(_expect_list(root.get("calls", []), "calls")):
        tc.add_function_call(_parse_call(entry, index, values))

    logger.debug("Loaded test case: %d value(s), %d call(s)", len(values), len(tc))
    return tc


def load_test_case_file(path: str | Path, pool: ValuePool | None = None) -> TestCase:
    """Read a JSON test case from disk.

    Raises:
        TestCaseLoadError: If the file is not UTF-8 JSON or not a valid test case
        OSError: If the file cannot be read
    """
    file_path = Path(path)
    try:
        document = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise TestCaseLoadError(
            ErrorTemplate.test_case_malformed(f"{file_path}:{exc.lineno}", exc.msg)
        ) from exc
    except UnicodeDecodeError as exc:
        raise TestCaseLoadError(
            ErrorTemplate.test_case_malformed(
                f"{file_path}@{exc.start}", f"not valid UTF-8: {exc.reason}"
            )
        ) from exc
    return load_test_case(document, pool)
