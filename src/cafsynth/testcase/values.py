"""Value graph node definitions.

A test case is a DAG of typed value nodes. Every node carries a ``node_id``
assigned by the ValuePool that created it; that id, not the node's content,
is the node's identity. Two nodes with the same literal payload but different
ids are different values and are synthesised separately.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from typing import ClassVar, TypeAlias

from cafsynth.constants import INT32_MAX, INT32_MIN
from cafsynth.enums import ValueKind

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Payload-free values
    "UndefinedValue",
    "NullValue",
    # Literal values
    "BooleanValue",
    "StringValue",
    "IntegerValue",
    "FloatValue",
    # References
    "FunctionValue",
    "PlaceholderValue",
    # Aggregates
    "ArrayValue",
    # Type alias
    "Value",
]


def _check_node_id(node_id: int) -> None:
    if node_id < 0:
        msg = f"node_id must be >= 0, got {node_id}"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class UndefinedValue:
    """The JavaScript ``undefined`` value."""

    kind: ClassVar[ValueKind] = ValueKind.UNDEFINED

    node_id: int

    def __post_init__(self) -> None:
        _check_node_id(self.node_id)


@dataclass(frozen=True, slots=True)
class NullValue:
    """The JavaScript ``null`` value."""

    kind: ClassVar[ValueKind] = ValueKind.NULL

    node_id: int

    def __post_init__(self) -> None:
        _check_node_id(self.node_id)


@dataclass(frozen=True, slots=True)
class BooleanValue:
    """A boolean literal."""

    kind: ClassVar[ValueKind] = ValueKind.BOOLEAN

    node_id: int
    value: bool

    def __post_init__(self) -> None:
        _check_node_id(self.node_id)
        if not isinstance(self.value, bool):
            msg = f"BooleanValue.value must be bool, got {type(self.value).__name__}"
            raise TypeError(msg)


@dataclass(frozen=True, slots=True)
class StringValue:
    """A string literal.

    The payload is a Python str. Lone surrogates (e.g. bytes decoded with
    ``errors="surrogateescape"``) are allowed and survive synthesis.
    """

    kind: ClassVar[ValueKind] = ValueKind.STRING

    node_id: int
    value: str

    def __post_init__(self) -> None:
        _check_node_id(self.node_id)
        if not isinstance(self.value, str):
            msg = f"StringValue.value must be str, got {type(self.value).__name__}"
            raise TypeError(msg)


@dataclass(frozen=True, slots=True)
class IntegerValue:
    """A 32-bit signed integer literal."""

    kind: ClassVar[ValueKind] = ValueKind.INTEGER

    node_id: int
    value: int

    def __post_init__(self) -> None:
        """Validate the payload is an int (not bool) within int32 range."""
        _check_node_id(self.node_id)
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            msg = f"IntegerValue.value must be int, got {type(self.value).__name__}"
            raise TypeError(msg)
        if not INT32_MIN <= self.value <= INT32_MAX:
            msg = f"IntegerValue.value out of int32 range: {self.value}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class FloatValue:
    """A double-precision floating point literal (NaN and infinities included)."""

    kind: ClassVar[ValueKind] = ValueKind.FLOAT

    node_id: int
    value: float

    def __post_init__(self) -> None:
        _check_node_id(self.node_id)
        if not isinstance(self.value, float):
            msg = f"FloatValue.value must be float, got {type(self.value).__name__}"
            raise TypeError(msg)


@dataclass(frozen=True, slots=True)
class FunctionValue:
    """A reference to an exported function, resolved through the metadata store."""

    kind: ClassVar[ValueKind] = ValueKind.FUNCTION

    node_id: int
    function_id: int

    def __post_init__(self) -> None:
        _check_node_id(self.node_id)


@dataclass(frozen=True, slots=True)
class PlaceholderValue:
    """Stand-in for the return value of call number ``index`` of the test case.

    Only meaningful while a test case is assembled; the test-case
    synthesiser replaces it with the variable bound to that call's result.
    """

    kind: ClassVar[ValueKind] = ValueKind.PLACEHOLDER

    node_id: int
    index: int

    def __post_init__(self) -> None:
        _check_node_id(self.node_id)
        if self.index < 0:
            msg = f"PlaceholderValue.index must be >= 0, got {self.index}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ArrayValue:
    """An array whose elements are other nodes of the same graph.

    Elements are shared references, not copies: the same node may appear in
    several arrays or several times in one array.
    """

    kind: ClassVar[ValueKind] = ValueKind.ARRAY

    node_id: int
    elements: tuple["Value", ...] = ()

    def __post_init__(self) -> None:
        _check_node_id(self.node_id)

    def __len__(self) -> int:
        return len(self.elements)


Value: TypeAlias = (
    UndefinedValue
    | NullValue
    | BooleanValue
    | StringValue
    | IntegerValue
    | FloatValue
    | FunctionValue
    | PlaceholderValue
    | ArrayValue
)
