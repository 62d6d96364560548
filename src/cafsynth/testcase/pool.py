"""Arena of value nodes.

A ValuePool owns every node of one value graph and hands out node ids from
its own allocator, so ids are dense per pool: 0, 1, 2, ... in creation
order. Elements of an array must already live in the same pool, which keeps
every graph acyclic.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable, Iterator
from typing import TypeVar

from cafsynth.core.identity import IncrementIdAllocator

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

__all__ = ["ValuePool"]

V = TypeVar("V", bound=Value)


class ValuePool:
    """Creates value nodes and records them by node id.

    ``get_undefined()``, ``get_null()`` and ``get_boolean()`` return one
    shared node per payload. Every ``create_*`` call returns a new node
    with a new identity, even for equal payloads.

    Example:
        >>> pool = ValuePool()
        >>> five = pool.create_integer(5)
        >>> arr = pool.create_array([five, five])
        >>> arr.node_id, pool.get(0) is five
        (1, True)
    """

    __slots__ = ("_alloc", "_booleans", "_null", "_undefined", "_values")

    def __init__(self) -> None:
        """Initialize empty pool."""
        self._values: list[Value] = []
        self._alloc = IncrementIdAllocator()
        self._undefined: UndefinedValue | None = None
        self._null: NullValue | None = None
        self._booleans: dict[bool, BooleanValue] = {}

    def _register(self, value: V) -> V:
        # Node was built with peek(); only consume the id once validation passed.
        self._alloc()
        self._values.append(value)
        return value

    def get_undefined(self) -> UndefinedValue:
        """Shared ``undefined`` node of this pool."""
        if self._undefined is None:
            self._undefined = self.create_undefined()
        return self._undefined

    def get_null(self) -> NullValue:
        """Shared ``null`` node of this pool."""
        if self._null is None:
            self._null = self.create_null()
        return self._null

    def get_boolean(self, value: bool) -> BooleanValue:
        """Shared ``true``/``false`` node of this pool."""
        node = self._booleans.get(value)
        if node is None:
            node = self.create_boolean(value)
            self._booleans[value] = node
        return node

    def create_undefined(self) -> UndefinedValue:
        """New ``undefined`` node."""
        return self._register(UndefinedValue(node_id=self._alloc.peek()))

    def create_null(self) -> NullValue:
        """New ``null`` node."""
        return self._register(NullValue(node_id=self._alloc.peek()))

    def create_boolean(self, value: bool) -> BooleanValue:
        """New boolean node."""
        return self._register(BooleanValue(node_id=self._alloc.peek(), value=value))

    def create_string(self, value: str) -> StringValue:
        """New string node."""
        return self._register(StringValue(node_id=self._alloc.peek(), value=value))

    def create_integer(self, value: int) -> IntegerValue:
        """New int32 node."""
        return self._register(IntegerValue(node_id=self._alloc.peek(), value=value))

    def create_float(self, value: float) -> FloatValue:
        """New float node."""
        return self._register(FloatValue(node_id=self._alloc.peek(), value=value))

    def create_function(self, function_id: int) -> FunctionValue:
        """New function-reference node."""
        return self._register(
            FunctionValue(node_id=self._alloc.peek(), function_id=function_id)
        )

    def create_placeholder(self, index: int) -> PlaceholderValue:
        """New placeholder for the result of call ``index``."""
        return self._register(
            PlaceholderValue(node_id=self._alloc.peek(), index=index)
        )

    def create_array(self, elements: Iterable[Value] = ()) -> ArrayValue:
        """New array node over existing nodes of this pool.

        Raises:
            ValueError: If an element was not created by this pool
        """
        items = tuple(elements)
        for element in items:
            if not self.owns(element):
                msg = f"Array element (node {element.node_id}) does not belong to this pool"
                raise ValueError(msg)
        return self._register(ArrayValue(node_id=self._alloc.peek(), elements=items))

    def owns(self, value: Value) -> bool:
        """Check whether value is a node of this pool (by identity)."""
        node_id = value.node_id
        return 0 <= node_id < len(self._values) and self._values[node_id] is value

    def get(self, node_id: int) -> Value:
        """Node with the given id.

        Raises:
            IndexError: If node_id was never allocated by this pool
        """
        if not 0 <= node_id < len(self._values):
            msg = f"Node id {node_id} not in pool of {len(self._values)} value(s)"
            raise IndexError(msg)
        return self._values[node_id]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"ValuePool(values={len(self._values)})"
