"""Function calls and the test case that sequences them.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .values import Value

__all__ = ["FunctionCall", "TestCase"]


@dataclass(frozen=True, slots=True)
class FunctionCall:
    """One call of a test case.

    Attributes:
        function_id: Callee id in the metadata store. Refers to a constructor
            when ``is_ctor_call`` is set, to a function otherwise.
        args: Argument values in positional order
        this: Explicit receiver, or None for a free call
        is_ctor_call: Invoke the callee with ``new``
    """

    function_id: int
    args: tuple[Value, ...] = ()
    this: Value | None = None
    is_ctor_call: bool = False

    def __post_init__(self) -> None:
        if self.function_id < 0:
            msg = f"function_id must be >= 0, got {self.function_id}"
            raise ValueError(msg)
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    @property
    def has_this(self) -> bool:
        """Whether the call has an explicit receiver."""
        return self.this is not None

    @property
    def arg_count(self) -> int:
        """Number of arguments passed."""
        return len(self.args)


class TestCase:
    """Ordered sequence of function calls over one value graph.

    A PlaceholderValue with index ``i`` anywhere in the calls stands for the
    return value of ``calls[i]``.
    """

    __test__ = False  # not a pytest test class
    __slots__ = ("_calls",)

    def __init__(self, calls: Iterable[FunctionCall] = ()) -> None:
        self._calls: list[FunctionCall] = list(calls)

    def add_function_call(self, call: FunctionCall) -> int:
        """Append a call and return its index."""
        self._calls.append(call)
        return len(self._calls) - 1

    @property
    def calls(self) -> tuple[FunctionCall, ...]:
        """All calls in execution order."""
        return tuple(self._calls)

    def __getitem__(self, index: int) -> FunctionCall:
        return self._calls[index]

    def __len__(self) -> int:
        return len(self._calls)

    def __iter__(self) -> Iterator[FunctionCall]:
        return iter(self._calls)

    def __repr__(self) -> str:
        return f"TestCase(calls={len(self._calls)})"
