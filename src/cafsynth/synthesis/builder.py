"""Synthesis core engine.

SynthesisBuilder compiles a value graph into program text one statement at a
time. It owns the per-session state (variable arena, memo table, name
counter, output buffer) and delegates every piece of target syntax to an
EmissionStrategy.

Session protocol::

    builder.enter_main_function()
    builder.synthesis_constant(...) / builder.synthesis_function_call(...)  # any number
    builder.leave_function()
    code = builder.get_code()

Constants are memoized by node identity: a node synthesised twice yields the
same variable and a single definition. Calls are never memoized.
A synthesis operation that raises fails the session; nothing after it is
accepted.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import StrEnum
from typing import Protocol

from cafsynth.config import SynthesisConfig
from cafsynth.core.depth_guard import DepthGuard
from cafsynth.core.identity import IncrementIdAllocator
from cafsynth.diagnostics import (
    ErrorTemplate,
    SynthesisStateError,
    UnsupportedCallShapeError,
    UnsupportedValueError,
)
from cafsynth.testcase.values import ArrayValue, PlaceholderValue, Value

from .variable import SynthesisVariable

__all__ = ["EmissionStrategy", "SynthesisBuilder"]

logger = logging.getLogger(__name__)


class EmissionStrategy(Protocol):
    """Target-specific syntax used by SynthesisBuilder.

    Every ``write_*`` method and lifecycle hook appends complete lines
    (each terminated by ``"\\n"``) to ``output``, the engine's buffer.
    A strategy instance serves exactly one session.
    """

    @property
    def reserved_names(self) -> frozenset[str]:
        """Identifiers the strategy binds itself; the engine never generates them."""
        ...

    def enter_main_function(self, output: list[str]) -> None:
        """Emit the program prologue."""
        ...

    def leave_function(self, output: list[str]) -> None:
        """Emit the program epilogue."""
        ...

    def format_literal(self, value: Value) -> str:
        """Render a non-array, non-placeholder value as an expression."""
        ...

    def write_variable_def(self, output: list[str], name: str, value: Value) -> None:
        """Bind ``name`` to the literal form of ``value``."""
        ...

    def write_empty_array_def(self, output: list[str], name: str) -> None:
        """Bind ``name`` to a new empty array."""
        ...

    def write_array_push(self, output: list[str], array_name: str, element_name: str) -> None:
        """Append ``element_name`` to the array bound to ``array_name``."""
        ...

    def write_function_call(
        self,
        output: list[str],
        result_name: str,
        function_name: str,
        receiver_name: str | None,
        is_ctor_call: bool,
        arg_names: Sequence[str],
    ) -> None:
        """Bind ``result_name`` to the result of one call."""
        ...


class _SessionState(StrEnum):
    READY = "not started"
    ACTIVE = "active"
    LEFT = "left"
    FINISHED = "finished"
    FAILED = "failed"


class SynthesisBuilder:
    """Memoizing value-graph-to-statement compiler for one test case.

    Args:
        strategy: Target syntax (a fresh instance per session)
        config: Engine configuration (default: SynthesisConfig())

    Example:
        >>> from cafsynth.metadata import MetadataStore
        >>> from cafsynth.synthesis import JavaScriptStrategy
        >>> from cafsynth.testcase import ValuePool
        >>> pool = ValuePool()
        >>> builder = SynthesisBuilder(JavaScriptStrategy(MetadataStore()))
        >>> builder.enter_main_function()
        >>> five = builder.synthesis_constant(pool.create_integer(5))
        >>> _ = builder.synthesis_function_call("print", args=[five])
        >>> builder.leave_function()
        >>> print(builder.get_code(), end="")
        let v0 = 5;
        let v1 = print(v0);
    """

    __slots__ = (
        "_config",
        "_depth_guard",
        "_memo",
        "_names",
        "_output",
        "_reserved",
        "_state",
        "_strategy",
        "_variables",
    )

    def __init__(self, strategy: EmissionStrategy, config: SynthesisConfig | None = None) -> None:
        self._strategy = strategy
        self._config = config if config is not None else SynthesisConfig()
        self._variables: list[SynthesisVariable] = []
        # node_id -> (node, arena index); the node is kept to detect id collisions
        self._memo: dict[int, tuple[Value, int]] = {}
        self._names = IncrementIdAllocator()
        self._reserved = strategy.reserved_names
        self._output: list[str] = []
        self._state = _SessionState.READY
        self._depth_guard = DepthGuard(max_depth=self._config.max_depth)

    @property
    def strategy(self) -> EmissionStrategy:
        return self._strategy

    @property
    def config(self) -> SynthesisConfig:
        return self._config

    @property
    def variables(self) -> tuple[SynthesisVariable, ...]:
        """All variables created so far, in creation order."""
        return tuple(self._variables)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def _require_state(self, expected: _SessionState, operation: str) -> None:
        if self._state is not expected:
            raise SynthesisStateError(
                ErrorTemplate.protocol_violation(operation, self._state.value)
            )

    def enter_main_function(self) -> None:
        """Start the session and emit the target prologue."""
        self._require_state(_SessionState.READY, "enter the main function")
        self._strategy.enter_main_function(self._output)
        self._state = _SessionState.ACTIVE

    def leave_function(self) -> None:
        """End the session and emit the target epilogue."""
        self._require_state(_SessionState.ACTIVE, "leave the main function")
        self._strategy.leave_function(self._output)
        self._state = _SessionState.LEFT

    def get_code(self) -> str:
        """Return the program text. The session is finished afterwards."""
        self._require_state(_SessionState.LEFT, "get the code")
        self._state = _SessionState.FINISHED
        code = "".join(self._output)
        logger.debug(
            "Synthesis finished: %d variable(s), %d line(s)",
            len(self._variables),
            code.count("\n"),
        )
        return code

    # ------------------------------------------------------------------
    # Synthesis operations
    # ------------------------------------------------------------------

    def _next_variable_name(self) -> str:
        prefix = self._config.variable_prefix
        while True:
            name = f"{prefix}{self._names()}"
            if name not in self._reserved:
                return name

    def _fail(self) -> None:
        self._state = _SessionState.FAILED
        logger.debug("Synthesis session failed; %d line(s) discarded", len(self._output))

    def _record(self, variable: SynthesisVariable) -> int:
        self._variables.append(variable)
        return len(self._variables) - 1

    def synthesis_constant(self, value: Value) -> SynthesisVariable:
        """Define ``value`` once and return the variable bound to it.

        Arrays are defined empty and then filled element by element, each
        element synthesised (or reused) before it is pushed.

        Raises:
            SynthesisStateError: Outside enter_main_function/leave_function,
                or after an earlier synthesis operation raised
            UnsupportedValueError: If a placeholder is reached
            SynthesisDepthError: If arrays nest deeper than config.max_depth
            MetadataReferenceError: If a function value names an unknown id
            ValueError: If two different nodes share a node id (nodes from
                different pools mixed in one session)
        """
        self._require_state(_SessionState.ACTIVE, "synthesise a constant")
        try:
            return self._synthesis_constant(value)
        except Exception:
            self._fail()
            raise

    def _synthesis_constant(self, value: Value) -> SynthesisVariable:
        cached = self._memo.get(value.node_id)
        if cached is not None:
            node, index = cached
            if node is not value:
                msg = (
                    f"Node id {value.node_id} is shared by two different nodes; "
                    "a session must only see nodes of one ValuePool"
                )
                raise ValueError(msg)
            return self._variables[index]

        if isinstance(value, PlaceholderValue):
            raise UnsupportedValueError(ErrorTemplate.placeholder_not_synthesisable(value.node_id))

        name = self._next_variable_name()
        variable = SynthesisVariable.constant(name, value)
        index = self._record(variable)

        if isinstance(value, ArrayValue):
            with self._depth_guard:
                self._strategy.write_empty_array_def(self._output, name)
                for element in value.elements:
                    element_variable = self._synthesis_constant(element)
                    self._strategy.write_array_push(
                        self._output, name, self._argument_expression(element_variable)
                    )
        else:
            self._strategy.write_variable_def(self._output, name, value)
        # Memoized only once the definition is complete
        self._memo[value.node_id] = (value, index)
        return variable

    def _argument_expression(self, variable: SynthesisVariable) -> str:
        if variable.name is not None:
            return variable.name
        if variable.value is not None:
            return self._strategy.format_literal(variable.value)
        msg = "An empty variable cannot be used as a value"
        raise ValueError(msg)

    def synthesis_function_call(
        self,
        function_name: str,
        is_ctor_call: bool = False,
        receiver: SynthesisVariable | None = None,
        args: Sequence[SynthesisVariable] = (),
    ) -> SynthesisVariable:
        """Emit one call and return the variable bound to its result.

        Args:
            function_name: Callee as written in the program. For receiver
                calls this is the member name looked up on the receiver.
            is_ctor_call: Invoke with ``new``
            receiver: Already synthesised receiver; None or an empty
                variable for a free call
            args: Already synthesised arguments. Unnamed literal
                variables are rendered inline.

        Raises:
            SynthesisStateError: Outside enter_main_function/leave_function,
                or after an earlier synthesis operation raised
            UnsupportedCallShapeError: If a receiver is given for a constructor call
            ValueError: If the receiver is unnamed or an argument is empty
        """
        self._require_state(_SessionState.ACTIVE, "synthesise a function call")
        try:
            return self._synthesis_function_call(function_name, is_ctor_call, receiver, args)
        except Exception:
            self._fail()
            raise

    def _synthesis_function_call(
        self,
        function_name: str,
        is_ctor_call: bool,
        receiver: SynthesisVariable | None,
        args: Sequence[SynthesisVariable],
    ) -> SynthesisVariable:
        receiver_name: str | None = None
        if receiver is not None and not receiver.is_empty:
            if is_ctor_call:
                raise UnsupportedCallShapeError(
                    ErrorTemplate.constructor_with_receiver(function_name)
                )
            if receiver.name is None:
                msg = f"Receiver of '{function_name}' must be a named variable"
                raise ValueError(msg)
            receiver_name = receiver.name

        arg_names = [self._argument_expression(arg) for arg in args]
        result_name = self._next_variable_name()
        self._strategy.write_function_call(
            self._output, result_name, function_name, receiver_name, is_ctor_call, arg_names
        )
        variable = SynthesisVariable.named(result_name)
        self._record(variable)
        return variable
