"""Synthesis variables: what the engine hands back for a synthesised value.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

from cafsynth.testcase.values import Value

__all__ = ["SynthesisVariable"]


@dataclass(frozen=True, slots=True)
class SynthesisVariable:
    """Result of a synthesis operation.

    Exactly one of four states:

    ========================  ========  =========
    State                     name      value
    ========================  ========  =========
    empty                     None      None
    named                     set       None
    named constant            set       set
    unnamed literal constant  None      set
    ========================  ========  =========

    Call results are named (their value is opaque to the engine). Constants
    synthesised by the engine are named constants. An unnamed literal is
    rendered inline wherever it is used as an argument.

    Instances are produced by SynthesisBuilder; strategies never create them.
    """

    name: str | None = None
    value: Value | None = None

    @classmethod
    def empty(cls) -> "SynthesisVariable":
        """Variable with no binding (e.g. "no receiver")."""
        return cls()

    @classmethod
    def named(cls, name: str) -> "SynthesisVariable":
        """Variable bound to an opaque value."""
        return cls(name=name)

    @classmethod
    def constant(cls, name: str, value: Value) -> "SynthesisVariable":
        """Variable bound to a known constant value."""
        return cls(name=name, value=value)

    @classmethod
    def literal(cls, value: Value) -> "SynthesisVariable":
        """Unbound constant rendered inline."""
        return cls(value=value)

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.value is None

    @property
    def is_named(self) -> bool:
        return self.name is not None

    @property
    def has_value(self) -> bool:
        return self.value is not None
