"""Function signature model.

A FunctionSignature says which value kinds are legal for the implicit
receiver (``this``) and for each formal parameter, by position. Signatures
are built once by the metadata loader, frozen when the store is published,
and never duplicated afterwards.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable
from typing import TypeAlias

from cafsynth.integrity import raise_if_frozen

from .kinds import ValueKindSet

__all__ = ["FunctionSignature", "SignatureKey"]

SignatureKey: TypeAlias = tuple[int, tuple[int, ...]]
"""Hashable structural identity: (this-kinds bitmask, parameter bitmasks in order)."""


class FunctionSignature:
    """Allowed value kinds for a function's receiver and each parameter.

    Move-only: copy.copy() and copy.deepcopy() raise TypeError. Accessors
    return copies of the stored kind sets, so a caller can never mutate a
    signature through them.

    Example:
        >>> sig = FunctionSignature()
        >>> sig.add_param_kinds(ValueKindSet.from_kinds([ValueKind.STRING]))
        >>> sig.param_count
        1
        >>> sig.get_param_value_kinds(0).has(ValueKind.STRING)
        True
    """

    __slots__ = ("_frozen", "_param_kinds", "_this_kinds")

    def __init__(
        self,
        this_kinds: ValueKindSet | None = None,
        param_kinds: Iterable[ValueKindSet] = (),
    ) -> None:
        """Initialize signature.

        Args:
            this_kinds: Kinds allowed for the receiver (default: empty set)
            param_kinds: Kinds allowed per parameter, in declaration order
        """
        self._this_kinds = this_kinds.copy() if this_kinds is not None else ValueKindSet()
        self._param_kinds: list[ValueKindSet] = [kinds.copy() for kinds in param_kinds]
        self._frozen = False

    @property
    def this_kinds(self) -> ValueKindSet:
        """Kinds allowed for the receiver (a copy)."""
        return self._this_kinds.copy()

    def set_this_kinds(self, kinds: ValueKindSet) -> None:
        """Replace the receiver kinds.

        Raises:
            ImmutabilityViolationError: If the signature is frozen
        """
        raise_if_frozen(self._frozen, "FunctionSignature", "set_this_kinds")
        self._this_kinds = kinds.copy()

    def add_param_kinds(self, kinds: ValueKindSet) -> None:
        """Append the kinds of the next formal parameter.

        Raises:
            ImmutabilityViolationError: If the signature is frozen
        """
        raise_if_frozen(self._frozen, "FunctionSignature", "add_param_kinds")
        self._param_kinds.append(kinds.copy())

    @property
    def param_kinds(self) -> tuple[ValueKindSet, ...]:
        """Kinds of every parameter in declaration order (copies)."""
        return tuple(kinds.copy() for kinds in self._param_kinds)

    @property
    def param_count(self) -> int:
        """Number of formal parameters."""
        return len(self._param_kinds)

    def get_param_value_kinds(self, index: int) -> ValueKindSet:
        """Get the kinds allowed for parameter ``index``.

        Args:
            index: Zero-based parameter position

        Returns:
            Copy of the parameter's kind set

        Raises:
            IndexError: If index is not a valid parameter position. This is
                a programming error (an id inconsistent with the signature),
                so negative indexes are rejected rather than wrapped.
        """
        if not 0 <= index < len(self._param_kinds):
            msg = f"Parameter index {index} out of range for signature with {len(self._param_kinds)} parameter(s)"
            raise IndexError(msg)
        return self._param_kinds[index].copy()

    def structural_key(self) -> SignatureKey:
        """Hashable key; two signatures are equal iff their keys are equal."""
        return (self._this_kinds.raw, tuple(kinds.raw for kinds in self._param_kinds))

    def freeze(self) -> None:
        """Make the signature immutable (idempotent)."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        """Whether freeze() has been called."""
        return self._frozen

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FunctionSignature):
            return NotImplemented
        return self.structural_key() == other.structural_key()

    __hash__ = None  # type: ignore[assignment]

    def __copy__(self) -> "FunctionSignature":
        msg = "FunctionSignature is move-only and cannot be copied"
        raise TypeError(msg)

    def __deepcopy__(self, memo: dict[int, object]) -> "FunctionSignature":
        msg = "FunctionSignature is move-only and cannot be copied"
        raise TypeError(msg)

    def __repr__(self) -> str:
        params = ", ".join(repr(kinds) for kinds in self._param_kinds)
        return f"FunctionSignature(this={self._this_kinds!r}, params=[{params}])"
