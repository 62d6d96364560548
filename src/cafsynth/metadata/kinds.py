"""Bitset of allowed value kinds.

A ValueKindSet records which ValueKind members are legal at one position of
a function signature (the receiver or a parameter). Every kind fits in one
bit of a single small int.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable, Iterator

from cafsynth.enums import ValueKind

__all__ = ["ValueKindSet"]


def _bit(kind: ValueKind) -> int:
    return 1 << int(kind)


class ValueKindSet:
    """Mutable set of ValueKind members stored as a bitset.

    Unhashable because it is mutable; use ``raw`` when a hashable key is
    needed.

    Example:
        >>> kinds = ValueKindSet.from_kinds([ValueKind.INTEGER, ValueKind.FLOAT])
        >>> kinds.has(ValueKind.FLOAT)
        True
        >>> kinds.remove(ValueKind.FLOAT)
        >>> list(kinds)
        [<ValueKind.INTEGER: 5>]
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: int = 0) -> None:
        """Initialize from a raw bitmask.

        Args:
            raw: Bitmask where bit i stands for ValueKind(i) (default: empty)

        Raises:
            ValueError: If raw has bits outside the ValueKind range
        """
        if raw < 0 or raw >> len(ValueKind):
            msg = f"Invalid ValueKindSet bitmask: {raw:#x}"
            raise ValueError(msg)
        self._raw = raw

    @classmethod
    def from_kinds(cls, kinds: Iterable[ValueKind]) -> "ValueKindSet":
        """Build a set containing the given kinds."""
        kind_set = cls()
        for kind in kinds:
            kind_set.add(kind)
        return kind_set

    @classmethod
    def create_empty(cls) -> "ValueKindSet":
        """Build a set with no kinds."""
        return cls()

    @classmethod
    def create_full(cls) -> "ValueKindSet":
        """Build a set holding every kind except PLACEHOLDER.

        Placeholder only exists while a test case is under construction, so a
        "full" set never contains it.
        """
        kind_set = cls.from_kinds(ValueKind)
        kind_set.remove(ValueKind.PLACEHOLDER)
        return kind_set

    @property
    def raw(self) -> int:
        """Raw bitmask (hashable identity of the set's content)."""
        return self._raw

    def has(self, kind: ValueKind) -> bool:
        """Check whether kind is a member."""
        return (self._raw & _bit(kind)) != 0

    def add(self, kind: ValueKind) -> None:
        """Add kind to the set."""
        self._raw |= _bit(kind)

    def remove(self, kind: ValueKind) -> None:
        """Remove kind from the set (no error if absent)."""
        self._raw &= ~_bit(kind)

    def copy(self) -> "ValueKindSet":
        """Return an independent set with the same members."""
        return ValueKindSet(self._raw)

    def is_empty(self) -> bool:
        """Check whether the set has no members."""
        return self._raw == 0

    def names(self) -> tuple[str, ...]:
        """Display names of the members in kind order (for diagnostics)."""
        return tuple(kind.display_name for kind in self)

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, ValueKind) and self.has(kind)

    def __iter__(self) -> Iterator[ValueKind]:
        return (kind for kind in ValueKind if self.has(kind))

    def __len__(self) -> int:
        return self._raw.bit_count()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValueKindSet):
            return NotImplemented
        return self._raw == other._raw

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        members = ", ".join(self.names())
        return f"ValueKindSet({{{members}}})"
