"""Enumerations for cafsynth type-safe constants.

ValueKind is an IntEnum because its members double as bit positions inside
ValueKindSet. TargetKind uses StrEnum so members compare equal to the target
names accepted on the command line.

Python 3.13+.
"""

from enum import IntEnum, StrEnum


class ValueKind(IntEnum):
    """Primitive value category of a test-case value.

    The integer value of each member is its bit position in a ValueKindSet,
    so the declaration order is part of the data model.
    """

    UNDEFINED = 0
    NULL = 1
    BOOLEAN = 2
    STRING = 3
    FUNCTION = 4
    INTEGER = 5
    FLOAT = 6
    ARRAY = 7
    PLACEHOLDER = 8
    """Reference to the result of an earlier call; only valid during test-case construction."""

    @classmethod
    def parse(cls, name: str) -> "ValueKind":
        """Parse a kind from its case-insensitive member name.

        Args:
            name: Kind name such as "Integer", "integer" or "INTEGER"

        Returns:
            Matching ValueKind member

        Raises:
            ValueError: If name does not name a value kind

        Example:
            >>> ValueKind.parse("Float")
            <ValueKind.FLOAT: 6>
        """
        try:
            return cls[name.upper()]
        except (KeyError, AttributeError):
            msg = f"Unknown value kind: {name!r}"
            raise ValueError(msg) from None

    @property
    def display_name(self) -> str:
        """Capitalized name as used in metadata files (e.g. "Integer")."""
        return self.name.capitalize()


class TargetKind(StrEnum):
    """JavaScript execution target of a synthesized program.

    StrEnum provides automatic string conversion: str(TargetKind.NODEJS) == "nodejs"
    """

    JS = "js"
    """Plain script runnable by a bare engine shell (d8, jsshell)."""

    NODEJS = "nodejs"
    """Node.js script; built-in modules are imported with require()."""

    CHROME = "chrome"
    """Headless Chrome script wrapped in navigation/close directives."""


__all__ = [
    "TargetKind",
    "ValueKind",
]
