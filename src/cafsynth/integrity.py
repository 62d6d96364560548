"""Data integrity exceptions.

These exceptions indicate PROGRAMMING FAILURES around shared read-only state,
not faults in a particular test case. They should propagate to the top level.

Design:
    - NOT subclasses of CafError (different error domain)
    - Carry diagnostic context for post-mortem analysis
    - Immutable after construction
    - @final decorator prevents subclassing

Hierarchy:
    DataIntegrityError (base)
    └─ ImmutabilityViolationError (mutation of published metadata)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

__all__ = [
    "DataIntegrityError",
    "ImmutabilityViolationError",
    "IntegrityContext",
    "raise_if_frozen",
]


@dataclass(frozen=True, slots=True)
class IntegrityContext:
    """Context for integrity error diagnosis.

    Attributes:
        component: System component where error occurred (store, signature, callbacks)
        operation: Operation being performed (add_function, insert, add_param_kinds)
        key: Identifier of the record involved (optional)
    """

    component: str
    operation: str
    key: str | None = None


class DataIntegrityError(Exception):
    """Base exception for all data integrity failures.

    NOT a CafError subclass. A metadata store is shared read-only between
    synthesis sessions once published; writing to it afterwards is a bug in
    the caller, not a property of the input being synthesised.

    Attributes:
        context: Structured diagnostic context for post-mortem analysis
    """

    __slots__ = ("_context", "_frozen")

    _context: IntegrityContext | None
    _frozen: bool

    def __init__(
        self,
        message: str,
        context: IntegrityContext | None = None,
    ) -> None:
        """Initialize DataIntegrityError.

        Args:
            message: Human-readable error description
            context: Structured diagnostic context (optional)
        """
        super().__init__(message)
        object.__setattr__(self, "_context", context)
        object.__setattr__(self, "_frozen", True)

    # Python's exception machinery sets these while propagating.
    _PYTHON_EXCEPTION_ATTRS: frozenset[str] = frozenset(
        ("__traceback__", "__context__", "__cause__", "__suppress_context__", "__notes__")
    )

    def __setattr__(self, name: str, value: object) -> None:
        """Reject all attribute mutations after initialization.

        Raises:
            ImmutabilityViolationError: If attempting to modify after construction
        """
        if name in self._PYTHON_EXCEPTION_ATTRS:
            object.__setattr__(self, name, value)
            return
        if getattr(self, "_frozen", False):
            msg = f"Cannot modify integrity error attribute: {name}"
            raise ImmutabilityViolationError(msg)
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        """Reject all attribute deletions.

        Raises:
            ImmutabilityViolationError: Always
        """
        msg = f"Cannot delete integrity error attribute: {name}"
        raise ImmutabilityViolationError(msg)

    @property
    def context(self) -> IntegrityContext | None:
        """Structured diagnostic context."""
        return self._context

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{self.__class__.__name__}({self.args[0]!r}, context={self._context!r})"


@final
class ImmutabilityViolationError(DataIntegrityError):
    """Attempt to mutate an immutable object.

    Raised when code writes to a published MetadataStore, a frozen
    FunctionSignature or a frozen CallbackFunctionManager, and when code
    tampers with an integrity error itself.
    """


def raise_if_frozen(frozen: bool, component: str, operation: str, key: str | None = None) -> None:
    """Raise ImmutabilityViolationError when a frozen component is written.

    Args:
        frozen: Whether the component has been frozen
        component: Component name for the error context
        operation: Attempted operation
        key: Record identifier, if any

    Raises:
        ImmutabilityViolationError: If frozen is True
    """
    if frozen:
        msg = f"Cannot {operation} on frozen {component}"
        raise ImmutabilityViolationError(
            msg, IntegrityContext(component=component, operation=operation, key=key)
        )
