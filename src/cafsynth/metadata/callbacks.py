"""Callback function registry.

Groups exported functions by structural signature so that, when a test case
needs a function value for a callback parameter, every function with the
required signature can be found with one lookup.

Architecture:
    - Signatures are interned by structural key into dense SignatureIds
    - Every inserted function gets a fresh, dense FunctionId
    - _slots maps SignatureId -> FunctionIds in insertion order

The manager only grows, and only while the metadata store is being loaded
on a single thread. freeze() is called when the store is published.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

from cafsynth.core.identity import IncrementIdAllocator
from cafsynth.integrity import raise_if_frozen

from .signature import FunctionSignature, SignatureKey

__all__ = ["CallbackFunctionIdentifier", "CallbackFunctionManager"]


@dataclass(frozen=True, slots=True)
class CallbackFunctionIdentifier:
    """Identity of one inserted callback function.

    Attributes:
        signature_id: Id of the structurally interned signature
        function_id: Globally unique, dense function id
    """

    signature_id: int
    function_id: int


class CallbackFunctionManager:
    """Interning table of signatures plus SignatureId -> FunctionIds slots.

    Guarantees:
        - After n inserts the returned function ids are exactly {0, ..., n-1}
        - Structurally equal signatures get the same signature id

    Example:
        >>> manager = CallbackFunctionManager()
        >>> a = manager.insert(FunctionSignature())
        >>> b = manager.insert(FunctionSignature())
        >>> a.signature_id == b.signature_id, a.function_id, b.function_id
        (True, 0, 1)
    """

    __slots__ = ("_frozen", "_func_id_alloc", "_signature_ids", "_slots")

    def __init__(self) -> None:
        """Initialize empty manager."""
        self._signature_ids: dict[SignatureKey, int] = {}
        self._slots: dict[int, list[int]] = {}
        self._func_id_alloc = IncrementIdAllocator()
        self._frozen = False

    def insert(self, signature: FunctionSignature) -> CallbackFunctionIdentifier:
        """Register a function with the given signature.

        Args:
            signature: Signature of the function being registered

        Returns:
            Interned signature id and freshly allocated function id

        Raises:
            ImmutabilityViolationError: If the manager has been frozen
        """
        raise_if_frozen(self._frozen, "CallbackFunctionManager", "insert")

        key = signature.structural_key()
        signature_id = self._signature_ids.get(key)
        if signature_id is None:
            signature_id = len(self._signature_ids)
            self._signature_ids[key] = signature_id
            self._slots[signature_id] = []

        function_id = self._func_id_alloc()
        self._slots[signature_id].append(function_id)
        return CallbackFunctionIdentifier(signature_id=signature_id, function_id=function_id)

    def find_signature_id(self, signature: FunctionSignature) -> int | None:
        """Look up the interned id of a structurally equal signature, if any."""
        return self._signature_ids.get(signature.structural_key())

    def get_function_ids(self, signature_id: int) -> tuple[int, ...]:
        """Function ids registered under signature_id, in insertion order.

        Unknown signature ids yield an empty tuple.
        """
        return tuple(self._slots.get(signature_id, ()))

    def get_compatible_functions(self, signature: FunctionSignature) -> tuple[int, ...]:
        """Function ids whose signature is structurally equal to ``signature``."""
        signature_id = self.find_signature_id(signature)
        if signature_id is None:
            return ()
        return self.get_function_ids(signature_id)

    @property
    def signature_count(self) -> int:
        """Number of distinct interned signatures."""
        return len(self._signature_ids)

    @property
    def function_count(self) -> int:
        """Number of functions inserted so far."""
        return self._func_id_alloc.count

    def freeze(self) -> None:
        """Reject further inserts (idempotent)."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        """Whether freeze() has been called."""
        return self._frozen

    def __repr__(self) -> str:
        return (
            f"CallbackFunctionManager(signatures={self.signature_count}, "
            f"functions={self.function_count})"
        )
