"""Read-only metadata store.

The store records every exported function, constructor, type and function
signature of the target, each addressed by a dense integer id. Those ids are
the only references test cases hold into the store.

Lifecycle:
    1. Built once, single-threaded, by the loader (add_* methods)
    2. publish() freezes the store, its signatures and its callback manager
    3. Shared read-only by any number of synthesis sessions and threads

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cafsynth.core.identity import IncrementIdAllocator
from cafsynth.diagnostics import ErrorTemplate, MetadataLoadError, MetadataReferenceError
from cafsynth.integrity import raise_if_frozen

from .callbacks import CallbackFunctionIdentifier, CallbackFunctionManager
from .signature import FunctionSignature

__all__ = [
    "Constructor",
    "Function",
    "MetadataStore",
    "StoreStatistics",
    "Type",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Type:
    """A JavaScript type (class) exported by the target.

    Attributes:
        id: Dense type id
        name: Export name of the type (e.g. "Buffer")
    """

    id: int
    name: str


@dataclass(frozen=True, slots=True)
class Function:
    """An exported API function.

    Attributes:
        id: Dense function id
        name: Fully-qualified export name (e.g. "fs.readFileSync")
        signature_id: Id of the function's signature in the store
    """

    id: int
    name: str
    signature_id: int


@dataclass(frozen=True, slots=True)
class Constructor:
    """A constructor of an exported type, invoked with ``new``.

    Attributes:
        id: Dense constructor id
        type_id: Id of the constructed type
        name: Export name used after ``new`` (usually the type's name)
        signature_id: Id of the constructor's signature in the store
    """

    id: int
    type_id: int
    name: str
    signature_id: int


@dataclass(frozen=True, slots=True)
class StoreStatistics:
    """Record counts of a metadata store."""

    functions: int
    constructors: int
    types: int
    signatures: int
    callback_signatures: int


class MetadataStore:
    """Id-addressed registry of types, functions, constructors and signatures.

    Example:
        >>> store = MetadataStore()
        >>> sig_id = store.add_signature(FunctionSignature())
        >>> func = store.add_function("print", sig_id)
        >>> store.publish()
        >>> store.get_function(func.id).name
        'print'
    """

    __slots__ = (
        "_callback_ids",
        "_callbacks",
        "_constructor_alloc",
        "_constructors",
        "_function_alloc",
        "_function_names",
        "_functions",
        "_published",
        "_signature_alloc",
        "_signatures",
        "_type_alloc",
        "_type_constructors",
        "_types",
    )

    def __init__(self) -> None:
        """Initialize empty, unpublished store."""
        self._signatures: list[FunctionSignature] = []
        self._types: list[Type] = []
        self._functions: list[Function] = []
        self._constructors: list[Constructor] = []
        self._type_constructors: dict[int, list[int]] = {}
        self._function_names: dict[str, int] = {}
        self._callback_ids: list[CallbackFunctionIdentifier] = []
        self._callbacks = CallbackFunctionManager()
        self._signature_alloc = IncrementIdAllocator()
        self._type_alloc = IncrementIdAllocator()
        self._function_alloc = IncrementIdAllocator()
        self._constructor_alloc = IncrementIdAllocator()
        self._published = False

    # ------------------------------------------------------------------
    # Construction (loading phase only)
    # ------------------------------------------------------------------

    @staticmethod
    def _allocate(alloc: IncrementIdAllocator, series: str, explicit_id: int | None) -> int:
        if explicit_id is not None and explicit_id != alloc.peek():
            raise MetadataLoadError(
                ErrorTemplate.metadata_id_mismatch(series, alloc.peek(), explicit_id)
            )
        return alloc()

    def add_signature(self, signature: FunctionSignature, *, signature_id: int | None = None) -> int:
        """Add a signature record.

        Args:
            signature: Signature to store; ownership moves to the store
            signature_id: Explicit id from a metadata file (must be the next dense id)

        Returns:
            Id of the stored signature

        Raises:
            MetadataLoadError: If signature_id breaks the dense sequence
            ImmutabilityViolationError: If the store has been published
        """
        raise_if_frozen(self._published, "MetadataStore", "add_signature")
        new_id = self._allocate(self._signature_alloc, "signature", signature_id)
        self._signatures.append(signature)
        return new_id

    def add_type(self, name: str, *, type_id: int | None = None) -> Type:
        """Add a type record.

        Raises:
            MetadataLoadError: If type_id breaks the dense sequence
            ImmutabilityViolationError: If the store has been published
        """
        raise_if_frozen(self._published, "MetadataStore", "add_type", name)
        new_id = self._allocate(self._type_alloc, "type", type_id)
        record = Type(id=new_id, name=name)
        self._types.append(record)
        self._type_constructors[new_id] = []
        return record

    def add_function(
        self, name: str, signature_id: int, *, function_id: int | None = None
    ) -> Function:
        """Add an exported function and register it as a callback candidate.

        Args:
            name: Fully-qualified export name
            signature_id: Id of an already added signature
            function_id: Explicit id from a metadata file (must be the next dense id)

        Returns:
            The stored Function record

        Raises:
            MetadataReferenceError: If signature_id is unknown
            MetadataLoadError: If function_id breaks the dense sequence
            ImmutabilityViolationError: If the store has been published
        """
        raise_if_frozen(self._published, "MetadataStore", "add_function", name)
        signature = self.get_signature(signature_id)
        new_id = self._allocate(self._function_alloc, "function", function_id)

        callback_id = self._callbacks.insert(signature)
        # Both series are dense and advance together.
        assert callback_id.function_id == new_id

        record = Function(id=new_id, name=name, signature_id=signature_id)
        self._functions.append(record)
        self._callback_ids.append(callback_id)
        if name in self._function_names:
            logger.warning(
                "Duplicate function name '%s' (ids %d and %d); name lookup keeps the first",
                name,
                self._function_names[name],
                new_id,
            )
        else:
            self._function_names[name] = new_id
        return record

    def add_constructor(
        self,
        type_id: int,
        signature_id: int,
        *,
        name: str | None = None,
        constructor_id: int | None = None,
    ) -> Constructor:
        """Add a constructor of an existing type.

        Args:
            type_id: Id of the constructed type
            signature_id: Id of an already added signature
            name: Name used after ``new`` (default: the type's name)
            constructor_id: Explicit id from a metadata file

        Returns:
            The stored Constructor record

        Raises:
            MetadataReferenceError: If type_id or signature_id is unknown
            MetadataLoadError: If constructor_id breaks the dense sequence
            ImmutabilityViolationError: If the store has been published
        """
        raise_if_frozen(self._published, "MetadataStore", "add_constructor", name)
        owner = self.get_type(type_id)
        self.get_signature(signature_id)
        new_id = self._allocate(self._constructor_alloc, "constructor", constructor_id)
        record = Constructor(
            id=new_id,
            type_id=type_id,
            name=name if name is not None else owner.name,
            signature_id=signature_id,
        )
        self._constructors.append(record)
        self._type_constructors[type_id].append(new_id)
        return record

    def publish(self) -> None:
        """Freeze the store for concurrent read-only use (idempotent)."""
        if self._published:
            return
        for signature in self._signatures:
            signature.freeze()
        self._callbacks.freeze()
        self._published = True
        logger.info(
            "Published metadata store: %d function(s), %d constructor(s), %d type(s), "
            "%d signature(s)",
            len(self._functions),
            len(self._constructors),
            len(self._types),
            len(self._signatures),
        )

    @property
    def is_published(self) -> bool:
        """Whether publish() has been called."""
        return self._published

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_function(self, function_id: int) -> Function:
        """Resolve a function id.

        Raises:
            MetadataReferenceError: If function_id is not in the store
        """
        if not 0 <= function_id < len(self._functions):
            raise MetadataReferenceError(ErrorTemplate.function_not_found(function_id))
        return self._functions[function_id]

    def get_constructor(self, constructor_id: int) -> Constructor:
        """Resolve a constructor id.

        Raises:
            MetadataReferenceError: If constructor_id is not in the store
        """
        if not 0 <= constructor_id < len(self._constructors):
            raise MetadataReferenceError(ErrorTemplate.constructor_not_found(constructor_id))
        return self._constructors[constructor_id]

    def get_type(self, type_id: int) -> Type:
        """Resolve a type id.

        Raises:
            MetadataReferenceError: If type_id is not in the store
        """
        if not 0 <= type_id < len(self._types):
            raise MetadataReferenceError(ErrorTemplate.type_not_found(type_id))
        return self._types[type_id]

    def get_signature(self, signature_id: int) -> FunctionSignature:
        """Resolve a signature id.

        Raises:
            MetadataReferenceError: If signature_id is not in the store
        """
        if not 0 <= signature_id < len(self._signatures):
            raise MetadataReferenceError(ErrorTemplate.signature_not_found(signature_id))
        return self._signatures[signature_id]

    def get_function_signature(self, function_id: int) -> FunctionSignature:
        """Signature of the function with the given id."""
        return self.get_signature(self.get_function(function_id).signature_id)

    def get_constructor_signature(self, constructor_id: int) -> FunctionSignature:
        """Signature of the constructor with the given id."""
        return self.get_signature(self.get_constructor(constructor_id).signature_id)

    def get_type_constructors(self, type_id: int) -> tuple[Constructor, ...]:
        """Constructors of a type in declaration order."""
        self.get_type(type_id)
        return tuple(self._constructors[i] for i in self._type_constructors[type_id])

    def get_callback_id(self, function_id: int) -> CallbackFunctionIdentifier:
        """Callback identifier assigned to a function when it was added."""
        self.get_function(function_id)
        return self._callback_ids[function_id]

    def find_function(self, name: str) -> Function | None:
        """Find a function by export name (first one added wins)."""
        function_id = self._function_names.get(name)
        return self._functions[function_id] if function_id is not None else None

    @property
    def functions(self) -> tuple[Function, ...]:
        """All functions in id order."""
        return tuple(self._functions)

    @property
    def constructors(self) -> tuple[Constructor, ...]:
        """All constructors in id order."""
        return tuple(self._constructors)

    @property
    def types(self) -> tuple[Type, ...]:
        """All types in id order."""
        return tuple(self._types)

    @property
    def signature_count(self) -> int:
        """Number of stored signatures."""
        return len(self._signatures)

    @property
    def callbacks(self) -> CallbackFunctionManager:
        """Signature-grouped view of all functions."""
        return self._callbacks

    def get_statistics(self) -> StoreStatistics:
        """Count the records held by the store."""
        return StoreStatistics(
            functions=len(self._functions),
            constructors=len(self._constructors),
            types=len(self._types),
            signatures=len(self._signatures),
            callback_signatures=self._callbacks.signature_count,
        )

    def __repr__(self) -> str:
        return (
            f"MetadataStore(functions={len(self._functions)}, "
            f"constructors={len(self._constructors)}, types={len(self._types)}, "
            f"published={self._published})"
        )
