"""Tests for integrity exceptions and raise_if_frozen."""

from __future__ import annotations

import pytest

from cafsynth.diagnostics import CafError
from cafsynth.integrity import (
    DataIntegrityError,
    ImmutabilityViolationError,
    IntegrityContext,
    raise_if_frozen,
)


class TestDataIntegrityError:
    """Immutability of the integrity error itself."""

    def test_not_a_caf_error(self) -> None:
        """Integrity errors live in their own domain."""
        assert not issubclass(DataIntegrityError, CafError)

    def test_context_preserved(self) -> None:
        """Context is available as a read-only property."""
        context = IntegrityContext("MetadataStore", "add_function", "print")
        error = DataIntegrityError("msg", context)
        assert error.context is context
        assert "MetadataStore" in repr(error)

    def test_setattr_rejected(self) -> None:
        """Attributes cannot be changed after construction."""
        error = DataIntegrityError("msg")
        with pytest.raises(ImmutabilityViolationError):
            error.extra = 1  # type: ignore[attr-defined]

    def test_delattr_rejected(self) -> None:
        """Attributes cannot be deleted."""
        error = DataIntegrityError("msg")
        with pytest.raises(ImmutabilityViolationError):
            del error._context

    def test_raise_and_chain(self) -> None:
        """Python's exception machinery can still set traceback and cause."""
        with pytest.raises(DataIntegrityError) as info:
            try:
                raise KeyError("k")
            except KeyError as exc:
                raise DataIntegrityError("wrapped") from exc
        assert isinstance(info.value.__cause__, KeyError)


class TestRaiseIfFrozen:
    """raise_if_frozen guard."""

    def test_not_frozen_is_noop(self) -> None:
        """Nothing happens for unfrozen components."""
        raise_if_frozen(False, "FunctionSignature", "add_param_kinds")

    def test_frozen_raises_with_context(self) -> None:
        """Frozen components raise with a populated context."""
        with pytest.raises(ImmutabilityViolationError) as info:
            raise_if_frozen(True, "MetadataStore", "add_type", "Buffer")
        context = info.value.context
        assert context is not None
        assert context.component == "MetadataStore"
        assert context.operation == "add_type"
        assert context.key == "Buffer"
