"""Tests for MetadataStore construction, lookup and publishing.

Python 3.13+.
"""

from __future__ import annotations

import logging

import pytest

from cafsynth.diagnostics import DiagnosticCode, MetadataLoadError, MetadataReferenceError
from cafsynth.enums import ValueKind
from cafsynth.integrity import ImmutabilityViolationError
from cafsynth.metadata import FunctionSignature, MetadataStore, StoreStatistics, ValueKindSet


def _store_with_function(name: str = "print") -> MetadataStore:
    store = MetadataStore()
    store.add_function(name, store.add_signature(FunctionSignature()))
    return store


class TestConstruction:
    """add_* operations."""

    def test_ids_are_dense_per_series(self) -> None:
        """Each record series counts from 0 independently."""
        store = MetadataStore()
        assert store.add_signature(FunctionSignature()) == 0
        assert store.add_signature(FunctionSignature()) == 1
        assert store.add_type("Buffer").id == 0
        assert store.add_function("a", 0).id == 0
        assert store.add_function("b", 1).id == 1
        assert store.add_constructor(0, 0).id == 0

    def test_explicit_ids_must_be_dense(self) -> None:
        """An explicit id that skips ahead is rejected."""
        store = MetadataStore()
        store.add_signature(FunctionSignature(), signature_id=0)
        with pytest.raises(MetadataLoadError) as info:
            store.add_signature(FunctionSignature(), signature_id=5)
        assert info.value.diagnostic is not None
        assert info.value.diagnostic.code is DiagnosticCode.METADATA_ID_MISMATCH

    def test_function_with_unknown_signature(self) -> None:
        """Functions must reference an existing signature."""
        with pytest.raises(MetadataReferenceError):
            MetadataStore().add_function("f", 0)

    def test_constructor_name_defaults_to_type(self) -> None:
        """Constructors are named after their type unless told otherwise."""
        store = MetadataStore()
        sig = store.add_signature(FunctionSignature())
        buffer_type = store.add_type("Buffer")
        assert store.add_constructor(buffer_type.id, sig).name == "Buffer"
        assert store.add_constructor(buffer_type.id, sig, name="Buffer.alloc").name == "Buffer.alloc"
        assert [c.id for c in store.get_type_constructors(buffer_type.id)] == [0, 1]

    def test_constructor_with_unknown_type(self) -> None:
        """Constructors must reference an existing type."""
        store = MetadataStore()
        sig = store.add_signature(FunctionSignature())
        with pytest.raises(MetadataReferenceError):
            store.add_constructor(3, sig)

    def test_functions_registered_as_callbacks(self) -> None:
        """Every function is inserted into the callback manager."""
        store = MetadataStore()
        sig_a = store.add_signature(FunctionSignature(ValueKindSet.create_full()))
        sig_b = store.add_signature(FunctionSignature(ValueKindSet.create_full()))
        store.add_function("a", sig_a)
        store.add_function("b", sig_b)
        # Two store records, one structural signature
        assert store.get_callback_id(0).signature_id == store.get_callback_id(1).signature_id
        assert store.get_callback_id(1).function_id == 1
        assert store.callbacks.get_function_ids(0) == (0, 1)

    def test_duplicate_name_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        """Duplicate export names are kept but logged; lookup returns the first."""
        store = _store_with_function("dup")
        with caplog.at_level(logging.WARNING, logger="cafsynth.metadata.store"):
            store.add_function("dup", 0)
        assert "Duplicate function name" in caplog.text
        found = store.find_function("dup")
        assert found is not None
        assert found.id == 0


class TestLookup:
    """get_* operations."""

    def test_get_function(self) -> None:
        """Known ids resolve to their records."""
        store = _store_with_function("print")
        function = store.get_function(0)
        assert function.name == "print"
        assert store.get_function_signature(0) is store.get_signature(function.signature_id)

    @pytest.mark.parametrize("function_id", [-1, 1, 99])
    def test_unknown_function(self, function_id: int) -> None:
        """Unknown ids raise MetadataReferenceError with FUNCTION_NOT_FOUND."""
        store = _store_with_function()
        with pytest.raises(MetadataReferenceError) as info:
            store.get_function(function_id)
        assert info.value.diagnostic is not None
        assert info.value.diagnostic.code is DiagnosticCode.FUNCTION_NOT_FOUND

    def test_unknown_ids_per_series(self) -> None:
        """Every series reports its own missing-id error."""
        store = MetadataStore()
        with pytest.raises(MetadataReferenceError, match="Constructor id 0"):
            store.get_constructor(0)
        with pytest.raises(MetadataReferenceError, match="Type id 0"):
            store.get_type(0)
        with pytest.raises(MetadataReferenceError, match="Signature id 0"):
            store.get_signature(0)

    def test_find_function_missing(self) -> None:
        """Name lookup returns None for unknown names."""
        assert _store_with_function().find_function("nope") is None

    def test_statistics(self, sample_store: MetadataStore) -> None:
        """Statistics count every record series."""
        assert sample_store.get_statistics() == StoreStatistics(
            functions=6,
            constructors=1,
            types=1,
            signatures=6,
            callback_signatures=5,
        )

    def test_views_are_tuples(self, sample_store: MetadataStore) -> None:
        """Record views are immutable snapshots in id order."""
        assert isinstance(sample_store.functions, tuple)
        assert [f.id for f in sample_store.functions] == list(range(6))
        assert sample_store.types[0].name == "Buffer"
        assert sample_store.constructors[0].type_id == 0


class TestPublish:
    """Read-only phase."""

    def test_publish_freezes_everything(self) -> None:
        """Published stores reject writes to the store, signatures and callbacks."""
        store = _store_with_function()
        store.publish()
        assert store.is_published
        with pytest.raises(ImmutabilityViolationError):
            store.add_function("g", 0)
        with pytest.raises(ImmutabilityViolationError):
            store.add_signature(FunctionSignature())
        with pytest.raises(ImmutabilityViolationError):
            store.add_type("T")
        with pytest.raises(ImmutabilityViolationError):
            store.get_signature(0).add_param_kinds(ValueKindSet())
        with pytest.raises(ImmutabilityViolationError):
            store.callbacks.insert(FunctionSignature())

    def test_publish_idempotent(self, caplog: pytest.LogCaptureFixture) -> None:
        """Publishing twice logs once."""
        store = _store_with_function()
        with caplog.at_level(logging.INFO, logger="cafsynth.metadata.store"):
            store.publish()
            store.publish()
        assert caplog.text.count("Published metadata store") == 1

    def test_reads_after_publish(self) -> None:
        """Lookups keep working after publish."""
        store = _store_with_function("print")
        store.publish()
        assert store.get_function(0).name == "print"
        assert ValueKind.STRING not in store.get_signature(0).this_kinds
