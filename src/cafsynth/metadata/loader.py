"""Build a MetadataStore from its JSON description.

Two document shapes are accepted:

Full form::

    {
      "signatures":   [{"id": 0, "this": ["Undefined"], "params": [["String"], ["Function"]]}],
      "types":        [{"id": 0, "name": "Buffer"}],
      "functions":    [{"id": 0, "name": "fs.readFile", "signature": 0}],
      "constructors": [{"id": 0, "type": 0, "signature": 0}]
    }

Every section is optional; ids are optional but, when present, must be the
dense sequence 0, 1, 2, ... in declaration order.

Legacy form: a bare JSON array of function names. Each function gets its
own signature accepting any kind as receiver and declaring no parameters.

The store is published before it is returned.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from cafsynth.diagnostics import ErrorTemplate, MetadataLoadError
from cafsynth.enums import ValueKind

from .kinds import ValueKindSet
from .signature import FunctionSignature
from .store import MetadataStore

__all__ = ["dump_store", "load_store", "load_store_file"]

logger = logging.getLogger(__name__)


def _malformed(location: str, detail: str) -> MetadataLoadError:
    return MetadataLoadError(ErrorTemplate.metadata_malformed(location, detail))


def _expect_list(data: object, location: str) -> Sequence[Any]:
    if not isinstance(data, list):
        raise _malformed(location, f"expected an array, got {type(data).__name__}")
    return data


def _expect_object(data: object, location: str) -> Mapping[str, Any]:
    if not isinstance(data, dict):
        raise _malformed(location, f"expected an object, got {type(data).__name__}")
    return data


def _expect_int(entry: Mapping[str, Any], key: str, location: str) -> int:
    value = entry.get(key)
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        raise _malformed(f"{location}.{key}", f"expected an integer, got {value!r}")
    return value


def _optional_id(entry: Mapping[str, Any], location: str) -> int | None:
    if "id" not in entry:
        return None
    return _expect_int(entry, "id", location)


def _expect_name(entry: Mapping[str, Any], key: str, location: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value:
        raise _malformed(f"{location}.{key}", f"expected a non-empty string, got {value!r}")
    return value


def _parse_kinds(data: object, location: str) -> ValueKindSet:
    kinds = ValueKindSet()
    for i, name in enumerate(_expect_list(data, location)):
        try:
            kind = ValueKind.parse(name)
        except ValueError:
            raise MetadataLoadError(
                ErrorTemplate.unknown_value_kind(f"{location}[{i}]", name)
            ) from None
        if kind is ValueKind.PLACEHOLDER:
            raise MetadataLoadError(ErrorTemplate.unknown_value_kind(f"{location}[{i}]", name))
        kinds.add(kind)
    return kinds


def _parse_signature(data: object, location: str) -> FunctionSignature:
    entry = _expect_object(data, location)
    this_kinds = (
        _parse_kinds(entry["this"], f"{location}.this")
        if "this" in entry
        else ValueKindSet.create_full()
    )
    signature = FunctionSignature(this_kinds)
    for i, param in enumerate(_expect_list(entry.get("params", []), f"{location}.params")):
        signature.add_param_kinds(_parse_kinds(param, f"{location}.params[{i}]"))
    return signature


def _load_legacy(names: Sequence[Any]) -> MetadataStore:
    store = MetadataStore()
    for i, name in enumerate(names):
        if not isinstance(name, str) or not name:
            raise _malformed(f"[{i}]", f"expected a function name, got {name!r}")
        signature_id = store.add_signature(FunctionSignature(ValueKindSet.create_full()))
        store.add_function(name, signature_id)
    return store


def _load_full(document: Mapping[str, Any]) -> MetadataStore:
    store = MetadataStore()

    for i, data in enumerate(_expect_list(document.get("signatures", []), "signatures")):
        location = f"signatures[{i}]"
        entry = _expect_object(data, location)
        store.add_signature(
            _parse_signature(entry, location), signature_id=_optional_id(entry, location)
        )

    for i, data in enumerate(_expect_list(document.get("types", []), "types")):
        location = f"types[{i}]"
        entry = _expect_object(data, location)
        store.add_type(_expect_name(entry, "name", location), type_id=_optional_id(entry, location))

    for i, data in enumerate(_expect_list(document.get("functions", []), "functions")):
        location = f"functions[{i}]"
        entry = _expect_object(data, location)
        store.add_function(
            _expect_name(entry, "name", location),
            _expect_int(entry, "signature", location),
            function_id=_optional_id(entry, location),
        )

    for i, data in enumerate(_expect_list(document.get("constructors", []), "constructors")):
        location = f"constructors[{i}]"
        entry = _expect_object(data, location)
        store.add_constructor(
            _expect_int(entry, "type", location),
            _expect_int(entry, "signature", location),
            name=_expect_name(entry, "name", location) if "name" in entry else None,
            constructor_id=_optional_id(entry, location),
        )

    return store


def load_store(document: object) -> MetadataStore:
    """Build and publish a MetadataStore from a decoded JSON document.

    Args:
        document: Result of json.load() on a metadata file

    Returns:
        Published, read-only MetadataStore

    Raises:
        MetadataLoadError: If the document is structurally invalid
        MetadataReferenceError: If a record references an unknown signature or type

    Example:
        >>> store = load_store(["fs.readFileSync", "print"])
        >>> store.get_function(1).name
        'print'
    """
    if isinstance(document, list):
        store = _load_legacy(document)
    elif isinstance(document, dict):
        store = _load_full(document)
    else:
        raise _malformed("$", f"expected an object or an array, got {type(document).__name__}")
    store.publish()
    return store


def load_store_file(path: str | Path) -> MetadataStore:
    """Read, decode and load a metadata JSON file.

    Raises:
        OSError: If the file cannot be read
        MetadataLoadError: If the file is not UTF-8 JSON or not a valid store
    """
    path = Path(path)
    logger.debug("Loading metadata store from %s", path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise _malformed(str(path), f"invalid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise _malformed(str(path), f"not valid UTF-8: {e.reason} at byte {e.start}") from e
    return load_store(document)


def _dump_kinds(kinds: ValueKindSet) -> list[str]:
    return [kind.display_name for kind in kinds]


def dump_store(store: MetadataStore) -> dict[str, list[dict[str, Any]]]:
    """Render a store in the full JSON form accepted by load_store()."""
    signatures = []
    for signature_id in range(store.signature_count):
        signature = store.get_signature(signature_id)
        signatures.append({
            "id": signature_id,
            "this": _dump_kinds(signature.this_kinds),
            "params": [_dump_kinds(kinds) for kinds in signature.param_kinds],
        })
    return {
        "signatures": signatures,
        "types": [{"id": t.id, "name": t.name} for t in store.types],
        "functions": [
            {"id": f.id, "name": f.name, "signature": f.signature_id} for f in store.functions
        ],
        "constructors": [
            {"id": c.id, "type": c.type_id, "name": c.name, "signature": c.signature_id}
            for c in store.constructors
        ],
    }
