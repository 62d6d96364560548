"""Metadata model of the fuzzing target.

Describes which value kinds are legal where: kind sets, function signatures,
the callback registry grouping functions by signature, and the read-only
store resolving function/constructor/type ids.

Python 3.13+.
"""

from .callbacks import CallbackFunctionIdentifier, CallbackFunctionManager
from .kinds import ValueKindSet
from .loader import dump_store, load_store, load_store_file
from .signature import FunctionSignature
from .store import Constructor, Function, MetadataStore, StoreStatistics, Type

__all__ = [
    "CallbackFunctionIdentifier",
    "CallbackFunctionManager",
    "Constructor",
    "Function",
    "FunctionSignature",
    "MetadataStore",
    "StoreStatistics",
    "Type",
    "ValueKindSet",
    "dump_store",
    "load_store",
    "load_store_file",
]
