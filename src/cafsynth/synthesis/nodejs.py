"""Node.js emission strategy.

Same syntax as plain JavaScript, plus import on demand: the first time a
function from a built-in module is referenced, the module is bound with
``require`` on the line just before the use.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from cafsynth.config import SynthesisConfig
from cafsynth.constants import MODULE_SEPARATOR
from cafsynth.metadata import MetadataStore
from cafsynth.testcase.values import FunctionValue, Value

from .javascript import JavaScriptStrategy

__all__ = ["NodejsStrategy", "module_of"]

logger = logging.getLogger(__name__)


def module_of(function_name: str, modules: frozenset[str]) -> str | None:
    """Built-in module a qualified export name lives in, if any.

    Only a qualified name counts: the leading segment (up to the first ".")
    is the candidate module name, and a bare name is never a module export.

    Example:
        >>> module_of("fs.readFileSync", frozenset({"fs"}))
        'fs'
        >>> module_of("Buffer.from", frozenset({"fs"})) is None
        True
        >>> module_of("fs", frozenset({"fs"})) is None
        True
    """
    head, separator, _ = function_name.partition(MODULE_SEPARATOR)
    if not separator:
        return None
    return head if head in modules else None


class NodejsStrategy(JavaScriptStrategy):
    """Emission strategy for Node.js scripts.

    Tracks the modules imported in the current session; every module is
    required at most once.
    """

    def __init__(self, store: MetadataStore, config: SynthesisConfig | None = None) -> None:
        super().__init__(store, config)
        self._modules = self.config.node_builtin_modules
        self._imported: set[str] = set()

    @property
    def reserved_names(self) -> frozenset[str]:
        # Module bindings share the program's top-level scope ("v8").
        return self._modules

    @property
    def imported_modules(self) -> frozenset[str]:
        """Modules required so far in this session."""
        return frozenset(self._imported)

    def _write_require(self, output: list[str], function_name: str) -> None:
        module = module_of(function_name, self._modules)
        if module is None or module in self._imported:
            return
        output.append(f'const {module} = require("{module}");\n')
        self._imported.add(module)
        logger.debug("Required Node.js module '%s'", module)

    def write_variable_def(self, output: list[str], name: str, value: Value) -> None:
        if isinstance(value, FunctionValue):
            self._write_require(output, self.store.get_function(value.function_id).name)
        super().write_variable_def(output, name, value)

    def write_function_call(
        self,
        output: list[str],
        result_name: str,
        function_name: str,
        receiver_name: str | None,
        is_ctor_call: bool,
        arg_names: Sequence[str],
    ) -> None:
        # A receiver call names a member of the receiver, not a module export.
        if receiver_name is None:
            self._write_require(output, function_name)
        super().write_function_call(
            output, result_name, function_name, receiver_name, is_ctor_call, arg_names
        )
