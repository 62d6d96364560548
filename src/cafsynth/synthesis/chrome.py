"""Headless Chrome emission strategy.

Same syntax as plain JavaScript, wrapped in the browser host's navigation
and close directives. Optionally logs a progress marker after every call so
a crash can be attributed to the last API that started.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Sequence

from cafsynth.config import SynthesisConfig
from cafsynth.core.identity import IncrementIdAllocator
from cafsynth.metadata import MetadataStore

from .javascript import JavaScriptStrategy

__all__ = ["ChromeStrategy"]


class ChromeStrategy(JavaScriptStrategy):
    """Emission strategy for the headless Chrome host."""

    def __init__(self, store: MetadataStore, config: SynthesisConfig | None = None) -> None:
        super().__init__(store, config)
        self._api_numbers = IncrementIdAllocator()

    def enter_main_function(self, output: list[str]) -> None:
        output.append(f"{self.config.chrome_open_directive}\n")

    def leave_function(self, output: list[str]) -> None:
        output.append(f"{self.config.chrome_close_directive}\n")

    def write_function_call(
        self,
        output: list[str],
        result_name: str,
        function_name: str,
        receiver_name: str | None,
        is_ctor_call: bool,
        arg_names: Sequence[str],
    ) -> None:
        super().write_function_call(
            output, result_name, function_name, receiver_name, is_ctor_call, arg_names
        )
        if self.config.chrome_progress_markers:
            output.append(f'console.log("API No.{self._api_numbers()} finished.");\n')
