"""Synthesis configuration.

Provides a single frozen dataclass holding every tunable of the synthesis
engine and its target strategies, so a builder is configured by one typed
object instead of a growing list of keyword arguments.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from cafsynth.constants import (
    CHROME_CLOSE_DIRECTIVE,
    CHROME_OPEN_DIRECTIVE,
    DEFAULT_VARIABLE_PREFIX,
    MAX_DEPTH,
    NODE_BUILTIN_MODULES,
)

__all__ = ["SynthesisConfig"]


def _is_identifier_start(ch: str) -> bool:
    return ch == "_" or ch == "$" or (ch.isascii() and ch.isalpha())


@dataclass(frozen=True, slots=True)
class SynthesisConfig:
    """Immutable configuration for one synthesis session.

    ``SynthesisConfig()`` with no arguments reproduces the default output
    format. Instances are shared freely between sessions and threads.

    Attributes:
        variable_prefix: Prefix of generated variable names (default: "v").
            Must start a valid JavaScript identifier and contain only ASCII
            letters, digits, "_" or "$".
        max_depth: Maximum array nesting depth (default: 100).
        node_builtin_modules: Module names the Node.js strategy imports on
            first use (default: the Node.js built-in modules).
        chrome_open_directive: First line emitted by the Chrome strategy.
        chrome_close_directive: Last line emitted by the Chrome strategy.
        chrome_progress_markers: Emit a console.log() marker after every call
            statement in Chrome programs (default: False).

    Example:
        >>> config = SynthesisConfig(variable_prefix="t")
        >>> config.variable_prefix
        't'
    """

    variable_prefix: str = DEFAULT_VARIABLE_PREFIX
    max_depth: int = MAX_DEPTH
    node_builtin_modules: frozenset[str] = NODE_BUILTIN_MODULES
    chrome_open_directive: str = CHROME_OPEN_DIRECTIVE
    chrome_close_directive: str = CHROME_CLOSE_DIRECTIVE
    chrome_progress_markers: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If variable_prefix is not a valid identifier prefix,
                max_depth is not positive, or a Chrome directive spans lines.
        """
        prefix = self.variable_prefix
        if not prefix or not _is_identifier_start(prefix[0]):
            msg = f"variable_prefix must start a JavaScript identifier, got {prefix!r}"
            raise ValueError(msg)
        if not all(_is_identifier_start(ch) or (ch.isascii() and ch.isdigit()) for ch in prefix):
            msg = f"variable_prefix contains invalid characters: {prefix!r}"
            raise ValueError(msg)
        if self.max_depth <= 0:
            msg = "max_depth must be positive"
            raise ValueError(msg)
        for directive in (self.chrome_open_directive, self.chrome_close_directive):
            if "\n" in directive or "\r" in directive:
                msg = f"Chrome directives must be single lines, got {directive!r}"
                raise ValueError(msg)
        object.__setattr__(self, "node_builtin_modules", frozenset(self.node_builtin_modules))
