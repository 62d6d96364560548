"""Target registry: strategy and builder construction by target name.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from cafsynth.config import SynthesisConfig
from cafsynth.diagnostics import ErrorTemplate, UnknownTargetError
from cafsynth.enums import TargetKind
from cafsynth.metadata import MetadataStore

from .builder import SynthesisBuilder
from .chrome import ChromeStrategy
from .javascript import JavaScriptStrategy
from .nodejs import NodejsStrategy

__all__ = ["available_targets", "create_builder", "create_strategy", "parse_target"]

_STRATEGIES: dict[TargetKind, type[JavaScriptStrategy]] = {
    TargetKind.JS: JavaScriptStrategy,
    TargetKind.NODEJS: NodejsStrategy,
    TargetKind.CHROME: ChromeStrategy,
}


def available_targets() -> tuple[str, ...]:
    """Names accepted by create_strategy()."""
    return tuple(str(target) for target in _STRATEGIES)


def parse_target(target: TargetKind | str) -> TargetKind:
    """Resolve a target name (case-insensitive).

    Raises:
        UnknownTargetError: If no strategy is registered under the name
    """
    if isinstance(target, TargetKind):
        return target
    try:
        return TargetKind(str(target).lower())
    except ValueError:
        raise UnknownTargetError(
            ErrorTemplate.unknown_target(str(target), available_targets())
        ) from None


def create_strategy(
    target: TargetKind | str, store: MetadataStore, config: SynthesisConfig | None = None
) -> JavaScriptStrategy:
    """Fresh emission strategy for one session against ``store``.

    Raises:
        UnknownTargetError: If no strategy is registered under the name
    """
    return _STRATEGIES[parse_target(target)](store, config)


def create_builder(
    target: TargetKind | str, store: MetadataStore, config: SynthesisConfig | None = None
) -> SynthesisBuilder:
    """Fresh synthesis session for ``target`` against ``store``.

    Raises:
        UnknownTargetError: If no strategy is registered under the name
    """
    return SynthesisBuilder(create_strategy(target, store, config), config)
