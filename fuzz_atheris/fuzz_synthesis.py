#!/usr/bin/env python3
# FUZZ_PLUGIN_HEADER_START
# FUZZ_PLUGIN: synthesis - Value Graph Synthesis, Escaping & Loaders
# Intentional: This header is intentionally placed for dynamic plugin discovery.
# CRITICAL: DO NOT REMOVE THIS HEADER - REQUIRED FOR PLUGIN DISCOVERY
# FUZZ_PLUGIN_HEADER_END
"""Synthesis Fuzzer (Atheris).

Targets: cafsynth.synthesis, cafsynth.testcase.loader, cafsynth.metadata.loader

Concern boundary: This fuzzer drives the synthesis engine with value graphs
and test cases decoded from raw fuzz input, for all three targets. It checks
memoization (one definition per node), name monotonicity, Node.js import
uniqueness, Chrome directive bracketing, and string escape round-trips.
The JSON loaders are fed arbitrary documents and must fail only with
CafError subclasses.

Metrics:
- Pattern coverage (graph_synthesis, escape_roundtrip, etc.)
- Performance profiling (min/mean/median/p95/max)
- Real memory usage (RSS via psutil)
- Seed corpus management

Requires Python 3.13+ (uses PEP 695 type aliases).
"""

from __future__ import annotations

import argparse
import atexit
import gc
import json
import logging
import pathlib
import re
import sys
import time
from dataclasses import dataclass
from typing import Any

import atheris
from fuzz_common import (
    GC_INTERVAL,
    BaseFuzzerState,
    build_base_stats_dict,
    build_weighted_schedule,
    emit_checkpoint_report,
    emit_final_report,
    get_process,
    print_fuzzer_banner,
    record_error,
    record_iteration_metrics,
    record_memory,
    run_fuzzer,
    select_pattern_round_robin,
)

# --- Domain Metrics ---


@dataclass
class SynthesisMetrics:
    """Domain-specific metrics for the synthesis fuzzer."""

    nodes_synthesised: int = 0
    statements_emitted: int = 0
    test_cases_loaded: int = 0
    stores_loaded: int = 0


# --- Global State ---

_state = BaseFuzzerState(
    fuzzer_name="synthesis",
    fuzzer_target="SynthesisBuilder, strategies, JSON loaders",
)
_domain = SynthesisMetrics()

_PATTERN_WEIGHTS: tuple[tuple[str, int], ...] = (
    ("escape_roundtrip", 10),
    ("node_imports", 6),
    ("graph_synthesis", 20),
    ("testcase_json", 12),
    ("metadata_json", 8),
)

_PATTERN_NAMES = tuple(name for name, _ in _PATTERN_WEIGHTS)
_PATTERN_SCHEDULE: tuple[str, ...] = build_weighted_schedule(
    _PATTERN_NAMES, tuple(w for _, w in _PATTERN_WEIGHTS)
)


class SynthesisFuzzError(Exception):
    """Raised when a synthesis invariant is breached."""


# --- Reporting ---

_REPORT_DIR = pathlib.Path(".fuzz_atheris_corpus") / "synthesis"
_REPORT_FILENAME = "fuzz_synthesis_report.json"


def _build_stats_dict() -> dict[str, Any]:
    stats = build_base_stats_dict(_state)
    stats["nodes_synthesised"] = _domain.nodes_synthesised
    stats["statements_emitted"] = _domain.statements_emitted
    stats["test_cases_loaded"] = _domain.test_cases_loaded
    stats["stores_loaded"] = _domain.stores_loaded
    return stats


def _emit_report() -> None:
    """Emit comprehensive final report (crash-proof)."""
    emit_final_report(_state, _build_stats_dict(), _REPORT_DIR, _REPORT_FILENAME)


atexit.register(_emit_report)

logging.getLogger("cafsynth").setLevel(logging.CRITICAL)

atheris.enabled_hooks.add("str")

with atheris.instrument_imports(include=["cafsynth"]):
    from cafsynth.constants import CHROME_CLOSE_DIRECTIVE, CHROME_OPEN_DIRECTIVE
    from cafsynth.diagnostics import CafError
    from cafsynth.metadata import FunctionSignature, MetadataStore, ValueKindSet, load_store
    from cafsynth.synthesis import create_builder, escape_string, synthesise_test_case
    from cafsynth.testcase import Value, ValuePool, load_test_case

_DEFINITION = re.compile(r"^let (v\d+) = ", re.MULTILINE)

_FUNCTION_NAMES = ("gc", "fs.readFileSync", "path.join", "Buffer.from", "v8.serialize")


def _make_store() -> MetadataStore:
    store = MetadataStore()
    signature_id = store.add_signature(FunctionSignature(ValueKindSet.create_full()))
    for name in _FUNCTION_NAMES:
        store.add_function(name, signature_id)
    store.publish()
    return store


_STORE = _make_store()


def _consume_graph(fdp: atheris.FuzzedDataProvider) -> list[Value]:
    pool = ValuePool()
    nodes: list[Value] = []
    for _ in range(fdp.ConsumeIntInRange(1, 40)):
        choice = fdp.ConsumeIntInRange(0, 7)
        match choice:
            case 0:
                nodes.append(pool.get_undefined())
            case 1:
                nodes.append(pool.get_null())
            case 2:
                nodes.append(pool.get_boolean(fdp.ConsumeBool()))
            case 3:
                nodes.append(pool.create_integer(fdp.ConsumeIntInRange(-(2**31), 2**31 - 1)))
            case 4:
                nodes.append(pool.create_float(fdp.ConsumeRegularFloat()))
            case 5:
                nodes.append(pool.create_string(fdp.ConsumeUnicodeNoSurrogates(16)))
            case 6:
                nodes.append(pool.create_function(fdp.ConsumeIntInRange(0, len(_FUNCTION_NAMES) - 1)))
            case _:
                count = fdp.ConsumeIntInRange(0, 4) if nodes else 0
                elements = [nodes[fdp.ConsumeIntInRange(0, len(nodes) - 1)] for _ in range(count)]
                nodes.append(pool.create_array(elements))
    return list({node.node_id: node for node in nodes}.values())


# --- Pattern Implementations ---


def _pattern_escape_roundtrip(fdp: atheris.FuzzedDataProvider) -> None:
    text = fdp.ConsumeUnicodeNoSurrogates(fdp.ConsumeIntInRange(0, 64))
    literal = escape_string(text)
    if json.loads(literal) != text:
        msg = f"escape_string is not reversible for {text!r}: {literal}"
        raise SynthesisFuzzError(msg)
    if any(ch in literal for ch in "\n\r\u2028\u2029"):
        msg = f"escape_string left a line terminator in {literal!r}"
        raise SynthesisFuzzError(msg)


def _pattern_node_imports(fdp: atheris.FuzzedDataProvider) -> None:
    builder = create_builder("nodejs", _STORE)
    builder.enter_main_function()
    for _ in range(fdp.ConsumeIntInRange(0, 20)):
        builder.synthesis_function_call(fdp.PickValueInList(list(_FUNCTION_NAMES)))
    builder.leave_function()
    code = builder.get_code()
    for module in ("fs", "path", "v8"):
        statement = f'const {module} = require("{module}");'
        count = code.count(statement)
        if count > 1:
            msg = f"module {module} required {count} times"
            raise SynthesisFuzzError(msg)
        if count and code.index(statement) > code.find(f"= {module}."):
            msg = f"module {module} used before its require"
            raise SynthesisFuzzError(msg)
    if re.search(r"^let v8 = ", code, re.MULTILINE):
        msg = "generated variable shadows the v8 module binding"
        raise SynthesisFuzzError(msg)


def _pattern_graph_synthesis(fdp: atheris.FuzzedDataProvider) -> None:
    nodes = _consume_graph(fdp)
    target = fdp.PickValueInList(["js", "nodejs", "chrome"])
    builder = create_builder(target, _STORE)
    builder.enter_main_function()
    first = [builder.synthesis_constant(node) for node in nodes]
    if [builder.synthesis_constant(node) for node in nodes] != first:
        msg = "memoized constant returned a different variable"
        raise SynthesisFuzzError(msg)
    builder.leave_function()
    code = builder.get_code()

    defined = _DEFINITION.findall(code)
    if len(defined) != len(nodes) or len(set(defined)) != len(defined):
        msg = f"{len(nodes)} node(s) produced {len(defined)} definition(s)"
        raise SynthesisFuzzError(msg)
    numbers = [int(name[1:]) for name in defined]
    if numbers != sorted(numbers):
        msg = f"variable names not increasing: {defined}"
        raise SynthesisFuzzError(msg)
    if target == "chrome":
        lines = code.split("\n")
        if lines[0] != CHROME_OPEN_DIRECTIVE or lines[-2] != CHROME_CLOSE_DIRECTIVE:
            msg = "Chrome program is not bracketed by its directives"
            raise SynthesisFuzzError(msg)

    _domain.nodes_synthesised += len(nodes)
    _domain.statements_emitted += code.count("\n")


def _pattern_testcase_json(fdp: atheris.FuzzedDataProvider) -> None:
    raw = fdp.ConsumeUnicodeNoSurrogates(fdp.ConsumeIntInRange(0, 512))
    try:
        document = json.loads(raw)
    except json.JSONDecodeError:
        return
    try:
        tc = load_test_case(document)
        _domain.test_cases_loaded += 1
        synthesise_test_case(tc, _STORE, fdp.PickValueInList(["js", "nodejs", "chrome"]))
    except CafError:
        pass


def _pattern_metadata_json(fdp: atheris.FuzzedDataProvider) -> None:
    raw = fdp.ConsumeUnicodeNoSurrogates(fdp.ConsumeIntInRange(0, 512))
    try:
        document = json.loads(raw)
    except json.JSONDecodeError:
        return
    try:
        store = load_store(document)
    except CafError:
        return
    _domain.stores_loaded += 1
    stat = store.get_statistics()
    if stat.callback_signatures > stat.signatures:
        msg = f"{stat.callback_signatures} callback signature(s) from {stat.signatures} signature(s)"
        raise SynthesisFuzzError(msg)


_PATTERN_DISPATCH = {
    "escape_roundtrip": _pattern_escape_roundtrip,
    "node_imports": _pattern_node_imports,
    "graph_synthesis": _pattern_graph_synthesis,
    "testcase_json": _pattern_testcase_json,
    "metadata_json": _pattern_metadata_json,
}


def test_one_input(data: bytes) -> None:
    """Atheris entry point: fuzz synthesis invariants."""
    if _state.iterations == 0:
        _state.initial_memory_mb = get_process().memory_info().rss / (1024 * 1024)

    _state.iterations += 1

    if _state.iterations % _state.checkpoint_interval == 0:
        emit_checkpoint_report(_state, _build_stats_dict(), _REPORT_DIR, _REPORT_FILENAME)

    start_time = time.perf_counter()
    fdp = atheris.FuzzedDataProvider(data)

    pattern = select_pattern_round_robin(_state, _PATTERN_SCHEDULE)
    _state.pattern_coverage[pattern] = _state.pattern_coverage.get(pattern, 0) + 1

    try:
        _PATTERN_DISPATCH[pattern](fdp)

    except SynthesisFuzzError:
        _state.findings += 1
        raise

    except CafError as e:
        record_error(_state, e)

    finally:
        is_interesting = (time.perf_counter() - start_time) * 1000 > 10.0
        record_iteration_metrics(_state, pattern, start_time, data, is_interesting=is_interesting)

        if _state.iterations % GC_INTERVAL == 0:
            gc.collect()

        if _state.iterations % 100 == 0:
            record_memory(_state)


def main() -> None:
    """Run the synthesis fuzzer with CLI support."""
    parser = argparse.ArgumentParser(
        description="Synthesis fuzzer using Atheris/libFuzzer",
        epilog="All unrecognized arguments are passed to libFuzzer.",
    )
    parser.add_argument(
        "--checkpoint-interval",
        type=int,
        default=500,
        help="Emit report every N iterations (default: 500)",
    )
    parser.add_argument(
        "--seed-corpus-size",
        type=int,
        default=500,
        help="Maximum size of in-memory seed corpus (default: 500)",
    )

    args, remaining = parser.parse_known_args()
    _state.checkpoint_interval = args.checkpoint_interval
    _state.seed_corpus_max_size = args.seed_corpus_size

    sys.argv = [sys.argv[0], *remaining]

    if not any(arg.startswith("-rss_limit_mb") for arg in sys.argv):
        sys.argv.append("-rss_limit_mb=4096")

    print_fuzzer_banner(
        title="Synthesis Fuzzer (Atheris)",
        target="SynthesisBuilder, JS/Node/Chrome strategies, JSON loaders",
        state=_state,
        schedule_len=len(_PATTERN_SCHEDULE),
    )

    run_fuzzer(_state, test_one_input=test_one_input)


if __name__ == "__main__":
    main()
