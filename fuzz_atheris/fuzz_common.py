"""Shared fuzzing infrastructure for Atheris-based fuzzers.

Provides common observability, metrics, seed corpus management, and reporting
used by all fuzz targets. Each fuzzer imports from this module and composes
domain-specific state alongside BaseFuzzerState.

Not a fuzz target itself -- no FUZZ_PLUGIN header.
"""

from __future__ import annotations

import hashlib
import heapq
import json
import os
import pathlib
import statistics
import sys
import time
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

import atheris
import psutil

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


# --- PEP 695 Type Aliases ---

FuzzStats: TypeAlias = dict[str, int | str | float | list[Any]]
InterestingInput: TypeAlias = tuple[float, str, str]  # (neg_duration_ms, pattern, input_hash)

# --- Constants ---

GC_INTERVAL = 256
"""Periodic gc.collect() interval to reclaim Atheris instrumentation cycles."""


# --- Process Handle (lazy singleton) ---

_process: psutil.Process | None = None


def get_process() -> psutil.Process:
    """Lazy-initialize psutil process handle."""
    global _process  # noqa: PLW0603  # pylint: disable=global-statement
    if _process is None:
        _process = psutil.Process(os.getpid())
    return _process


# --- Base Fuzzer State ---


@dataclass
class BaseFuzzerState:
    """Common observability state shared by all fuzzers.

    Domain-specific fuzzers maintain separate dataclasses for their
    custom metrics and compose them alongside this base state.
    """

    fuzzer_name: str = ""
    fuzzer_target: str = ""

    # Core stats
    iterations: int = 0
    findings: int = 0
    status: str = "incomplete"

    # Performance tracking (bounded deques)
    performance_history: deque[float] = field(default_factory=lambda: deque(maxlen=10000))
    memory_history: deque[float] = field(default_factory=lambda: deque(maxlen=1000))

    # Pattern coverage
    pattern_coverage: dict[str, int] = field(default_factory=dict)
    pattern_wall_time: dict[str, float] = field(default_factory=dict)
    error_counts: dict[str, int] = field(default_factory=dict)

    # Interesting inputs (max-heap for slowest, in-memory corpus)
    slowest_operations: list[InterestingInput] = field(default_factory=list)
    seed_corpus: dict[str, bytes] = field(default_factory=dict)

    initial_memory_mb: float = 0.0

    # Configuration
    checkpoint_interval: int = 500
    seed_corpus_max_size: int = 500


# --- Weighted Schedule ---


def build_weighted_schedule(items: Sequence[str], weights: Sequence[int]) -> tuple[str, ...]:
    """Pre-compute a weighted schedule from items.

    Returns a tuple of length sum(weights) where each item appears
    proportional to its weight.
    """
    schedule: list[str] = []
    for item, weight in zip(items, weights, strict=True):
        schedule.extend([item] * weight)
    return tuple(schedule)


def select_pattern_round_robin(state: BaseFuzzerState, schedule: tuple[str, ...]) -> str:
    """Deterministic round-robin immune to coverage-guided mutation bias.

    Fuzzers increment state.iterations before calling this function, so
    iteration 1 maps to schedule index 0.
    """
    return schedule[(state.iterations - 1) % len(schedule)]


# --- Per-iteration Tracking ---


def hash_input(data: bytes) -> str:
    """Compute truncated SHA-256 hex digest for corpus deduplication."""
    return hashlib.sha256(data).hexdigest()[:16]


def record_memory(state: BaseFuzzerState) -> None:
    """Sample current RSS memory usage (call every ~100 iterations)."""
    state.memory_history.append(get_process().memory_info().rss / (1024 * 1024))


def record_iteration_metrics(
    state: BaseFuzzerState,
    pattern: str,
    start_time: float,
    input_data: bytes,
    *,
    is_interesting: bool,
) -> None:
    """Record per-iteration performance and corpus metrics.

    Call in the finally block of test_one_input.
    """
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    state.performance_history.append(elapsed_ms)
    state.pattern_wall_time[pattern] = state.pattern_wall_time.get(pattern, 0.0) + elapsed_ms

    input_hash = hash_input(input_data)
    entry: InterestingInput = (-elapsed_ms, pattern, input_hash)
    if len(state.slowest_operations) < 10:
        heapq.heappush(state.slowest_operations, entry)
    elif -elapsed_ms < state.slowest_operations[0][0]:
        heapq.heapreplace(state.slowest_operations, entry)

    if is_interesting and input_hash not in state.seed_corpus:
        state.seed_corpus[input_hash] = input_data
        if len(state.seed_corpus) > state.seed_corpus_max_size:
            del state.seed_corpus[next(iter(state.seed_corpus))]


def record_error(state: BaseFuzzerState, error: Exception) -> None:
    """Count an expected (non-finding) exception by type and message prefix."""
    error_key = f"{type(error).__name__}_{str(error)[:30]}"
    state.error_counts[error_key] = state.error_counts.get(error_key, 0) + 1


# --- Reporting ---


def build_base_stats_dict(state: BaseFuzzerState) -> FuzzStats:
    """Build common stats dictionary for JSON report."""
    stats: FuzzStats = {
        "status": state.status,
        "iterations": state.iterations,
        "findings": state.findings,
    }

    if state.performance_history:
        perf_data = list(state.performance_history)
        stats["perf_mean_ms"] = round(statistics.mean(perf_data), 3)
        stats["perf_median_ms"] = round(statistics.median(perf_data), 3)
        stats["perf_max_ms"] = round(max(perf_data), 3)
        if len(perf_data) >= 20:
            stats["perf_p95_ms"] = round(statistics.quantiles(perf_data, n=20)[18], 3)

    if state.memory_history:
        stats["memory_initial_mb"] = round(state.initial_memory_mb, 2)
        stats["memory_peak_mb"] = round(max(state.memory_history), 2)

    stats["patterns_tested"] = len(state.pattern_coverage)
    for pattern, count in sorted(state.pattern_coverage.items()):
        stats[f"pattern_{pattern}"] = count
    for pattern, total_ms in sorted(state.pattern_wall_time.items()):
        stats[f"wall_time_ms_{pattern}"] = round(total_ms, 1)

    stats["error_types"] = len(state.error_counts)
    for error_type, count in sorted(state.error_counts.items()):
        clean_key = error_type[:50].replace("<", "").replace(">", "")
        stats[f"error_{clean_key}"] = count

    stats["seed_corpus_size"] = len(state.seed_corpus)
    stats["slowest_operations_tracked"] = len(state.slowest_operations)
    return stats


def emit_checkpoint_report(
    state: BaseFuzzerState,
    stats: FuzzStats,
    report_dir: pathlib.Path,
    report_filename: str,
) -> None:
    """Emit a periodic JSON checkpoint to stderr and file."""
    _write_report(json.dumps(stats, sort_keys=True), "CHECKPOINT", report_dir, report_filename)


def emit_final_report(
    state: BaseFuzzerState,
    stats: FuzzStats,
    report_dir: pathlib.Path,
    report_filename: str,
) -> None:
    """Emit crash-proof JSON report to stderr and file.

    Args:
        state: Fuzzer state (status set to "complete")
        stats: Pre-built stats dictionary
        report_dir: Directory for the JSON report file
        report_filename: Filename for the JSON report
    """
    state.status = "complete"
    stats["status"] = state.status
    _write_report(json.dumps(stats, sort_keys=True), "SUMMARY", report_dir, report_filename)


def _write_report(
    report: str, marker: str, report_dir: pathlib.Path, report_filename: str
) -> None:
    print(f"\n[{marker}-JSON-BEGIN]{report}[{marker}-JSON-END]", file=sys.stderr, flush=True)
    try:
        report_dir.mkdir(parents=True, exist_ok=True)
        (report_dir / report_filename).write_text(report, encoding="utf-8")
    except OSError as e:
        print(f"[report] could not write {report_dir / report_filename}: {e}", file=sys.stderr)


# --- Runner ---


def print_fuzzer_banner(
    *, title: str, target: str, state: BaseFuzzerState, schedule_len: int
) -> None:
    """Print the startup banner."""
    print("=" * 80)
    print(title)
    print("=" * 80)
    print(f"Target:     {target}")
    print(f"Checkpoint: every {state.checkpoint_interval} iterations")
    print(f"Corpus Max: {state.seed_corpus_max_size} entries")
    print(f"Schedule:   {schedule_len} slots (round-robin)")
    print("=" * 80)


def run_fuzzer(state: BaseFuzzerState, *, test_one_input: Callable[[bytes], None]) -> None:
    """Hand control to libFuzzer; sys.argv carries the libFuzzer flags."""
    state.status = "running"
    atheris.Setup(sys.argv, test_one_input)
    atheris.Fuzz()
