"""Command line interface.

Commands:
    cafsynth synthesis -s STORE [-t TARGET] [-o OUT] [--validate] TC
        Synthesise a JSON test case into a program for TARGET.
    cafsynth stat -s STORE
        Print record counts of a metadata store.
    cafsynth show -s STORE [--verbose-calls] TC
        List the calls of a JSON test case.

Exit Codes:
    0: Success
    1: Invalid input (diagnostic printed to stderr)

Python 3.13+.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from cafsynth.config import SynthesisConfig
from cafsynth.diagnostics import CafError, DiagnosticFormatter, OutputFormat
from cafsynth.metadata import MetadataStore, load_store_file
from cafsynth.synthesis import available_targets, synthesise_test_case
from cafsynth.testcase import dump_test_case, load_test_case_file

__all__ = ["build_parser", "main"]

logger = logging.getLogger(__name__)


def _load_store(path: str) -> MetadataStore:
    store = load_store_file(path)
    logger.info("Loaded metadata store from %s", path)
    return store


def _cmd_synthesis(args: argparse.Namespace) -> int:
    store = _load_store(args.store)
    tc = load_test_case_file(args.testcase)
    config = SynthesisConfig(chrome_progress_markers=args.progress_markers)
    code = synthesise_test_case(tc, store, args.target, config, validate=args.validate)
    if args.output is None:
        sys.stdout.write(code)
    else:
        Path(args.output).write_text(code, encoding="utf-8")
        logger.info("Wrote %d byte(s) to %s", len(code.encode("utf-8")), args.output)
    return 0


def _cmd_stat(args: argparse.Namespace) -> int:
    stat = _load_store(args.store).get_statistics()
    banner = "=" * 10 + " Metadata Store Statistics " + "=" * 10
    print(banner)
    print(f"Number of API functions:     {stat.functions}")
    print(f"Number of constructors:      {stat.constructors}")
    print(f"Number of types:             {stat.types}")
    print(f"Number of signatures:        {stat.signatures}")
    print(f"Distinct callback signatures: {stat.callback_signatures}")
    print(banner)
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    store = _load_store(args.store)
    tc = load_test_case_file(args.testcase)
    sys.stdout.write(dump_test_case(tc, store, verbose=args.verbose_calls))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the ``cafsynth`` command."""
    parser = argparse.ArgumentParser(
        prog="cafsynth",
        description="Synthesise JavaScript programs from fuzzer test cases",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Log more (-v info, -vv debug)"
    )
    parser.add_argument(
        "--error-format",
        choices=[str(f) for f in OutputFormat],
        default=str(OutputFormat.RUST),
        help="Style of error diagnostics (default: rust)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    synthesis = commands.add_parser("synthesis", help="Synthesise a test case into a program")
    synthesis.add_argument("-s", "--store", required=True, help="Path to the metadata store JSON")
    synthesis.add_argument(
        "-t",
        "--target",
        default="js",
        choices=available_targets(),
        help="Target runtime (default: js)",
    )
    synthesis.add_argument("-o", "--output", help="Write the program here instead of stdout")
    synthesis.add_argument(
        "--validate", action="store_true", help="Check every call against its signature"
    )
    synthesis.add_argument(
        "--progress-markers",
        action="store_true",
        help="Chrome target: log a marker after every call",
    )
    synthesis.add_argument("testcase", help="Path to the test case JSON")
    synthesis.set_defaults(handler=_cmd_synthesis)

    stat = commands.add_parser("stat", help="Display statistics of a metadata store")
    stat.add_argument("-s", "--store", required=True, help="Path to the metadata store JSON")
    stat.set_defaults(handler=_cmd_stat)

    show = commands.add_parser("show", help="List the calls of a test case")
    show.add_argument("-s", "--store", required=True, help="Path to the metadata store JSON")
    show.add_argument(
        "--verbose-calls", action="store_true", help="Also list receivers and arguments"
    )
    show.add_argument("testcase", help="Path to the test case JSON")
    show.set_defaults(handler=_cmd_show)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the exit code."""
    args = build_parser().parse_args(argv)
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    formatter = DiagnosticFormatter(output_format=OutputFormat(args.error_format))
    try:
        return args.handler(args)
    except CafError as exc:
        if exc.diagnostic is not None:
            print(formatter.format(exc.diagnostic), file=sys.stderr)
        else:
            print(f"error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
