"""
P-MATRIX reference encoder command line interface.

Usage:
    pmatrix-encoder <command> [args]

Commands:
    emit        Emit a demonstration record from four function values
    validate    Validate a record (or a JSON array of records) read from FILE or stdin

Examples:
    pmatrix-encoder emit --baseline 0.25 --norm 0.70 --stability 0.30 --meta-control 0.20
    pmatrix-encoder validate < record.json
    pmatrix-encoder validate --prior-timestamp 100 --prior-timestamp 200 record.json

Exit codes:
    0   success / every record conforming
    1   at least one invariant violation
    2   usage error or malformed input
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from collections.abc import Sequence
from pathlib import Path

from .conformance.emit import emit
from .conformance.validate import validate, validate_stream
from .utils.validation import PMatrixError, RecordParseError, parse_candidates

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NONCONFORMING = 1
EXIT_INPUT_ERROR = 2


def _finite_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if not math.isfinite(value):
        raise argparse.ArgumentTypeError(f"not a finite number: {text!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pmatrix-encoder",
        description=(
            "P-MATRIX Runtime State Reference Encoder: schema conformance tool, "
            "not an execution engine."
        ),
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    sub = parser.add_subparsers(dest="command", required=True)

    p_emit = sub.add_parser("emit", help="Emit a demonstration record")
    p_emit.add_argument("--baseline", type=_finite_float, required=True, metavar="F")
    p_emit.add_argument("--norm", type=_finite_float, required=True, metavar="F")
    p_emit.add_argument("--stability", type=_finite_float, required=True, metavar="F")
    p_emit.add_argument(
        "--meta-control", dest="meta_control", type=_finite_float, required=True, metavar="F"
    )
    p_emit.add_argument(
        "--timestamp",
        type=int,
        default=None,
        metavar="N",
        help="Unix timestamp in seconds (default: current time)",
    )
    p_emit.add_argument("--compact", action="store_true", help="Single-line JSON output")

    p_val = sub.add_parser("validate", help="Validate records against all twelve invariants")
    p_val.add_argument(
        "file",
        nargs="?",
        default="-",
        help="JSON file holding one record or an array of records (default: stdin)",
    )
    p_val.add_argument(
        "--prior-timestamp",
        dest="prior_timestamps",
        type=int,
        action="append",
        default=[],
        metavar="N",
        help="Timestamp of an earlier record in the stream (repeatable)",
    )
    p_val.add_argument("--json", action="store_true", help="Print the report as JSON")

    return parser


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _cmd_emit(args: argparse.Namespace) -> int:
    record = emit(
        args.baseline,
        args.norm,
        args.stability,
        args.meta_control,
        args.timestamp,
    )
    print(json.dumps(record.to_dict(), indent=None if args.compact else 2))
    return EXIT_OK


def _read_input(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    try:
        return Path(name).read_text(encoding="utf-8")
    except OSError as e:
        raise RecordParseError(f"[{name}] cannot read input: {e}") from e


def _cmd_validate(args: argparse.Namespace) -> int:
    source = "stdin" if args.file == "-" else args.file
    candidates = parse_candidates(_read_input(args.file), context=source)

    if len(candidates) == 1:
        report = validate(candidates[0], args.prior_timestamps)
        if args.json:
            print(json.dumps(report.to_dict(), indent=2))
        else:
            print("\n".join(report.format_lines()))
        return EXIT_OK if report.conforming else EXIT_NONCONFORMING

    stream = validate_stream(candidates, args.prior_timestamps)
    logger.info("validated %d records from %s", len(stream), source)
    if args.json:
        print(json.dumps(stream.to_dict(), indent=2))
    else:
        for i, report in enumerate(stream):
            if i:
                print()
            print(f"# record {i}")
            print("\n".join(report.format_lines()))
    return EXIT_OK if stream.conforming else EXIT_NONCONFORMING


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose, args.quiet)

    try:
        if args.command == "emit":
            return _cmd_emit(args)
        return _cmd_validate(args)
    except PMatrixError as e:
        logger.debug("input rejected", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        if args.command == "validate":
            print("The input must be a P-MATRIX runtime state record.", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    sys.exit(main())
