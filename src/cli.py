"""
Command-line interface reporting which declarations a JavaScript module exports.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

import esprima
import structlog

from analyzer import ExportOptions
from frontend import collect_candidates, run_frontend


def configure_logging() -> None:
    """Configure structlog from JSEXPORTS_LOG_LEVEL and JSEXPORTS_LOG_FORMAT."""
    level_name = os.environ.get("JSEXPORTS_LOG_LEVEL", "WARNING").upper()
    log_format = os.environ.get("JSEXPORTS_LOG_FORMAT", "console").lower()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _format_location(line: int | None, column: int | None) -> str:
    if line is None:
        return ""
    if column is None:
        return f":{line}"
    return f":{line}:{column}"


def check_command(args: argparse.Namespace) -> int:
    input_path = Path(args.input).resolve()
    if not input_path.exists():
        sys.stderr.write(f"ERROR: Input file not found: {input_path}\n")
        return 1

    try:
        source = input_path.read_text(encoding="utf-8")
    except OSError as exc:
        sys.stderr.write(f"ERROR: Failed to read {input_path}: {exc}\n")
        return 1

    options = ExportOptions(
        check_esm_exports=not args.no_esm,
        check_commonjs_exports=not args.no_commonjs,
        init_window=not args.no_window,
    )
    try:
        result = run_frontend(
            source,
            source_name=str(input_path),
            tolerant=not args.strict,
            source_type="script" if args.script else "module",
            options=options,
        )
    except esprima.Error as exc:
        sys.stderr.write(f"ERROR: Parsing failed: {exc}\n")
        return 1

    if result.parse.ast is None:
        sys.stderr.write("ERROR: Parsing failed; no AST produced.\n")
        for error in result.parse.errors:
            loc = _format_location(error.line, error.column)
            sys.stderr.write(f"  {error.description}{loc}\n")
        return 1

    for error in result.parse.errors:
        loc = _format_location(error.line, error.column)
        sys.stderr.write(f"WARNING {input_path}{loc}: {error.description}\n")

    for candidate in collect_candidates(result.parse.ast):
        exported = result.is_exported(candidate.node)
        if args.exported_only and not exported:
            continue
        loc = _format_location(candidate.line, candidate.column)
        status = "exported" if exported else "internal"
        sys.stdout.write(f"{input_path}{loc} {candidate.kind} {candidate.name} {status}\n")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsexports", description="Report the export surface of a JavaScript module"
    )
    subparsers = parser.add_subparsers(dest="command")

    check_parser = subparsers.add_parser("check", help="List declarations and their export status")
    check_parser.add_argument("input", help="Path to the JavaScript file")
    check_parser.add_argument(
        "--exported-only",
        action="store_true",
        help="Only print declarations that are exported.",
    )
    check_parser.add_argument(
        "--no-esm",
        action="store_true",
        help="Ignore `export` declarations.",
    )
    check_parser.add_argument(
        "--no-commonjs",
        action="store_true",
        help="Ignore assignments to `module.exports`.",
    )
    check_parser.add_argument(
        "--no-window",
        action="store_true",
        help="Do not model `window` as an alias of the global scope.",
    )
    check_parser.add_argument(
        "--script",
        action="store_true",
        help="Parse the input as a script instead of an ES module.",
    )
    check_parser.add_argument(
        "--strict",
        action="store_true",
        help="Disable tolerant parsing.",
    )
    check_parser.set_defaults(func=check_command)

    return parser


def main(argv: List[str] | None = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
