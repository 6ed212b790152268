"""typedjs command-line interface.

``typedjs check TREE.json [...]`` checks ESTree JSON documents produced by the
external parser and prints their diagnostics.  The exit status is ``0`` when
no diagnostic has ``error`` severity, ``1`` otherwise and ``2`` for usage or
configuration problems.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

import yaml

from .checker import CheckOptions, Diagnostic, build_report, check_json, format_text
from .checker.reporters import has_errors
from .telemetry.logger import get_logger
from .utils.config import load_options, parse_overrides

__all__ = ["build_parser", "main"]

_FORMAT_CHOICES = ("text", "json", "yaml")

EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typedjs", description="typedjs structural type checker"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Checker configuration YAML file (defaults to configs/typedjs.yaml when present).",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        metavar="KEY=VALUE",
        help="Override configuration values using dot notation "
        "(e.g. checker.unknown_values=strict).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)
    check_parser = subparsers.add_parser("check", help="Check ESTree JSON documents")
    check_parser.add_argument("trees", nargs="+", type=Path, help="ESTree JSON files to check")
    check_parser.add_argument(
        "--format",
        choices=_FORMAT_CHOICES,
        default="text",
        help="Output format (default: text)",
    )
    check_parser.add_argument(
        "--source",
        type=Path,
        help="Source file the tree was parsed from, used to underline findings",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.verbose:
        get_logger("typedjs").setLevel(logging.DEBUG)

    try:
        options = load_options(args.config, overrides=parse_overrides(args.overrides))
    except (OSError, ValueError) as exc:
        print(f"[typedjs] error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    if args.command == "check":
        return _cmd_check(args, options)
    parser.print_help()
    return EXIT_USAGE


# ---------------------------------------------------------------------------
# Sub-commands


def _cmd_check(args: argparse.Namespace, options: CheckOptions) -> int:
    if args.source is not None and len(args.trees) != 1:
        print("[typedjs] error: --source requires exactly one tree", file=sys.stderr)
        return EXIT_USAGE
    try:
        source = args.source.read_text(encoding="utf-8") if args.source is not None else None
        results = {
            str(path): check_json(path.read_bytes(), options) for path in args.trees
        }
    except OSError as exc:
        print(f"[typedjs] error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    if args.format == "text":
        _print_text(results, source)
    else:
        payload: dict[str, Any] = {path: build_report(items) for path, items in results.items()}
        if args.format == "json":
            print(json.dumps(payload, indent=2, sort_keys=True))
        else:
            print(yaml.safe_dump(payload, sort_keys=False), end="")

    failed = any(has_errors(items) for items in results.values())
    return EXIT_DIAGNOSTICS if failed else EXIT_OK


def _print_text(results: dict[str, list[Diagnostic]], source: str | None) -> None:
    total = 0
    for path, diagnostics in results.items():
        for diagnostic in diagnostics:
            print(f"{path}: {format_text(diagnostic, source)}")
        total += len(diagnostics)
    print(f"{total} diagnostic(s) in {len(results)} file(s)")
