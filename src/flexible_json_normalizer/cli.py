"""Command line interface for normalizing maybe-structured text."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from .diagnostics import format_error
from .engine import DEFAULT_INDENT, format_value, is_already_formatted, normalize_sync
from .model_types import ErrorKind
from .options import OptionsLoadError, ParseOptions, load_options

EXIT_OK = 0
EXIT_PARSE_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 3


class CLIError(RuntimeError):
    """Raised when CLI execution fails."""


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="flexible-json-normalizer",
        description="Normalize escaped JSON, JSON with comments or PHP array dumps into formatted JSON",
    )
    parser.add_argument("--input", help="Path to the input text; stdin is read when omitted")
    parser.add_argument("--config", help="Path to a YAML file with parse options")
    parser.add_argument(
        "--indent",
        type=int,
        default=DEFAULT_INDENT,
        help="Indentation width of the formatted output",
    )
    parser.add_argument("--max-depth", type=int, help="Maximum unescaping rounds")
    parser.add_argument("--timeout-ms", type=int, help="Parse deadline in milliseconds")
    parser.add_argument(
        "--no-unicode-decode",
        action="store_true",
        help="Keep \\uXXXX and \\xHH sequences inside strings as they are",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only report whether the input is already formatted",
    )
    parser.add_argument("--verbose", action="store_true", help="Log recovery decisions to stderr")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        options = _resolve_options(args)
        text = _read_input(args.input)
    except (OptionsLoadError, CLIError) as exc:
        parser.error(str(exc))
        return EXIT_USAGE

    if not text.strip():
        print("Input is empty", file=sys.stderr)
        return EXIT_PARSE_FAILURE

    result = normalize_sync(text, options)
    if not result.ok:
        print(format_error(result), file=sys.stderr)
        if result.error is not None and result.error.kind in (
            ErrorKind.TIMEOUT,
            ErrorKind.CANCELLED,
        ):
            return EXIT_INTERRUPTED
        return EXIT_PARSE_FAILURE

    formatted = format_value(result.value, indent=args.indent)
    if args.check:
        return EXIT_OK if is_already_formatted(formatted, text) else EXIT_PARSE_FAILURE

    print(formatted)
    return EXIT_OK


def _resolve_options(args: argparse.Namespace) -> ParseOptions:
    options = load_options(Path(args.config)) if args.config else ParseOptions()
    overrides: dict[str, Any] = {}
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth
    if args.timeout_ms is not None:
        overrides["timeout_ms"] = args.timeout_ms
    if args.no_unicode_decode:
        overrides["enable_unicode_decode"] = False
    if not overrides:
        return options
    try:
        return ParseOptions.model_validate({**options.model_dump(), **overrides})
    except ValidationError as exc:
        raise CLIError(f"Invalid option value: {exc}") from exc


def _read_input(path_text: Optional[str]) -> str:
    if path_text is None:
        return sys.stdin.read()
    path = Path(path_text)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CLIError(f"Failed to read input file {path}: {exc}") from exc


if __name__ == "__main__":
    raise SystemExit(main())
