"""Flexible JSON normalizer package."""

from __future__ import annotations

from .cli import main
from .engine import format_value, is_already_formatted, normalize, normalize_sync
from .executor import IsolatedExecutor
from .model_types import ErrorInfo, ErrorKind, ParseResult
from .options import ParseOptions, load_options
from .pipeline import parse_text

__all__ = [
    "ErrorInfo",
    "ErrorKind",
    "IsolatedExecutor",
    "ParseOptions",
    "ParseResult",
    "format_value",
    "is_already_formatted",
    "load_options",
    "main",
    "normalize",
    "normalize_sync",
    "parse_text",
]
