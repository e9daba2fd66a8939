"""Public entry points for normalizing maybe-structured text."""

from __future__ import annotations

import asyncio
import json
from typing import Optional

from .executor import IsolatedExecutor
from .json_types import JSONValue
from .model_types import ParseResult
from .options import ParseOptions

DEFAULT_INDENT = 4


async def normalize(
    text: str,
    options: Optional[ParseOptions] = None,
    *,
    cancel_event: Optional[asyncio.Event] = None,
) -> ParseResult:
    """Parse text into a value tree under the configured deadline.

    Args:
        text (str): Raw, possibly quoted and escaped, input text.
        options (Optional[ParseOptions]): Parse configuration; defaults apply when omitted.
        cancel_event (Optional[asyncio.Event]): Setting it aborts the parse with a
            ``Cancelled`` error.

    Returns:
        ParseResult: Parsed value or a typed error; never raises for bad input.
    """
    executor = IsolatedExecutor(options)
    return await executor.run(text, cancel_event=cancel_event)


def normalize_sync(text: str, options: Optional[ParseOptions] = None) -> ParseResult:
    """Blocking variant of :func:`normalize` for callers without an event loop."""
    return asyncio.run(normalize(text, options))


def format_value(value: JSONValue, *, indent: int = DEFAULT_INDENT) -> str:
    """Render a value tree as indented JSON, keeping non-ASCII characters."""
    return json.dumps(value, indent=indent, ensure_ascii=False)


def is_already_formatted(formatted: str, original: str) -> bool:
    """Whether the original text already equals its formatted rendering."""
    return _normalize_line_endings(formatted) == _normalize_line_endings(original)


def _normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").strip()
