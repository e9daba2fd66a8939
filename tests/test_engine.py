"""Tests for the public normalization entry points."""

from __future__ import annotations

import asyncio
import json

from flexible_json_normalizer.engine import (
    format_value,
    is_already_formatted,
    normalize,
    normalize_sync,
)
from flexible_json_normalizer.options import ParseOptions


def test_normalize_sync_recovers_stringified_json() -> None:
    """The blocking entry point returns the recovered tree."""
    text = json.dumps(json.dumps({"a": [1, 2]}))

    result = normalize_sync(text)

    assert result.ok, result.error
    assert result.value == {"a": [1, 2]}


def test_normalize_is_awaitable_inside_running_loop() -> None:
    """The async entry point composes with other coroutines."""

    async def _run() -> list[object]:
        results = await asyncio.gather(
            normalize('{"first": 1}'),
            normalize("array ( 'second' => 2 )", ParseOptions()),
        )
        return [result.value for result in results]

    assert asyncio.run(_run()) == [{"first": 1}, {"second": 2}]


def test_format_value_uses_four_spaces_and_keeps_unicode() -> None:
    """Formatting matches editor defaults."""
    assert format_value({"name": "ä", "items": [1]}) == (
        '{\n    "name": "ä",\n    "items": [\n        1\n    ]\n}'
    )


def test_is_already_formatted_ignores_line_endings_and_padding() -> None:
    """CRLF and surrounding whitespace do not count as differences."""
    formatted = format_value({"a": 1})
    original = "\r\n" + formatted.replace("\n", "\r\n") + "\r\n"

    assert is_already_formatted(formatted, original)
    assert not is_already_formatted(formatted, '{"a": 1}')
