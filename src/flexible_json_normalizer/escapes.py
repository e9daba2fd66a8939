"""Outer-quote stripping and single-layer backslash unescaping."""

from __future__ import annotations

import re

_SAFELY_QUOTED = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)
_ONE_LAYER_ESCAPE = re.compile(r'\\([\\"nrt])')
_ESCAPE_TARGETS = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


def is_safely_quoted(text: str) -> bool:
    """Return True when the whole text is one quoted region with only escaped inner quotes."""
    return _SAFELY_QUOTED.fullmatch(text) is not None


def strip_safe_quotes(text: str) -> str:
    """Remove the outer double quotes when they are safe to remove."""
    if is_safely_quoted(text):
        return text[1:-1]
    return text


def unescape_once(text: str) -> str:
    """Undo one layer of ``\\\\``, ``\\"``, ``\\n``, ``\\r`` and ``\\t`` escaping.

    All sequences are replaced in a single left-to-right scan, so an escaped
    backslash followed by ``n`` stays a literal backslash-n.
    """
    return _ONE_LAYER_ESCAPE.sub(lambda match: _ESCAPE_TARGETS[match.group(1)], text)
