"""Deep decoding of escape sequences left inside parsed string leaves."""

from __future__ import annotations

import re

from .json_types import JSONValue

DEFAULT_MAX_ROUNDS = 4

_CONTROL_ESCAPE = re.compile(r'\\([nrtbf/"\\])')
_CONTROL_TARGETS = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "/": "/",
    '"': '"',
    "\\": "\\",
}
_SURROGATE_PAIR = re.compile(r"\\u(d[89ab][0-9a-f]{2})\\u(d[c-f][0-9a-f]{2})", re.IGNORECASE)
_CODE_UNIT = re.compile(r"\\u([0-9a-f]{4})", re.IGNORECASE)
_BYTE = re.compile(r"\\x([0-9a-f]{2})", re.IGNORECASE)


def _combine_surrogates(match: re.Match[str]) -> str:
    high = int(match.group(1), 16)
    low = int(match.group(2), 16)
    return chr((high - 0xD800) * 0x400 + (low - 0xDC00) + 0x10000)


def _decode_code_unit(match: re.Match[str]) -> str:
    code_unit = int(match.group(1), 16)
    if 0xD800 <= code_unit <= 0xDFFF:
        # Unpaired surrogates have no encodable character.
        return match.group(0)
    return chr(code_unit)


def decode_escapes(text: str) -> str:
    """Apply one round of control, surrogate-pair, ``\\u`` and ``\\x`` decoding."""
    text = _CONTROL_ESCAPE.sub(lambda match: _CONTROL_TARGETS[match.group(1)], text)
    text = _SURROGATE_PAIR.sub(_combine_surrogates, text)
    text = _CODE_UNIT.sub(_decode_code_unit, text)
    return _BYTE.sub(lambda match: chr(int(match.group(1), 16)), text)


def decode_string(text: str, max_rounds: int = DEFAULT_MAX_ROUNDS) -> str:
    """Decode repeatedly until a round changes nothing or the cap is reached."""
    for _ in range(max_rounds):
        decoded = decode_escapes(text)
        if decoded == text:
            break
        text = decoded
    return text


def deep_decode(value: JSONValue, max_rounds: int = DEFAULT_MAX_ROUNDS) -> JSONValue:
    """Decode every string leaf of a value tree without changing its shape.

    The walk uses an explicit stack, so any tree the JSON grammars accept can
    be decoded regardless of the interpreter's recursion limit. Keys and their
    order are preserved.
    """
    if not isinstance(value, (list, dict)):
        return _decode_leaf(value, max_rounds)

    root = _empty_like(value)
    pending: list[tuple[JSONValue, JSONValue]] = [(value, root)]
    while pending:
        source, target = pending.pop()
        items = source.items() if isinstance(source, dict) else enumerate(source)
        for key, item in items:
            if isinstance(item, (list, dict)):
                decoded = _empty_like(item)
                pending.append((item, decoded))
            else:
                decoded = _decode_leaf(item, max_rounds)
            if isinstance(target, dict):
                target[key] = decoded
            else:
                target.append(decoded)
    return root


def _decode_leaf(value: JSONValue, max_rounds: int) -> JSONValue:
    if isinstance(value, str):
        return decode_string(value, max_rounds)
    return value


def _empty_like(container: JSONValue) -> JSONValue:
    return {} if isinstance(container, dict) else []
