"""Recursive-descent parser for PHP ``var_export`` array literals.

Supported grammar::

    Array := "array" WS "(" WS (Entry (WS "," WS Entry)* WS ","?)? WS ")"
    Entry := Key WS "=>" WS Value
    Key   := QuotedString | UnsignedInteger
    Value := QuotedString | Array | "true" | "false" | "null" | Number

Arrays always become ordered mappings; integer keys are kept in their decimal
string form so the output matches what the JSON grammars produce.
"""

from __future__ import annotations

import re
from typing import Optional

from .json_types import JSONObject, JSONValue

_ARRAY_OPEN = re.compile(r"\barray\s*\(")
_UNESCAPED_DOUBLE_QUOTE = re.compile(r'(?<!\\)"')
_UNSIGNED_INTEGER = re.compile(r"\d+")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")
_KEYWORDS: dict[str, JSONValue] = {"true": True, "false": False, "null": None}


class PhpArraySyntaxError(ValueError):
    """Raised when text does not match the array-literal grammar."""

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at position {offset}")
        self.offset = offset


def find_php_array_start(text: str) -> Optional[int]:
    """Return the offset of the first ``array (`` keyword outside double-quoted text."""
    for match in _ARRAY_OPEN.finditer(text):
        preceding_quotes = len(_UNESCAPED_DOUBLE_QUOTE.findall(text, 0, match.start()))
        if preceding_quotes % 2 == 0:
            return match.start()
    return None


def has_php_array_signature(text: str) -> bool:
    """Whether the text looks like it contains a PHP array literal."""
    return find_php_array_start(text) is not None


def parse_php_array(text: str) -> JSONObject:
    """Parse the span from the first ``array`` keyword to the final ``)``.

    Prefix and suffix noise such as log labels is ignored.

    Raises:
        PhpArraySyntaxError: When the span does not match the grammar. The
            offset is relative to ``text``.
    """
    start = find_php_array_start(text)
    if start is None:
        raise PhpArraySyntaxError("Expected 'array ('", 0)
    open_paren = text.index("(", start)
    close_paren = text.rfind(")")
    if close_paren <= open_paren:
        raise PhpArraySyntaxError("Missing closing ')'", len(text))
    try:
        return _PhpArrayReader(text).parse_entries(open_paren + 1, close_paren)
    except RecursionError as exc:
        raise PhpArraySyntaxError("Arrays nested too deeply", start) from exc


class _PhpArrayReader:
    """Parses spans of one source text; every position is absolute."""

    def __init__(self, text: str) -> None:
        self.text = text

    def parse_entries(self, start: int, end: int) -> JSONObject:
        """Parse a comma separated ``key => value`` sequence in ``[start, end)``."""
        result: JSONObject = {}
        pos = self._skip_whitespace(start, end)
        while pos < end:
            key, pos = self.parse_key(pos, end)
            pos = self._skip_whitespace(pos, end)
            if not self.text.startswith("=>", pos) or pos + 2 > end:
                raise PhpArraySyntaxError("Expected '=>'", pos)
            pos = self._skip_whitespace(pos + 2, end)

            value, pos = self.parse_value(pos, end)
            result[key] = value

            pos = self._skip_whitespace(pos, end)
            if pos >= end:
                break
            if self.text[pos] != ",":
                raise PhpArraySyntaxError("Expected ',' or end of array", pos)
            pos = self._skip_whitespace(pos + 1, end)
        return result

    def parse_key(self, pos: int, end: int) -> tuple[str, int]:
        """Parse a quoted string or unsigned integer key."""
        if pos < end and self.text[pos] == "'":
            return self.parse_string(pos, end)
        match = _UNSIGNED_INTEGER.match(self.text, pos, end)
        if match is not None:
            return match.group().lstrip("0") or "0", match.end()
        raise PhpArraySyntaxError("Invalid key", pos)

    def parse_value(self, pos: int, end: int) -> tuple[JSONValue, int]:
        """Dispatch on the next significant character or keyword."""
        if pos >= end:
            raise PhpArraySyntaxError("Expected value", pos)

        char = self.text[pos]
        if char == "'":
            return self.parse_string(pos, end)
        if self._keyword_at(pos, end, "array"):
            return self.parse_array(pos, end)
        for keyword, literal in _KEYWORDS.items():
            if self._keyword_at(pos, end, keyword, ignore_case=True):
                return literal, pos + len(keyword)
        if char.isdigit() or char == "-":
            return self.parse_number(pos, end)
        raise PhpArraySyntaxError(f"Unexpected character {char!r}", pos)

    def parse_string(self, pos: int, end: int) -> tuple[str, int]:
        """Parse a single-quoted string; only ``\\'`` and ``\\\\`` are escapes."""
        chars: list[str] = []
        i = pos + 1
        while i < end and self.text[i] != "'":
            char = self.text[i]
            if char == "\\" and i + 1 < end:
                following = self.text[i + 1]
                if following in ("'", "\\"):
                    chars.append(following)
                else:
                    chars.append(char + following)
                i += 2
                continue
            chars.append(char)
            i += 1
        if i >= end:
            raise PhpArraySyntaxError("Unterminated string", pos)
        return "".join(chars), i + 1

    def parse_number(self, pos: int, end: int) -> tuple[JSONValue, int]:
        """Parse a signed decimal number."""
        match = _NUMBER.match(self.text, pos, end)
        if match is None:
            raise PhpArraySyntaxError("Invalid number", pos)
        literal = match.group()
        if any(marker in literal for marker in ".eE"):
            return float(literal), match.end()
        try:
            return int(literal), match.end()
        except ValueError as exc:
            # Integer literals beyond the interpreter's digit limit.
            raise PhpArraySyntaxError("Integer literal too long", pos) from exc

    def parse_array(self, pos: int, end: int) -> tuple[JSONObject, int]:
        """Locate the matching ``)`` first, then parse the inner span."""
        open_paren = self._skip_whitespace(pos + len("array"), end)
        if open_paren >= end or self.text[open_paren] != "(":
            raise PhpArraySyntaxError("Expected '(' after 'array'", open_paren)
        close_paren = self._matching_paren(open_paren, end)
        return self.parse_entries(open_paren + 1, close_paren), close_paren + 1

    def _matching_paren(self, open_paren: int, end: int) -> int:
        depth = 1
        i = open_paren + 1
        while i < end:
            char = self.text[i]
            if char == "'":
                _, i = self.parse_string(i, end)
                continue
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    return i
            i += 1
        raise PhpArraySyntaxError("Unbalanced parentheses in array", open_paren)

    def _keyword_at(self, pos: int, end: int, keyword: str, *, ignore_case: bool = False) -> bool:
        stop = pos + len(keyword)
        if stop > end:
            return False
        candidate = self.text[pos:stop]
        if ignore_case:
            candidate = candidate.lower()
        if candidate != keyword:
            return False
        return stop == end or not (self.text[stop].isalnum() or self.text[stop] == "_")

    def _skip_whitespace(self, pos: int, end: int) -> int:
        while pos < end and self.text[pos].isspace():
            pos += 1
        return pos
