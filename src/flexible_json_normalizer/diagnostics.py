"""Error location helpers and human-readable failure reports."""

from __future__ import annotations

from .model_types import ErrorKind, ParseResult

_NEWLINE_MARKER = "⏎"


def clamp_offset(text: str, offset: int) -> int:
    """Clamp an offset into ``[0, len(text)]``."""
    return max(0, min(offset, len(text)))


def line_and_column(text: str, offset: int) -> tuple[int, int]:
    """Return the 1-based line and column of ``offset`` in ``text``."""
    position = clamp_offset(text, offset)
    line = text.count("\n", 0, position) + 1
    line_start = text.rfind("\n", 0, position) + 1
    return line, position - line_start + 1


def offset_from_line_column(text: str, line: int, column: int) -> int:
    """Inverse of :func:`line_and_column`, clamped to the text bounds."""
    position = 0
    for _ in range(max(line, 1) - 1):
        next_break = text.find("\n", position)
        if next_break < 0:
            return len(text)
        position = next_break + 1
    return clamp_offset(text, position + max(column, 1) - 1)


def error_snippet(text: str, offset: int, *, radius: int = 40) -> str:
    """A bounded preview of the text around ``offset``.

    The failing character is preceded by ``>>>``; newlines are shown as a
    return symbol so the snippet stays on one line.
    """
    position = clamp_offset(text, offset)
    start = max(0, position - radius)
    end = min(len(text), position + radius)
    before = text[start:position]
    after = text[position:end]
    snippet = f"{before}>>>{after}".replace("\r\n", "\n").replace("\n", _NEWLINE_MARKER)
    if start > 0:
        snippet = f"...{snippet}"
    if end < len(text):
        snippet = f"{snippet}..."
    return snippet


def format_error(result: ParseResult) -> str:
    """Render a failed result as CLI output text."""
    error = result.error
    if error is None:
        return "No error"

    lines = [f"{error.kind.value}: {error.message}"]
    if error.offset is not None:
        line, column = line_and_column(result.final_text, error.offset)
        lines.append(f"  at line {line}, column {column} (offset {error.offset})")
    if error.snippet:
        lines.append(f"  near: {error.snippet}")
    if error.kind is ErrorKind.TIMEOUT:
        lines.append("  hint: raise --timeout-ms or reduce the input size")
    return "\n".join(lines)
