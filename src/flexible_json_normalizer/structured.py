"""Strict and tolerant JSON grammar parsing of a single candidate string."""

from __future__ import annotations

import json
import logging
import re
from typing import Optional

import json5

from .diagnostics import error_snippet, offset_from_line_column
from .json_types import JSONValue
from .model_types import ErrorInfo, ErrorKind, ParseResult

logger = logging.getLogger(__name__)

_JSON5_POSITION = re.compile(r":(?P<line>\d+) Unexpected .* at column (?P<column>\d+)")


class StructuredSyntaxError(ValueError):
    """Raised when a candidate does not match a JSON grammar."""

    def __init__(self, message: str, offset: Optional[int]) -> None:
        super().__init__(message)
        self.offset = offset


def looks_structured(text: str) -> bool:
    """Whether the candidate starts like a JSON object or array."""
    return text.startswith(("{", "["))


def parse_strict(text: str) -> JSONValue:
    """Parse standard JSON."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise StructuredSyntaxError(f"{exc.msg} (strict)", exc.pos) from exc
    except ValueError as exc:
        # Integer literals beyond the interpreter's digit limit.
        raise StructuredSyntaxError(f"{exc} (strict)", None) from exc
    except RecursionError as exc:
        raise StructuredSyntaxError("Nesting too deep (strict)", None) from exc


def parse_tolerant(text: str) -> JSONValue:
    """Parse JSON allowing comments, trailing commas and other JSON5 forms."""
    try:
        return json5.loads(text)
    except ValueError as exc:
        message = str(exc)
        raise StructuredSyntaxError(
            f"{message} (tolerant)", _json5_offset(text, message)
        ) from exc
    except RecursionError as exc:
        raise StructuredSyntaxError("Nesting too deep (tolerant)", None) from exc


def parse_structured(text: str, *, rounds: int = 0) -> ParseResult:
    """Strict parse, then tolerant parse, of one candidate; never raises."""
    try:
        return ParseResult.success(parse_strict(text), text, rounds=rounds)
    except StructuredSyntaxError as strict_error:
        try:
            value = parse_tolerant(text)
        except StructuredSyntaxError as tolerant_error:
            offset = tolerant_error.offset
            if offset is None:
                offset = strict_error.offset
            return ParseResult.failure(
                _syntax_error(text, f"{strict_error}; {tolerant_error}", offset),
                text,
                rounds=rounds,
            )
        logger.debug("Tolerant grammar accepted candidate rejected by strict grammar")
        return ParseResult.success(value, text, rounds=rounds)


def _json5_offset(text: str, message: str) -> Optional[int]:
    match = _JSON5_POSITION.search(message)
    if match is None:
        return None
    return offset_from_line_column(text, int(match.group("line")), int(match.group("column")))


def _syntax_error(text: str, message: str, offset: Optional[int]) -> ErrorInfo:
    return ErrorInfo(
        kind=ErrorKind.SYNTAX_ERROR,
        message=message,
        offset=offset,
        snippet=error_snippet(text, offset) if offset is not None else None,
    )
