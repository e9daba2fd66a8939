"""Bounded escape-normalization retry loop around the structured parser."""

from __future__ import annotations

import logging

from .escapes import strip_safe_quotes, unescape_once
from .model_types import ParseResult
from .structured import looks_structured, parse_structured

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 6


def recover(text: str, max_depth: int = DEFAULT_MAX_DEPTH) -> ParseResult:
    """Parse text that may be wrapped in several layers of quoting and escaping.

    Each round tries the JSON grammars on object/array-shaped candidates, then
    peels one quoting layer and one escaping layer. Iteration stops early once
    a round no longer changes the candidate. A final strict-then-tolerant
    attempt on the last candidate decides the result.

    Args:
        text (str): Raw input text.
        max_depth (int): Maximum number of peeling rounds.

    Returns:
        ParseResult: The parsed value, or a syntax error located in ``final_text``.
    """
    if max_depth < 1:
        raise ValueError(f"max_depth must be at least 1, got {max_depth}")

    candidate = text
    rounds = 0
    for rounds in range(1, max_depth + 1):
        candidate = candidate.strip()

        if looks_structured(candidate):
            attempt = parse_structured(candidate, rounds=rounds)
            if attempt.ok:
                return attempt
            logger.debug("Round %d: structured parse failed: %s", rounds, attempt.error)

        unescaped = unescape_once(strip_safe_quotes(candidate))
        if unescaped == candidate:
            logger.debug("Round %d: candidate reached a fixed point", rounds)
            break
        candidate = unescaped

    return parse_structured(candidate.strip(), rounds=rounds)
