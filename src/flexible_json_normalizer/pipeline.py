"""Synchronous parse pipeline shared by the fast path, the worker and the fallback."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from .model_types import ParseResult
from .options import ParseOptions
from .php_array import PhpArraySyntaxError, has_php_array_signature, parse_php_array
from .recovery import recover
from .unicode_decode import deep_decode

logger = logging.getLogger(__name__)


def parse_text(
    text: str,
    options: ParseOptions,
    *,
    max_depth: Optional[int] = None,
) -> ParseResult:
    """Run the PHP array grammar, then the recovery loop, then unicode decoding.

    Args:
        text (str): Raw input text.
        options (ParseOptions): Parse configuration.
        max_depth (Optional[int]): Overrides ``options.max_depth`` for this call.

    Returns:
        ParseResult: Parsed value or the recovery loop's final syntax error.
    """
    result = _parse_php_array(text)
    if result is None:
        result = recover(text, max_depth if max_depth is not None else options.max_depth)

    if result.ok and options.enable_unicode_decode:
        result = replace(result, value=deep_decode(result.value, options.unicode_rounds))
    return result


def _parse_php_array(text: str) -> Optional[ParseResult]:
    if not has_php_array_signature(text):
        return None
    candidate = text.strip()
    try:
        value = parse_php_array(candidate)
    except PhpArraySyntaxError as exc:
        logger.debug("PHP array grammar rejected input, falling back to recovery: %s", exc)
        return None
    return ParseResult.success(value, candidate, grammar="php")
