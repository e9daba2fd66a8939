"""Unit tests for result datatypes."""

from __future__ import annotations

import pytest

from flexible_json_normalizer.model_types import ErrorInfo, ErrorKind, ParseResult


def test_failure_cannot_carry_value() -> None:
    """Value and error are mutually exclusive."""
    with pytest.raises(ValueError):
        ParseResult(
            value={"a": 1},
            error=ErrorInfo(kind=ErrorKind.TIMEOUT, message="late"),
            final_text="",
        )


def test_message_round_trip_keeps_error_details() -> None:
    """Worker messages rebuild the same failed result."""
    result = ParseResult.failure(
        ErrorInfo(kind=ErrorKind.SYNTAX_ERROR, message="bad", offset=3, snippet="ab>>>c"),
        "abc",
        rounds=2,
    )
    assert ParseResult.from_message(result.to_message()) == result


def test_message_round_trip_keeps_null_success() -> None:
    """A successful null document stays successful after transport."""
    result = ParseResult.success(None, "null", rounds=1)
    rebuilt = ParseResult.from_message(result.to_message())

    assert rebuilt.ok
    assert rebuilt.value is None
    assert rebuilt.grammar == "json"
