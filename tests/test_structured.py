"""Unit tests for strict and tolerant JSON grammar parsing."""

from __future__ import annotations

import pytest

from flexible_json_normalizer.model_types import ErrorKind
from flexible_json_normalizer.structured import (
    StructuredSyntaxError,
    looks_structured,
    parse_strict,
    parse_structured,
    parse_tolerant,
)


def test_looks_structured_only_for_objects_and_arrays() -> None:
    """Only ``{`` and ``[`` prefixes count as structured candidates."""
    assert looks_structured('{"a": 1}')
    assert looks_structured("[1]")
    assert not looks_structured('"{}"')
    assert not looks_structured("42")


def test_parse_strict_reports_offset() -> None:
    """Strict failures carry the decoder position."""
    with pytest.raises(StructuredSyntaxError) as excinfo:
        parse_strict('{"a": 1,}')
    assert excinfo.value.offset == 8


def test_parse_tolerant_accepts_comments_and_trailing_commas() -> None:
    """The tolerant grammar accepts what editors commonly leave behind."""
    text = '{\n  // note\n  "a": [1, 2,],\n  /* block */ "b": null,\n}'
    assert parse_tolerant(text) == {"a": [1, 2], "b": None}


def test_parse_structured_prefers_strict_result() -> None:
    """Valid JSON is returned with the candidate as final text."""
    result = parse_structured('{"a": {"b": [true, false]}}')
    assert result.ok
    assert result.value == {"a": {"b": [True, False]}}
    assert result.final_text == '{"a": {"b": [true, false]}}'


def test_parse_structured_keeps_key_order() -> None:
    """Object keys keep their insertion order."""
    result = parse_structured('{"z": 1, "a": 2, "m": 3}')
    assert isinstance(result.value, dict)
    assert list(result.value) == ["z", "a", "m"]


def test_parse_structured_failure_is_typed_and_located() -> None:
    """A double failure yields a syntax error pointing into the candidate."""
    text = '{"a": 1, "b": }'
    result = parse_structured(text)

    assert not result.ok
    assert result.value is None
    assert result.error is not None
    assert result.error.kind is ErrorKind.SYNTAX_ERROR
    assert result.error.offset is not None
    assert 0 <= result.error.offset <= len(text)
    assert result.error.snippet is not None and ">>>" in result.error.snippet
    assert result.final_text == text


def test_parse_structured_accepts_json_null_document() -> None:
    """``null`` is a successful parse even though the value is None."""
    result = parse_structured("null")
    assert result.ok
    assert result.value is None
