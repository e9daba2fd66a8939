"""Unit tests for the bounded escape-normalization recovery loop."""

from __future__ import annotations

import json

import pytest

from flexible_json_normalizer.model_types import ErrorKind
from flexible_json_normalizer.recovery import recover

_DOCUMENTS = [
    {"a": 1, "b": [True, False, None], "c": {"nested": "value"}},
    [1, 2.5, "three", {"four": [4]}],
    {"text": "line one\nline two\ttabbed \"quoted\" back\\slash"},
    {"unicode": "äöü 😀"},
    [],
    {},
]


def _stringify(document: str, times: int) -> str:
    text = document
    for _ in range(times):
        text = json.dumps(text)
    return text


@pytest.mark.parametrize("document", _DOCUMENTS, ids=lambda doc: type(doc).__name__)
def test_strict_json_matches_reference_parse(document: object) -> None:
    """Valid JSON parses exactly like the standard library decoder."""
    text = json.dumps(document, indent=2)
    result = recover(text)

    assert result.ok, result.error
    assert result.value == json.loads(text)
    assert result.rounds == 1


@pytest.mark.parametrize("times", [1, 2, 3, 4, 5, 6])
@pytest.mark.parametrize("document", _DOCUMENTS[:4], ids=["object", "array", "escapes", "unicode"])
def test_repeatedly_stringified_json_is_recovered(document: object, times: int) -> None:
    """Text stringified and quoted up to max_depth times recovers the original tree."""
    raw = json.dumps(document)
    result = recover(_stringify(raw, times), max_depth=6)

    assert result.ok, result.error
    assert result.value == json.loads(raw)
    assert result.final_text == raw


def test_fixed_point_stops_after_first_round() -> None:
    """A round that changes nothing ends the loop instead of spending max_depth rounds."""
    result = recover("not json at all", max_depth=6)

    assert not result.ok
    assert result.rounds == 1


def test_quote_strip_counts_as_progress() -> None:
    """Removing outer quotes alone earns exactly one more round."""
    result = recover('"plain words"', max_depth=6)

    assert not result.ok
    assert result.rounds == 2
    assert result.final_text == "plain words"


def test_scalar_documents_parse_in_final_attempt() -> None:
    """Numbers, booleans and null are parsed by the final attempt."""
    assert recover("42").value == 42
    assert recover(" true ").value is True
    null_result = recover("null")
    assert null_result.ok
    assert null_result.value is None


def test_trailing_commas_are_tolerated_after_unescaping() -> None:
    """The tolerant grammar also applies to candidates produced by unescaping."""
    result = recover(r'"{\"a\": [1, 2,],}"')

    assert result.ok, result.error
    assert result.value == {"a": [1, 2]}


def test_exhausted_depth_reports_error_relative_to_final_text() -> None:
    """Failures carry an offset into the text that was last parsed."""
    result = recover(_stringify('{"a": }', 2))

    assert not result.ok
    assert result.error is not None
    assert result.error.kind is ErrorKind.SYNTAX_ERROR
    assert result.final_text == '{"a": }'
    assert result.error.offset == 6


def test_unbalanced_inner_quotes_are_not_stripped() -> None:
    """Conservative quote handling leaves multiple quoted regions alone."""
    result = recover('"a" "b"', max_depth=3)

    assert not result.ok
    assert result.final_text == '"a" "b"'


def test_max_depth_must_be_positive() -> None:
    """A zero round budget is a programming error."""
    with pytest.raises(ValueError):
        recover("{}", max_depth=0)
