"""Fixture-based end-to-end parsing tests."""

from __future__ import annotations

from pathlib import Path

from flexible_json_normalizer.options import ParseOptions
from flexible_json_normalizer.pipeline import parse_text
from .fixture_helpers import (
    expected_path_for,
    fixture_dir,
    iter_fixture_paths,
    load_expected,
    parametrize_fixtures,
)


def test_fixture_directory_exists() -> None:
    """Ensure the fixtures directory is present and populated."""
    assert fixture_dir().is_dir(), f"Fixture directory not found: {fixture_dir()}"
    assert iter_fixture_paths(), "No sample fixtures found"


@parametrize_fixtures()
def test_fixture_has_expected_output(fixture_path: Path) -> None:
    """Every raw sample is paired with an expected JSON document."""
    assert expected_path_for(fixture_path).is_file(), fixture_path


@parametrize_fixtures()
def test_fixture_parses_to_expected_tree(fixture_path: Path) -> None:
    """Each sample normalizes to its expected value tree."""
    text = fixture_path.read_text(encoding="utf-8")

    result = parse_text(text, ParseOptions())

    assert result.ok, result.error
    assert result.value == load_expected(fixture_path)
