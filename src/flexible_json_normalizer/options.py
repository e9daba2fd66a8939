"""Parse configuration and its YAML loader."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .json_types import JSONValue


class OptionsLoadError(RuntimeError):
    """Raised when a configuration file cannot be loaded."""


class ParseOptions(BaseModel):
    """Tunable bounds for one parse invocation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_depth: int = Field(default=6, ge=1, description="Recovery rounds on the isolated path")
    timeout_ms: int = Field(default=2000, ge=1, description="Hard deadline for the worker")
    small_input_threshold_bytes: int = Field(
        default=65536,
        ge=0,
        description="Inputs smaller than this are first tried synchronously",
    )
    enable_unicode_decode: bool = True
    fast_path_depth: int = Field(default=3, ge=1, description="Recovery rounds on the fast path")
    unicode_rounds: int = Field(default=4, ge=1, description="Unicode decoding convergence cap")
    start_method: Literal["spawn", "fork", "forkserver"] = "spawn"


def load_options(path: Path) -> ParseOptions:
    """Load and validate parse options from a YAML mapping."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise OptionsLoadError(f"Failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise OptionsLoadError(f"Failed to parse YAML in {path}: {exc}") from exc

    payload_value: JSONValue = payload
    if payload_value is None:
        return ParseOptions()
    if not isinstance(payload_value, dict):
        raise OptionsLoadError(
            f"Config file must deserialize to a mapping, got {type(payload_value)!r}"
        )

    try:
        return ParseOptions.model_validate(payload_value)
    except ValidationError as exc:
        raise OptionsLoadError(f"Invalid parse options in {path}: {exc}") from exc
