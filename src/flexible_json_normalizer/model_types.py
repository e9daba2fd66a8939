"""Result datatypes shared by the parsers, the executor and consumers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .json_types import JSONValue


class ErrorKind(str, Enum):
    """Category of a surfaced parse failure."""

    SYNTAX_ERROR = "SyntaxError"
    TIMEOUT = "Timeout"
    CANCELLED = "Cancelled"
    WORKER_UNAVAILABLE = "WorkerUnavailable"


@dataclass(frozen=True)
class ErrorInfo:
    """Describes why no value could be produced.

    ``offset`` and ``snippet`` are only set for grammar failures; the offset is
    a character index into the owning result's ``final_text``.
    """

    kind: ErrorKind
    message: str
    offset: Optional[int] = None
    snippet: Optional[str] = None


@dataclass(frozen=True)
class ParseResult:
    """Outcome of one parse invocation.

    A result is successful iff ``error`` is ``None``. ``value`` may legitimately
    be ``None`` on success because JSON ``null`` is a valid document.
    """

    value: JSONValue
    error: Optional[ErrorInfo]
    final_text: str
    rounds: int = 0
    grammar: Optional[str] = None

    def __post_init__(self) -> None:
        if self.error is not None and self.value is not None:
            raise ValueError("A failed ParseResult cannot carry a value")

    @property
    def ok(self) -> bool:
        """Whether a value was produced."""
        return self.error is None

    @classmethod
    def success(
        cls,
        value: JSONValue,
        final_text: str,
        *,
        rounds: int = 0,
        grammar: str = "json",
    ) -> ParseResult:
        """Build a successful result."""
        return cls(value=value, error=None, final_text=final_text, rounds=rounds, grammar=grammar)

    @classmethod
    def failure(
        cls,
        error: ErrorInfo,
        final_text: str,
        *,
        rounds: int = 0,
    ) -> ParseResult:
        """Build a failed result."""
        return cls(value=None, error=error, final_text=final_text, rounds=rounds)

    def to_message(self) -> dict[str, Any]:
        """Flatten into the plain mapping exchanged with worker processes."""
        message: dict[str, Any] = {
            "value": self.value,
            "final_text": self.final_text,
            "rounds": self.rounds,
            "grammar": self.grammar,
            "error": None,
        }
        if self.error is not None:
            message["error"] = {
                "kind": self.error.kind.value,
                "message": self.error.message,
                "offset": self.error.offset,
                "snippet": self.error.snippet,
            }
        return message

    @classmethod
    def from_message(cls, message: dict[str, Any]) -> ParseResult:
        """Rebuild a result from :meth:`to_message` output."""
        raw_error = message.get("error")
        error: Optional[ErrorInfo] = None
        if isinstance(raw_error, dict):
            error = ErrorInfo(
                kind=ErrorKind(raw_error["kind"]),
                message=str(raw_error.get("message", "")),
                offset=raw_error.get("offset"),
                snippet=raw_error.get("snippet"),
            )
        return cls(
            value=None if error is not None else message.get("value"),
            error=error,
            final_text=str(message.get("final_text", "")),
            rounds=int(message.get("rounds", 0)),
            grammar=message.get("grammar"),
        )
