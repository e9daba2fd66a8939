"""Worker entry points used by executor tests.

They live in an importable module so spawned child processes can load them.
"""

from __future__ import annotations

import signal
import time
from multiprocessing.connection import Connection
from typing import Any

from flexible_json_normalizer.model_types import ParseResult


def sleeping_worker(connection: Connection, text: str, options_payload: dict[str, Any]) -> None:
    """Never answers within any reasonable deadline."""
    del options_payload
    time.sleep(60)
    connection.send(ParseResult.success(text, text).to_message())


def stubborn_worker(connection: Connection, text: str, options_payload: dict[str, Any]) -> None:
    """Ignores SIGTERM, so stopping it needs the kill escalation."""
    signal.signal(signal.SIGTERM, signal.SIG_IGN)
    sleeping_worker(connection, text, options_payload)


def silent_worker(connection: Connection, text: str, options_payload: dict[str, Any]) -> None:
    """Exits without sending a response."""
    del text, options_payload
    connection.close()


def echo_worker(connection: Connection, text: str, options_payload: dict[str, Any]) -> None:
    """Answers immediately with the raw text as a string value."""
    del options_payload
    connection.send(ParseResult.success(text, text).to_message())
    connection.close()
