"""Deadline-bounded, cancellable parsing in an isolated worker process."""

from __future__ import annotations

import asyncio
import logging
import multiprocessing
import time
from collections.abc import Callable
from dataclasses import replace
from multiprocessing.connection import Connection
from typing import Any, Optional

from .model_types import ErrorInfo, ErrorKind, ParseResult
from .options import ParseOptions
from .pipeline import parse_text

logger = logging.getLogger(__name__)

_JOIN_TIMEOUT_S = 1.0

type WorkerTarget = Callable[[Connection, str, dict[str, Any]], None]


def run_worker(connection: Connection, text: str, options_payload: dict[str, Any]) -> None:
    """Worker process entry point: parse once and send one response message."""
    try:
        options = ParseOptions.model_validate(options_payload)
        message = parse_text(text, options).to_message()
    except Exception as exc:  # pylint: disable=broad-exception-caught
        # Reported to the parent as a worker error instead of dying silently.
        failure = ErrorInfo(kind=ErrorKind.WORKER_UNAVAILABLE, message=f"Worker failed: {exc}")
        message = ParseResult.failure(failure, text).to_message()
    try:
        connection.send(message)
    finally:
        connection.close()


class _WorkerHandle:
    """One started worker process and the read end of its response pipe."""

    def __init__(self, process: Any, connection: Connection) -> None:
        self._process = process
        self._connection = connection
        self._terminated = False

    @classmethod
    def start(
        cls,
        *,
        context: Any,
        target: WorkerTarget,
        text: str,
        options: ParseOptions,
    ) -> _WorkerHandle:
        receiver, sender = context.Pipe(duplex=False)
        try:
            process = context.Process(
                target=target,
                args=(sender, text, options.model_dump()),
                daemon=True,
            )
            process.start()
        except BaseException:
            receiver.close()
            sender.close()
            raise
        # The parent must not hold a write end, or EOF never reaches the reader.
        sender.close()
        return cls(process, receiver)

    def receive(self) -> dict[str, Any]:
        return self._connection.recv()

    def terminate(self) -> None:
        """Stop the worker; later calls are no-ops."""
        if self._terminated:
            return
        self._terminated = True
        if self._process.is_alive():
            self._process.terminate()
        self._process.join(_JOIN_TIMEOUT_S)
        if self._process.is_alive():
            self._process.kill()
            self._process.join()

    def close(self) -> None:
        self._connection.close()
        self._process.close()


class IsolatedExecutor:
    """Runs the parse pipeline under a hard deadline with optional cancellation.

    Small inputs are first parsed synchronously with a reduced round budget.
    Everything else, and every fast-path failure, is parsed in a fresh worker
    process that is terminated as soon as the first of result, deadline or
    cancellation arrives.
    """

    def __init__(
        self,
        options: Optional[ParseOptions] = None,
        *,
        mp_context: Any = None,
        worker_target: WorkerTarget = run_worker,
    ) -> None:
        self.options = options if options is not None else ParseOptions()
        self._mp_context = mp_context
        self._worker_target = worker_target

    async def run(
        self,
        text: str,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ParseResult:
        """Parse ``text``; always returns a result and never leaks a worker."""
        if self._is_small(text):
            fast = parse_text(text, self.options, max_depth=self.options.fast_path_depth)
            if fast.ok:
                return fast
            logger.debug("Fast path failed after %d rounds, using worker", fast.rounds)

        try:
            worker = _WorkerHandle.start(
                context=self._context(),
                target=self._worker_target,
                text=text,
                options=self.options,
            )
        except (OSError, ValueError, RuntimeError) as exc:
            logger.warning("Worker process unavailable, parsing in-process: %s", exc)
            return self._run_in_process(text)

        return await self._race(worker, text, cancel_event)

    def _is_small(self, text: str) -> bool:
        return len(text.encode("utf-8")) < self.options.small_input_threshold_bytes

    def _context(self) -> Any:
        if self._mp_context is not None:
            return self._mp_context
        return multiprocessing.get_context(self.options.start_method)

    async def _race(
        self,
        worker: _WorkerHandle,
        text: str,
        cancel_event: Optional[asyncio.Event],
    ) -> ParseResult:
        reader = asyncio.ensure_future(asyncio.to_thread(worker.receive))
        waiters: set[asyncio.Future[Any]] = {reader}
        canceller: Optional[asyncio.Future[Any]] = None
        if cancel_event is not None:
            canceller = asyncio.ensure_future(cancel_event.wait())
            waiters.add(canceller)

        try:
            done, _ = await asyncio.wait(
                waiters,
                timeout=self.options.timeout_ms / 1000,
                return_when=asyncio.FIRST_COMPLETED,
            )
            if reader in done:
                return self._result_from_reader(reader, text)
            if canceller is not None and canceller in done:
                return _terminal_failure(ErrorKind.CANCELLED, "Parsing was cancelled", text)
            return _terminal_failure(
                ErrorKind.TIMEOUT,
                f"Parsing did not finish within {self.options.timeout_ms} ms",
                text,
            )
        finally:
            # Joining a worker that is slow to exit must not stall the loop.
            await asyncio.to_thread(worker.terminate)
            if canceller is not None:
                canceller.cancel()
            await _drain(reader)
            worker.close()

    @staticmethod
    def _result_from_reader(reader: asyncio.Future[Any], text: str) -> ParseResult:
        try:
            message = reader.result()
        except (EOFError, OSError) as exc:
            return _terminal_failure(
                ErrorKind.WORKER_UNAVAILABLE,
                f"Worker exited without a result: {exc!r}",
                text,
            )
        return ParseResult.from_message(message)

    def _run_in_process(self, text: str) -> ParseResult:
        # Synchronous work cannot be interrupted, so the deadline is advisory here.
        started = time.monotonic()
        result = parse_text(text, self.options)
        elapsed_ms = (time.monotonic() - started) * 1000
        if elapsed_ms > self.options.timeout_ms:
            logger.warning(
                "In-process parse exceeded the %d ms deadline (%.0f ms)",
                self.options.timeout_ms,
                elapsed_ms,
            )
        if result.error is None:
            return result
        return replace(result, error=replace(result.error, kind=ErrorKind.WORKER_UNAVAILABLE))


async def _drain(reader: asyncio.Future[Any]) -> None:
    try:
        await reader
    except (EOFError, OSError):
        pass


def _terminal_failure(kind: ErrorKind, message: str, text: str) -> ParseResult:
    return ParseResult.failure(ErrorInfo(kind=kind, message=message), text)
