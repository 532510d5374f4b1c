"""Bounded operations: run a callable and give up waiting after a fixed time.

Library calls (pdfplumber, Tesseract, python-docx) cannot be interrupted, so a
timed-out call keeps running on its daemon thread and its result is discarded.
"""

import threading
import time
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TypeVar

from app.extraction.exceptions import ExtractionTimeoutError

T = TypeVar("T")

TIMEOUT_MESSAGE = "processing took too long"


def run_with_timeout(operation: Callable[[], T], timeout_seconds: float | None) -> T:
    """Run ``operation`` and return its value, or raise after ``timeout_seconds``.

    ``None`` disables the bound. Exceptions raised by the operation propagate
    unchanged.

    Raises:
        ExtractionTimeoutError: if the operation did not finish in time.
    """
    if timeout_seconds is None:
        return operation()
    if timeout_seconds <= 0:
        raise ExtractionTimeoutError(TIMEOUT_MESSAGE)

    future: Future[T] = Future()

    def _target() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(operation())
        except Exception as exc:
            future.set_exception(exc)

    thread = threading.Thread(target=_target, name="bounded-operation", daemon=True)
    thread.start()
    try:
        return future.result(timeout=timeout_seconds)
    except FutureTimeoutError as exc:
        future.cancel()
        raise ExtractionTimeoutError(
            f"{TIMEOUT_MESSAGE} (limit {timeout_seconds:g}s)"
        ) from exc


class Deadline:
    """Wall-clock budget for a whole request."""

    def __init__(self, budget_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._expires_at = clock() + budget_seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def cap(self, timeout_seconds: float | None) -> float:
        """Shrink a per-operation timeout so it never outlives the deadline."""
        remaining = self.remaining()
        if timeout_seconds is None:
            return remaining
        return min(timeout_seconds, remaining)
