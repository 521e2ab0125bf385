"""Session-scoped accumulator of failure messages for batch reporting."""

from __future__ import annotations

import threading
from typing import List

from loguru import logger


class ErrorList:
    """
    Append-only, thread-safe list of sanitized failure strings.

    One instance belongs to one page object for the length of a test session.
    Whoever flushes the messages calls drain() at the session boundary.
    """

    def __init__(self) -> None:
        self._errors: List[str] = []
        self._lock = threading.Lock()

    def report(self, message: str) -> None:
        """Record a failure. Single quotes are stripped so the text is safe for SQL-backed sinks."""
        sanitized = message.replace("'", "")
        with self._lock:
            self._errors.append(sanitized)
        logger.debug(f"Recorded failure: {sanitized}")

    def snapshot(self) -> List[str]:
        """Copy of the messages recorded so far."""
        with self._lock:
            return list(self._errors)

    def drain(self) -> List[str]:
        """Return all messages and clear the list."""
        with self._lock:
            errors, self._errors = self._errors, []
        return errors

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)


__all__ = [
    "ErrorList",
]
