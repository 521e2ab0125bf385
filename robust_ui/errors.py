"""
================================================================================
Robust UI Errors
================================================================================

Exception hierarchy shared by every component of the helper layer.

Transient conditions (stale references, a single timeout inside a compound
click) are retried once by the caller that owns them. Everything else surfaces
with a message naming the operation and the selector involved.

================================================================================
"""

from __future__ import annotations

from typing import Optional


class RobustUIError(Exception):
    """Base class for all robust UI errors."""
    pass


class InvalidLocatorError(RobustUIError):
    """Raised when a locator string is empty or cannot be parsed."""
    pass


class WaitTimeoutError(RobustUIError):
    """
    Raised when a bounded wait exceeds its deadline.

    Attributes:
        operation: Name of the wait ("present", "absent", "count", ...)
        locator: Literal selector being waited on
        timeout_seconds: Deadline that was exceeded
    """

    def __init__(
        self,
        operation: str,
        locator: Optional[str],
        timeout_seconds: float,
        detail: str = "",
    ):
        self.operation = operation
        self.locator = locator
        self.timeout_seconds = timeout_seconds
        message = f'wait for {operation}("{locator}") timed out after {timeout_seconds}s'
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SettleTimeoutError(WaitTimeoutError):
    """Raised when page activity stays busy through one reload and a second poll."""

    def __init__(self, timeout_seconds: float, detail: str = ""):
        super().__init__("settle", "activity probe", timeout_seconds, detail)


class AmbiguousSelectorError(RobustUIError):
    """Raised when a click target resolves to more than one visible element."""

    def __init__(self, locator: str, count: int):
        self.locator = locator
        self.count = count
        super().__init__(
            f'click selector found count={count} elements matching selector="{locator}"'
        )


class StaleElementError(RobustUIError):
    """Raised when an element handle no longer maps to a live DOM node."""
    pass


class ElementInteractionError(RobustUIError):
    """Raised when an element refuses an interaction (intercepted, hidden, detached)."""
    pass


class ScriptExecutionError(RobustUIError):
    """Raised when a script evaluated in the page throws."""
    pass


class DriverError(RobustUIError):
    """Raised when the automation session itself is gone (closed, crashed, disconnected)."""
    pass


class PreconditionError(RobustUIError):
    """Raised on programming misuse, e.g. capturing diagnostics without a cause."""
    pass


class ElementAssertionError(RobustUIError, AssertionError):
    """Raised by assertion helpers so test runners report a plain assertion failure."""
    pass


__all__ = [
    "RobustUIError",
    "InvalidLocatorError",
    "WaitTimeoutError",
    "SettleTimeoutError",
    "AmbiguousSelectorError",
    "StaleElementError",
    "ElementInteractionError",
    "ScriptExecutionError",
    "DriverError",
    "PreconditionError",
    "ElementAssertionError",
]
