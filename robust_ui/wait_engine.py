# ================================================================================
# Wait Engine Module
# ================================================================================
#
# Bounded polling for element state in UI tests.
#
# Every wait runs the same loop: evaluate a check function, return on success,
# otherwise sleep one poll interval (never past the deadline) and try again.
# Deadlines are taken from a monotonic clock, so slow driver round-trips
# shorten the number of polls instead of stretching the wait.
#
# Key Features:
#   - Presence, absence, exact-count and visibility waits
#   - Poll interval derived from the timeout (timeout / 10) or overridden
#   - Optional multiplicative backoff between polls
#   - One re-resolve of the locator when a handle goes stale
#   - Allure integration for step reporting
#
# Usage:
#   engine = WaitEngine(ElementQuery(driver))
#   button = engine.wait_for_present("#submit", timeout_seconds=10)
#   rows = engine.wait_for_count(".item", 3, timeout_seconds=5)
#
# ================================================================================

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar, Union

import allure
from loguru import logger

from ui_tools.common import get_config

from .driver import BrowserElement
from .element_query import ElementQuery, LocatorLike
from .errors import PreconditionError, StaleElementError, WaitTimeoutError


T = TypeVar('T')

CheckFn = Callable[[], Tuple[bool, T]]


@dataclass
class WaitSpec:
    """
    Configuration for one wait call.

    Attributes:
        timeout_seconds: Wall-clock budget for the wait
        poll_interval_seconds: Pause between checks; defaults to timeout / 10
        backoff_multiplier: Growth factor applied to the interval after each poll
        max_interval_seconds: Upper bound for the interval when backing off
    """
    timeout_seconds: float
    poll_interval_seconds: Optional[float] = None
    backoff_multiplier: float = 1.0
    max_interval_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        if self.timeout_seconds is None or self.timeout_seconds <= 0:
            raise PreconditionError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )
        if self.poll_interval_seconds is None:
            self.poll_interval_seconds = self.timeout_seconds / 10
        if self.max_interval_seconds is None:
            self.max_interval_seconds = self.timeout_seconds

    def next_interval(self, current: float) -> float:
        """Interval to use after a poll that took `current` seconds of sleep."""
        return min(current * self.backoff_multiplier, self.max_interval_seconds)


class WaitEngine:
    """
    Polls element conditions until they hold or a deadline passes.

    Each wait moves from Polling to either Success (the result is returned)
    or TimedOut (WaitTimeoutError naming the operation and the locator).

    Example:
        engine = WaitEngine(query)
        engine.wait_for_absent(".spinner")
        panel = engine.wait_for_displayed("#details")
    """

    def __init__(
        self,
        query: ElementQuery,
        default_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the engine.

        Args:
            query: Element lookup used by every wait
            default_timeout: Timeout when a call passes none; config ui.wait_timeout
            clock: Monotonic clock, in seconds
            sleep: Blocking sleep, in seconds
        """
        self.query = query
        self.default_timeout = float(
            default_timeout if default_timeout is not None
            else get_config("ui.wait_timeout", 30)
        )
        self.clock = clock
        self.sleep = sleep

    def spec(self, timeout_seconds: Optional[float] = None) -> WaitSpec:
        """Build a WaitSpec, falling back to the engine's default timeout."""
        return WaitSpec(
            timeout_seconds=timeout_seconds if timeout_seconds is not None else self.default_timeout
        )

    def poll_until(
        self,
        check_fn: CheckFn,
        spec: WaitSpec,
        operation: str,
        locator: Any = None,
        describe: Optional[Callable[[Any], str]] = None,
    ) -> T:
        """
        Run check_fn until it reports success or the deadline passes.

        Args:
            check_fn: Function returning (success, result)
            spec: Timing for this wait
            operation: Operation name used in logs and in the timeout error
            locator: Selector being waited on, for messages
            describe: Renders the last unsuccessful result into the error detail

        Returns:
            Result from check_fn when successful

        Raises:
            WaitTimeoutError: If the deadline passes without success
        """
        start = self.clock()
        deadline = start + spec.timeout_seconds
        interval = spec.poll_interval_seconds
        attempt = 0

        while True:
            attempt += 1
            success, result = check_fn()
            if success:
                logger.debug(
                    f"Wait for {operation}({locator}) succeeded after {attempt} attempts "
                    f"({self.clock() - start:.1f}s)"
                )
                return result

            remaining = deadline - self.clock()
            if remaining <= 0:
                detail = describe(result) if describe else ""
                error = WaitTimeoutError(operation, str(locator), spec.timeout_seconds, detail)
                logger.error(f"{error} ({attempt} attempts)")
                raise error

            logger.trace(
                f"Attempt {attempt}: {operation}({locator}) not met. "
                f"Waiting {min(interval, remaining):.2f}s..."
            )
            self.sleep(min(interval, remaining))
            interval = spec.next_interval(interval)

    # =========================================================================
    # Element Waits
    # =========================================================================

    @allure.step("Wait for element present: {locator}")
    def wait_for_present(
        self,
        locator: LocatorLike,
        timeout_seconds: Optional[float] = None,
    ) -> BrowserElement:
        """
        Wait until at least one element matches locator.

        Returns:
            The first matching element
        """
        def check() -> Tuple[bool, Optional[BrowserElement]]:
            element = self.query.find_one(locator)
            return element is not None, element

        return self.poll_until(check, self.spec(timeout_seconds), "present", locator)

    @allure.step("Wait for element absent: {locator}")
    def wait_for_absent(
        self,
        locator: LocatorLike,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        """Wait until no element matches locator."""
        def check() -> Tuple[bool, None]:
            return self.query.find_one(locator) is None, None

        self.poll_until(check, self.spec(timeout_seconds), "absent", locator)

    @allure.step("Wait for {expected_count} elements: {locator}")
    def wait_for_count(
        self,
        locator: LocatorLike,
        expected_count: int,
        timeout_seconds: Optional[float] = None,
    ) -> List[BrowserElement]:
        """
        Wait until exactly expected_count elements match locator.

        More or fewer matches both count as "not yet"; the wait never succeeds
        on a count above the target.

        Returns:
            The matching elements
        """
        def check() -> Tuple[bool, List[BrowserElement]]:
            elements = self.query.find_many(locator)
            return len(elements) == expected_count, elements

        return self.poll_until(
            check,
            self.spec(timeout_seconds),
            "count",
            locator,
            describe=lambda found: f"found {len(found)}, expected {expected_count}",
        )

    def wait_for_elements_present(
        self,
        locator: LocatorLike,
        timeout_seconds: Optional[float] = None,
    ) -> List[BrowserElement]:
        """Wait for at least one match, then return every match."""
        self.wait_for_present(locator, timeout_seconds)
        return self.query.find_many(locator)

    @allure.step("Wait for element displayed: {target}")
    def wait_for_displayed(
        self,
        target: Union[LocatorLike, BrowserElement],
        timeout_seconds: Optional[float] = None,
    ) -> BrowserElement:
        """
        Wait until an element is visible, not just present.

        Args:
            target: Locator (string or parsed) or an element already in hand
            timeout_seconds: Budget for each phase of the wait

        Returns:
            The displayed element

        Raises:
            WaitTimeoutError: If the element never shows up or never becomes visible
            StaleElementError: If an element passed in directly goes stale
        """
        if isinstance(target, BrowserElement):
            return self._poll_displayed(target, "<element>", timeout_seconds)

        element = self.wait_for_present(target, timeout_seconds)
        try:
            return self._poll_displayed(element, target, timeout_seconds)
        except StaleElementError as e:
            logger.warning(f"Retrying stale element: {target} ({e})")
            element = self.wait_for_present(target, timeout_seconds)
            return self._poll_displayed(element, target, timeout_seconds)

    def _poll_displayed(
        self,
        element: BrowserElement,
        locator: Any,
        timeout_seconds: Optional[float],
    ) -> BrowserElement:
        def check() -> Tuple[bool, BrowserElement]:
            return element.is_displayed(), element

        return self.poll_until(check, self.spec(timeout_seconds), "displayed", locator)

    # =========================================================================
    # Page Text Waits
    # =========================================================================

    def _body_text(self) -> Optional[str]:
        body = self.query.find_one("tag=body")
        if body is None:
            return ""
        try:
            return body.get_text()
        except StaleElementError:
            return None

    @allure.step("Wait for text present: {texts}")
    def wait_for_text(
        self,
        texts: Sequence[str],
        present: bool = True,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        """
        Wait until every string in texts is present in (or absent from) the page body.

        Args:
            texts: Strings to look for
            present: True to wait for all to appear, False for all to disappear
            timeout_seconds: Wait budget
        """
        def check() -> Tuple[bool, List[str]]:
            body_text = self._body_text()
            if body_text is None:
                return False, list(texts)
            if present:
                pending = [s for s in texts if s not in body_text]
            else:
                pending = [s for s in texts if s in body_text]
            return not pending, pending

        operation = "text-present" if present else "text-absent"
        label = "unexpected text found" if not present else "expected text not found"
        self.poll_until(
            check,
            self.spec(timeout_seconds),
            operation,
            ", ".join(texts),
            describe=lambda pending: f"{label}: {pending}",
        )


__all__ = [
    "WaitSpec",
    "WaitEngine",
]
