"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Locator-string based waits and robust clicks
    - Text, input, class and state helpers
    - Assertion helpers with selector-bearing messages
    - DOM snapshot capture on failure
    - Session-scoped failure list

Page objects subclass BasePage; test classes talk to page objects, not to
BasePage helpers directly.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

import allure
from loguru import logger

from ui_tools.common import get_config

from .activity_settler import ActivitySettler
from .diagnostic_capture import DiagnosticCapture, SnapshotWriter
from .driver import BrowserDriver, BrowserElement
from .element_query import ElementQuery, LocatorLike
from .error_list import ErrorList
from .errors import ElementAssertionError, PreconditionError, StaleElementError, WaitTimeoutError
from .robust_clicker import ClickOutcome, RobustClicker
from .wait_engine import WaitEngine


ElementOrLocator = Union[LocatorLike, BrowserElement]


class BasePage:
    """
    Base class for all page objects.

    Usage:
        class LoginPage(BasePage):
            URL_PATH = "/login"

            def login(self, username: str, password: str) -> None:
                self.set_input_value("name=username", username)
                self.set_input_value("name=password", password)
                self.click_and_wait_for_displayed("#login", ".dashboard")
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""

    def __init__(
        self,
        driver: BrowserDriver,
        base_url: str = "",
        error_list: Optional[ErrorList] = None,
        snapshot_writer: Optional[SnapshotWriter] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize page object.

        Args:
            driver: Browser session this page object drives (one owner per driver)
            base_url: Base URL for the application; config ui.base_url (env UI_BASE_URL)
            error_list: Shared failure list, when several page objects report together
            snapshot_writer: Persistence for DOM snapshots
            clock: Monotonic clock used by all waits
            sleep: Blocking sleep used by all waits and click delays
        """
        self.driver = driver
        if not base_url:
            base_url = get_config("ui.base_url", "http://localhost:3000")
        self.base_url = base_url.rstrip("/")

        self.query = ElementQuery(driver)
        self.waits = WaitEngine(self.query, clock=clock, sleep=sleep)
        self.settler = ActivitySettler(driver, self.waits)
        self.clicker = RobustClicker(driver, self.query, self.waits, self.settler)
        self.diagnostics = DiagnosticCapture(driver, writer=snapshot_writer)
        self._errors = error_list if error_list is not None else ErrorList()

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.base_url}{self.URL_PATH}"

    @property
    def errors(self) -> ErrorList:
        """Failures reported during this session."""
        return self._errors

    @property
    def last_click_outcome(self) -> Optional[ClickOutcome]:
        """Fallback-chain result of the most recent click."""
        return self.clicker.last_outcome

    def _resolve(self, target: ElementOrLocator) -> BrowserElement:
        if isinstance(target, BrowserElement):
            return target
        return self.waits.wait_for_present(target)

    # =========================================================================
    # Navigation
    # =========================================================================

    def navigate(self) -> None:
        """Navigate to this page and let it settle."""
        with allure.step(f"Navigate to {self.URL_PATH}"):
            self.driver.navigate_to(self.url)
            self.settler.settle()
            logger.debug(f"Navigated to: {self.url}")

    def navigate_to(self, url: str) -> None:
        """
        Navigate to a path under base_url, or to an absolute URL.

        Args:
            url: "/path" or "https://..."
        """
        full_url = f"{self.base_url}{url}" if url.startswith("/") else url
        with allure.step(f"Navigate to {full_url}"):
            self.driver.navigate_to(full_url)

    def refresh(self) -> None:
        """Reload the page and wait for activity to settle."""
        self.driver.refresh()
        self.settler.settle()

    def back(self) -> None:
        """Browser back button."""
        self.driver.back()

    def current_url(self) -> str:
        return self.driver.current_url()

    def delete_cookies(self) -> None:
        self.driver.delete_all_cookies()

    def quit(self) -> None:
        self.driver.quit()

    def execute_script(self, script: str, *args: Any) -> Any:
        logger.info(f"Executing javascript: {script}")
        return self.driver.execute_script(script, *args)

    # =========================================================================
    # Waits
    # =========================================================================

    def wait_for_present(self, locator: LocatorLike, timeout_seconds: Optional[float] = None) -> BrowserElement:
        return self.waits.wait_for_present(locator, timeout_seconds)

    def wait_for_absent(self, locator: LocatorLike, timeout_seconds: Optional[float] = None) -> None:
        self.waits.wait_for_absent(locator, timeout_seconds)

    def wait_for_displayed(
        self,
        target: ElementOrLocator,
        timeout_seconds: Optional[float] = None,
    ) -> BrowserElement:
        return self.waits.wait_for_displayed(target, timeout_seconds)

    def wait_for_count(
        self,
        locator: LocatorLike,
        expected_count: int,
        timeout_seconds: Optional[float] = None,
    ) -> List[BrowserElement]:
        return self.waits.wait_for_count(locator, expected_count, timeout_seconds)

    def wait_for_elements_present(
        self,
        locator: LocatorLike,
        timeout_seconds: Optional[float] = None,
    ) -> List[BrowserElement]:
        return self.waits.wait_for_elements_present(locator, timeout_seconds)

    # =========================================================================
    # Clicks
    # =========================================================================

    def click(self, locator: LocatorLike) -> BrowserElement:
        return self.clicker.click(locator)

    def click_to_dismiss(self, locator: LocatorLike) -> None:
        self.clicker.click_to_dismiss(locator)

    def click_and_wait_for_present(self, click_locator: LocatorLike, present_locator: LocatorLike) -> BrowserElement:
        return self.clicker.click_and_wait_for_present(click_locator, present_locator)

    def click_and_wait_for_displayed(
        self,
        click_locator: LocatorLike,
        displayed_locator: LocatorLike,
    ) -> BrowserElement:
        return self.clicker.click_and_wait_for_displayed(click_locator, displayed_locator)

    def click_checkbox(self, locator: LocatorLike) -> BrowserElement:
        return self.clicker.click_checkbox(locator)

    def click_svg(self, locator: LocatorLike) -> BrowserElement:
        return self.clicker.click_svg(locator)

    def click_svg_to_dismiss(self, locator: LocatorLike) -> None:
        self.clicker.click_svg_to_dismiss(locator)

    def click_item(self, elements: List[BrowserElement], index: int) -> BrowserElement:
        return self.clicker.click_item(elements, index)

    # =========================================================================
    # Element State
    # =========================================================================

    def get_text(self, locator: LocatorLike) -> str:
        """
        Get the text of an element, re-resolving it once if it goes stale.

        Args:
            locator: Locator string or parsed Locator

        Returns:
            Rendered text
        """
        element = self.waits.wait_for_present(locator)
        try:
            return element.get_text()
        except StaleElementError as e:
            logger.warning(f"Retrying stale element: {locator} ({e})")
            return self.waits.wait_for_present(locator).get_text()

    def get_texts(self, locator: LocatorLike) -> List[str]:
        """Texts of every element matching locator (empty list when none match)."""
        return [element.get_text() for element in self.query.find_many(locator)]

    def set_input_value(self, target: ElementOrLocator, value: Optional[str]) -> None:
        """
        Replace the value of a text input.

        Args:
            target: Locator or element of the input
            value: New value; None or "" leaves the input empty
        """
        element = self._resolve(target)
        element.clear()
        if value:
            element.send_keys(value)

    @allure.step("Select option in {locator}")
    def select_option(
        self,
        locator: LocatorLike,
        value: Optional[str] = None,
        label: Optional[str] = None,
    ) -> List[str]:
        """
        Choose an option of a <select>, re-resolving it once if it goes stale.

        Args:
            locator: Locator of the select element
            value: Option value attribute to select
            label: Visible option text to select

        Returns:
            Values of the selected options

        Raises:
            PreconditionError: Unless exactly one of value and label is given
        """
        if (value is None) == (label is None):
            raise PreconditionError("select_option needs exactly one of value or label")
        element = self.waits.wait_for_present(locator)
        logger.info(f"Selecting {value if value is not None else label!r} in {locator}")
        try:
            return element.select_option(value=value, label=label)
        except StaleElementError as e:
            logger.warning(f"Retrying stale element: {locator} ({e})")
            return self.waits.wait_for_present(locator).select_option(value=value, label=label)

    def has_class(self, target: ElementOrLocator, class_name: str) -> bool:
        """True when the element's class attribute contains class_name as a whole token."""
        element = self._resolve(target)
        classes = element.get_attribute("class") or ""
        return class_name in classes.split()

    def element_exists(self, locator: LocatorLike) -> bool:
        return self.query.exists(locator)

    def is_enabled(self, target: ElementOrLocator) -> bool:
        """
        Check whether an element is enabled.

        Raises:
            ElementAssertionError: If no element matches the locator
        """
        if isinstance(target, BrowserElement):
            return target.is_enabled()
        element = self.query.find_one(target)
        if element is None:
            raise ElementAssertionError(f'No element matches selector="{target}"')
        return element.is_enabled()

    def get_href(self, target: ElementOrLocator) -> Optional[str]:
        return self._resolve(target).get_attribute("href")

    def is_text_present(self, *texts: str) -> bool:
        """True when any of texts appears in the page body."""
        body = self.query.find_one("tag=body")
        if body is None:
            return False
        body_text = body.get_text()
        return any(text in body_text for text in texts)

    # =========================================================================
    # Assertions
    # =========================================================================

    def assert_element_present(self, locator: LocatorLike) -> BrowserElement:
        element = self.query.find_one(locator)
        if element is None:
            raise ElementAssertionError(f"Element should be present: {locator}")
        return element

    def assert_element_not_present(self, locator: LocatorLike) -> None:
        if self.query.find_one(locator) is not None:
            raise ElementAssertionError(f"Element should not be present: {locator}")

    def assert_element_not_shown(
        self,
        locator: LocatorLike,
        fail_message: str,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        """
        Assert an element does not become displayed within the timeout.

        Raises:
            ElementAssertionError: With fail_message if the element shows up
        """
        try:
            self.waits.wait_for_displayed(locator, timeout_seconds)
        except WaitTimeoutError:
            logger.info(f"{locator} was not found.")
            return
        raise ElementAssertionError(fail_message)

    def assert_substring(self, substring: str, string: str) -> None:
        if substring not in string:
            raise ElementAssertionError(f"Expected '{substring}' in '{string}'")

    def assert_element_present_with_text(self, locator: LocatorLike, substring: str) -> BrowserElement:
        """Return the first element matching locator whose text contains substring."""
        for element in self.query.find_many(locator):
            if substring in element.get_text():
                return element
        self.assert_substring(substring, self.assert_element_present(locator).get_text())
        raise ElementAssertionError(f"No element matching {locator} contains '{substring}'")

    def assert_element_has_no_text(self, locator: LocatorLike) -> None:
        element = self.query.find_one(locator)
        text = element.get_text() if element is not None else ""
        if text:
            raise ElementAssertionError(f'{text}  Selector="{locator}"')

    def assert_text_present(self, *texts: str, timeout_seconds: Optional[float] = None) -> None:
        """Wait for every string to appear in the page body."""
        try:
            self.waits.wait_for_text(texts, present=True, timeout_seconds=timeout_seconds)
        except WaitTimeoutError as e:
            raise ElementAssertionError(f"[assert_text_present] {e}") from e

    def assert_text_not_present(self, *texts: str, timeout_seconds: Optional[float] = None) -> None:
        """Wait for every string to be gone from the page body."""
        try:
            self.waits.wait_for_text(texts, present=False, timeout_seconds=timeout_seconds)
        except WaitTimeoutError as e:
            raise ElementAssertionError(f"[assert_text_not_present] {e}") from e

    # =========================================================================
    # Scrolling and Mouse
    # =========================================================================

    def scroll_to(self, x: int, y: int) -> None:
        self.execute_script(f"window.scrollTo({int(x)}, {int(y)})")

    def scroll_into_view(self, locator: LocatorLike) -> None:
        element = self.waits.wait_for_present(locator)
        self.execute_script("el => el.scrollIntoView()", element)

    def move_mouse(self, locator: LocatorLike) -> None:
        """Dispatch mouseover, for hover menus that ignore synthetic pointer moves."""
        element = self.waits.wait_for_present(locator)
        self.execute_script(
            "el => el.dispatchEvent(new MouseEvent('mouseover', {bubbles: true}))", element
        )

    def mouse_enter(self, locator: LocatorLike) -> None:
        element = self.waits.wait_for_present(locator)
        self.execute_script("el => el.dispatchEvent(new MouseEvent('mouseenter'))", element)

    def focus_on_closest(self, locator: LocatorLike, ancestor: str = "li") -> None:
        """Add class "focus" to the nearest ancestor of the element matching ancestor."""
        element = self.waits.wait_for_present(locator)
        self.execute_script(
            "([el, selector]) => { const target = el.closest(selector); "
            "if (target) { target.classList.add('focus'); } }",
            element,
            ancestor,
        )
        # Give focus-dependent handlers a moment to react
        self.waits.sleep(0.1)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def capture_on_failure(
        self,
        session_label: str,
        context: Optional[str],
        cause: Optional[BaseException],
    ) -> Optional[Path]:
        """
        Save a sanitized DOM snapshot for a failure.

        Returns:
            Path to the snapshot, or None if no driver/DOM was available
        """
        with allure.step("Capture failure details"):
            return self.diagnostics.capture(session_label, context, cause)

    def report_failure(self, message: str) -> None:
        """Record a failure for batch reporting at the end of the session."""
        self._errors.report(message)


__all__ = [
    "BasePage",
    "PageBase",
]

# Backward-compatible alias (many Page Objects prefer PageBase naming)
PageBase = BasePage
