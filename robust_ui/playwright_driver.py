"""
================================================================================
Playwright Driver Adapter
================================================================================

Implements the driver capability on top of Playwright's synchronous API.

Responsibilities:
    - Map parsed Locators onto Playwright selector engines
    - Translate Playwright errors into the robust UI error kinds
    - Give element handles WebDriver-like semantics (stale detection,
      boolean attributes reported as "true")

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Type

from loguru import logger
from playwright.sync_api import BrowserContext, ElementHandle, Page
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .driver import BrowserDriver, BrowserElement, Keys
from .errors import (
    DriverError,
    ElementInteractionError,
    InvalidLocatorError,
    RobustUIError,
    ScriptExecutionError,
    StaleElementError,
)
from .locator_parser import Locator, LocatorStrategy


# Substrings of Playwright error messages that mean the session is gone
SESSION_CLOSED_MARKERS = (
    "has been closed",
    "Target closed",
    "Connection closed",
    "Browser closed",
)

# Substrings that mean the element handle no longer points at a live node
DETACHED_MARKERS = (
    "not attached to the DOM",
    "Element is detached",
    "JSHandle is disposed",
)

# Substrings of selector-engine parse failures
INVALID_SELECTOR_MARKERS = (
    "while parsing",
    "is not a valid selector",
    "Unknown engine",
)

# Attributes WebDriver reports as "true"/None instead of their literal value
BOOLEAN_ATTRIBUTES = ("checked", "selected", "disabled", "readonly", "multiple")

# Form state read from the live property only; the markup attribute is just the initial value
LIVE_STATE_ATTRIBUTES = ("checked", "selected")

LIVE_STATE_SCRIPT = "(el, name) => Boolean(el[name])"
BOOLEAN_ATTRIBUTE_SCRIPT = "(el, name) => Boolean(el[name] || el.hasAttribute(name))"


def _quote(value: str) -> str:
    """Quote a value for use inside a CSS attribute selector or pseudo-class."""
    return json.dumps(value)


def to_playwright_selector(locator: Locator) -> str:
    """
    Convert a parsed Locator into a Playwright selector string.

    Args:
        locator: Parsed locator

    Returns:
        Selector with an explicit engine prefix
    """
    strategy = locator.strategy
    if strategy is LocatorStrategy.XPATH:
        return f"xpath={locator.value}"
    if strategy is LocatorStrategy.ID:
        return f"css=[id={_quote(locator.value)}]"
    if strategy is LocatorStrategy.NAME:
        return f"css=[name={_quote(locator.value)}]"
    if strategy is LocatorStrategy.LINK_TEXT:
        return f"css=a:text-is({_quote(locator.value)})"
    # CSS and TAG_NAME both go through the CSS engine
    return f"css={locator.value}"


@contextmanager
def translate_errors(action: str, default: Type[RobustUIError]) -> Iterator[None]:
    """
    Re-raise Playwright errors as robust UI errors.

    Args:
        action: Description used in the new error message
        default: Error kind for failures that are not session loss, staleness or a bad selector
    """
    try:
        yield
    except PlaywrightTimeoutError as e:
        raise default(f"{action}: {e}") from e
    except PlaywrightError as e:
        message = str(e)
        if any(marker in message for marker in SESSION_CLOSED_MARKERS):
            raise DriverError(f"{action}: {message}") from e
        if any(marker in message for marker in DETACHED_MARKERS):
            raise StaleElementError(f"{action}: {message}") from e
        if any(marker in message for marker in INVALID_SELECTOR_MARKERS):
            raise InvalidLocatorError(f"{action}: {message}") from e
        raise default(f"{action}: {message}") from e


class PlaywrightElement(BrowserElement):
    """BrowserElement backed by a Playwright ElementHandle."""

    def __init__(self, handle: ElementHandle, click_timeout_ms: int = 5000):
        self.handle = handle
        self.click_timeout_ms = click_timeout_ms

    def _ensure_attached(self, action: str) -> None:
        with translate_errors(action, StaleElementError):
            connected = self.handle.evaluate("el => el.isConnected")
        if not connected:
            raise StaleElementError(f"{action}: element is not attached to the DOM")

    def get_text(self) -> str:
        self._ensure_attached("get_text")
        with translate_errors("get_text", ElementInteractionError):
            return self.handle.inner_text()

    def get_attribute(self, name: str) -> Optional[str]:
        with translate_errors(f"get_attribute({name})", ElementInteractionError):
            attribute = name.lower()
            if attribute in BOOLEAN_ATTRIBUTES:
                script = LIVE_STATE_SCRIPT if attribute in LIVE_STATE_ATTRIBUTES else BOOLEAN_ATTRIBUTE_SCRIPT
                value = self.handle.evaluate(script, attribute)
                return "true" if value else None
            return self.handle.get_attribute(name)

    def is_displayed(self) -> bool:
        self._ensure_attached("is_displayed")
        with translate_errors("is_displayed", ElementInteractionError):
            return self.handle.is_visible()

    def is_enabled(self) -> bool:
        with translate_errors("is_enabled", ElementInteractionError):
            return self.handle.is_enabled()

    def click(self) -> None:
        with translate_errors("click", ElementInteractionError):
            self.handle.click(timeout=self.click_timeout_ms)

    def send_keys(self, value: str) -> None:
        with translate_errors("send_keys", ElementInteractionError):
            if value in Keys.ALL:
                self.handle.press(value)
            else:
                self.handle.type(value)

    def clear(self) -> None:
        with translate_errors("clear", ElementInteractionError):
            self.handle.fill("")

    def select_option(self, value: Optional[str] = None, label: Optional[str] = None) -> List[str]:
        with translate_errors("select_option", ElementInteractionError):
            return self.handle.select_option(value=value, label=label)


class PlaywrightDriver(BrowserDriver):
    """
    BrowserDriver backed by a single Playwright Page.

    Usage:
        with BrowserManager() as manager:
            driver = manager.new_driver()
            driver.navigate_to("https://example.com")
            element = driver.find_element(parse_locator("#main"))
    """

    def __init__(
        self,
        page: Page,
        click_timeout_ms: int = 5000,
        on_quit: Optional[Callable[[BrowserContext], None]] = None,
    ):
        """
        Initialize the adapter.

        Args:
            page: Playwright Page this driver owns
            click_timeout_ms: Timeout for a single native click attempt
            on_quit: Called with the closed context after quit()
        """
        self.page = page
        self.click_timeout_ms = click_timeout_ms
        self.on_quit = on_quit

    def _wrap(self, handle: Optional[ElementHandle]) -> Optional[PlaywrightElement]:
        if handle is None:
            return None
        return PlaywrightElement(handle, click_timeout_ms=self.click_timeout_ms)

    def find_element(self, locator: Locator) -> Optional[BrowserElement]:
        selector = to_playwright_selector(locator)
        with translate_errors(f"find_element({locator})", DriverError):
            return self._wrap(self.page.query_selector(selector))

    def find_elements(self, locator: Locator) -> List[BrowserElement]:
        selector = to_playwright_selector(locator)
        with translate_errors(f"find_elements({locator})", DriverError):
            handles = self.page.query_selector_all(selector)
        return [self._wrap(handle) for handle in handles]

    def execute_script(self, script: str, *args: Any) -> Any:
        logger.debug(f"Executing javascript: {script}")
        unwrapped = [a.handle if isinstance(a, PlaywrightElement) else a for a in args]
        with translate_errors("execute_script", ScriptExecutionError):
            if not unwrapped:
                return self.page.evaluate(script)
            if len(unwrapped) == 1:
                return self.page.evaluate(script, unwrapped[0])
            return self.page.evaluate(script, unwrapped)

    def navigate_to(self, url: str) -> None:
        with translate_errors(f"navigate_to({url})", DriverError):
            self.page.goto(url)

    def back(self) -> None:
        with translate_errors("back", DriverError):
            self.page.go_back()

    def refresh(self) -> None:
        with translate_errors("refresh", DriverError):
            self.page.reload()

    def current_url(self) -> str:
        return self.page.url

    def quit(self) -> None:
        context = self.page.context
        with translate_errors("quit", DriverError):
            context.close()
        if self.on_quit is not None:
            self.on_quit(context)
        logger.debug("Browser context closed")

    def delete_all_cookies(self) -> None:
        with translate_errors("delete_all_cookies", DriverError):
            self.page.context.clear_cookies()


__all__ = [
    "PlaywrightDriver",
    "PlaywrightElement",
    "to_playwright_selector",
    "translate_errors",
]
