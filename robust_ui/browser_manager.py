"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - Single browser instance per manager
    - Isolated contexts per page (separate cookies, storage)
    - Hands out PlaywrightDriver sessions for the helper layer
    - Browser configuration from ui_tools config

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    sync_playwright,
)
from playwright.sync_api import Error as PlaywrightError

from ui_tools.common import get_bool_config, get_config, init_logger

from .playwright_driver import PlaywrightDriver


class BrowserManager:
    """
    Manages the browser instance and contexts for UI testing.

    Usage:
        with BrowserManager() as manager:
            driver = manager.new_driver()
            page = LoginPage(driver)
            page.navigate()
    """

    # Default browser launch options
    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": [
            "--ignore-certificate-errors",
        ],
    }

    # Default context options
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        headless: Optional[bool] = None,
        browser_type: Optional[str] = None,
    ):
        """
        Initialize browser manager.

        Args:
            headless: Run browser in headless mode; config browser.headless
            browser_type: 'chromium', 'firefox' or 'webkit'; config browser.type
        """
        self.headless = headless if headless is not None else get_bool_config("browser.headless", True)
        self.browser_type = browser_type or get_config("browser.type", "chromium")

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    def __enter__(self) -> "BrowserManager":
        """Context manager entry - start browser."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close browser."""
        self.close()

    def start(self) -> None:
        """Start Playwright and launch browser."""
        init_logger()
        self._playwright = sync_playwright().start()

        if self.browser_type == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.browser_type == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.headless,
        }

        self._browser = browser_launcher.launch(**launch_options)
        logger.debug(
            f"Browser started: {self.browser_type} "
            f"(headless={self.headless})"
        )

    def close(self) -> None:
        """Close all contexts and browser."""
        for context in self._contexts:
            try:
                context.close()
            except PlaywrightError as e:
                # Already closed by driver.quit()
                logger.debug(f"Ignoring context close error: {e}")
        self._contexts.clear()

        if self._browser:
            self._browser.close()
            self._browser = None

        if self._playwright:
            self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    def new_context(self, **options: Any) -> BrowserContext:
        """
        Create new browser context.

        Args:
            **options: Additional context options

        Returns:
            New BrowserContext
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {**self.DEFAULT_CONTEXT_OPTIONS, **options}
        viewport = get_config("browser.viewport")
        if viewport and "viewport" not in options:
            context_options["viewport"] = viewport

        context = self._browser.new_context(**context_options)
        self._contexts.append(context)
        return context

    def new_page(self, **context_options: Any) -> Page:
        """Create a page in a fresh context."""
        return self.new_context(**context_options).new_page()

    def new_driver(self, click_timeout_ms: int = 5000, **context_options: Any) -> PlaywrightDriver:
        """
        Create a driver session owning one page in a fresh context.

        Args:
            click_timeout_ms: Timeout for a single native click attempt
            **context_options: Options for the new context

        Returns:
            PlaywrightDriver ready to be handed to a page object
        """
        return PlaywrightDriver(
            self.new_page(**context_options),
            click_timeout_ms=click_timeout_ms,
            on_quit=self.forget_context,
        )

    def forget_context(self, context: BrowserContext) -> None:
        """Stop tracking a context its owner already closed."""
        if context in self._contexts:
            self._contexts.remove(context)

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "BrowserManager",
]
