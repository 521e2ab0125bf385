"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser-backed tests.

Key Features:
- One browser per session, one isolated context per test
- Tests are skipped when no Playwright browser is installed
- DOM snapshot attached to the report on failure

================================================================================
"""

from typing import Generator

import pytest
from loguru import logger
from playwright.sync_api import Error as PlaywrightError

from robust_ui import BrowserManager, PlaywrightDriver
from testsuites.ui_testing.pages.widgets_page import WidgetsPage


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def browser_manager() -> Generator[BrowserManager, None, None]:
    """
    Session-scoped browser manager fixture.

    Provides a single browser for all tests in the session, reducing browser
    launch overhead.
    """
    manager = BrowserManager()
    try:
        manager.start()
    except PlaywrightError as e:
        manager.close()
        pytest.skip(f"Playwright browser not available: {e}")
    yield manager
    manager.close()


@pytest.fixture
def driver(browser_manager: BrowserManager) -> Generator[PlaywrightDriver, None, None]:
    """Function-scoped driver on a fresh context."""
    driver = browser_manager.new_driver()
    yield driver
    driver.quit()


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def widgets_page(driver: PlaywrightDriver, tmp_path) -> WidgetsPage:
    """Provides an opened WidgetsPage."""
    page = WidgetsPage(driver, base_url="http://localhost")
    page.diagnostics.snapshot_dir = tmp_path / "snapshots"
    return page.open()


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Capture a DOM snapshot when a UI test fails.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and report.failed:
        page = getattr(item, "funcargs", {}).get("widgets_page")
        if page is not None and call.excinfo is not None:
            try:
                page.capture_on_failure(item.name, "running the test body", call.excinfo.value)
            except (OSError, PlaywrightError) as e:
                logger.warning(f"Failed to capture DOM snapshot on failure: {e}")
