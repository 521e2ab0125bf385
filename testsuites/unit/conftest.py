"""
================================================================================
Unit Test Fixtures
================================================================================

Fixtures wiring the robust UI components to the in-memory fakes.

================================================================================
"""

import pytest

from robust_ui.activity_settler import ActivitySettler
from robust_ui.element_query import ElementQuery
from robust_ui.page_base import BasePage
from robust_ui.robust_clicker import RobustClicker
from robust_ui.wait_engine import WaitEngine

from .fakes import PROBE, FakeClock, FakeDriver


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def query(driver: FakeDriver) -> ElementQuery:
    return ElementQuery(driver)


@pytest.fixture
def waits(query: ElementQuery, clock: FakeClock) -> WaitEngine:
    return WaitEngine(query, default_timeout=30, clock=clock.monotonic, sleep=clock.sleep)


@pytest.fixture
def settler(driver: FakeDriver, waits: WaitEngine) -> ActivitySettler:
    return ActivitySettler(driver, waits, probe_script=PROBE, default_timeout=45)


@pytest.fixture
def clicker(driver, query, waits, settler) -> RobustClicker:
    return RobustClicker(driver, query, waits, settler, pre_click_delay=0.05, post_click_delay=0.1)


@pytest.fixture
def page(driver: FakeDriver, clock: FakeClock, tmp_path) -> BasePage:
    base_page = BasePage(
        driver,
        base_url="http://app.test",
        clock=clock.monotonic,
        sleep=clock.sleep,
    )
    base_page.diagnostics.snapshot_dir = tmp_path / "snapshots"
    return base_page
