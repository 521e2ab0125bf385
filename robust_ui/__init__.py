"""
================================================================================
Robust UI
================================================================================

Helper layer for browser-driven UI tests: flexible locator strings, bounded
waits, clicks with fallback strategies, activity settling and DOM snapshots
on failure.

Components:
    - locator_parser: "type=value" and shorthand locator parsing
    - element_query: find one / many elements, absence as None / []
    - wait_engine: presence, absence, count and visibility waits
    - activity_settler: wait for in-flight async work, one reload on stall
    - robust_clicker: native -> script -> keyboard click fallback chain
    - diagnostic_capture: sanitized DOM snapshots for failed tests
    - page_base: base page object exposing all of the above
    - browser_manager: Playwright lifecycle, hands out driver sessions

Author: Automation Team
License: MIT
================================================================================
"""

from .activity_settler import ActivitySettler
from .browser_manager import BrowserManager
from .diagnostic_capture import DiagnosticCapture, FileSnapshotWriter, SnapshotWriter
from .driver import BrowserDriver, BrowserElement, Keys
from .element_query import ElementQuery
from .error_list import ErrorList
from .errors import (
    AmbiguousSelectorError,
    DriverError,
    ElementAssertionError,
    ElementInteractionError,
    InvalidLocatorError,
    PreconditionError,
    RobustUIError,
    ScriptExecutionError,
    SettleTimeoutError,
    StaleElementError,
    WaitTimeoutError,
)
from .locator_parser import Locator, LocatorParser, LocatorStrategy, parse_locator
from .page_base import BasePage, PageBase
from .playwright_driver import PlaywrightDriver
from .retry import retry_once
from .robust_clicker import ClickOutcome, RobustClicker
from .wait_engine import WaitEngine, WaitSpec

__version__ = "1.0.0"

__all__ = [
    "ActivitySettler",
    "BrowserManager",
    "DiagnosticCapture",
    "FileSnapshotWriter",
    "SnapshotWriter",
    "BrowserDriver",
    "BrowserElement",
    "Keys",
    "ElementQuery",
    "ErrorList",
    "AmbiguousSelectorError",
    "DriverError",
    "ElementAssertionError",
    "ElementInteractionError",
    "InvalidLocatorError",
    "PreconditionError",
    "RobustUIError",
    "ScriptExecutionError",
    "SettleTimeoutError",
    "StaleElementError",
    "WaitTimeoutError",
    "Locator",
    "LocatorParser",
    "LocatorStrategy",
    "parse_locator",
    "BasePage",
    "PageBase",
    "PlaywrightDriver",
    "retry_once",
    "ClickOutcome",
    "RobustClicker",
    "WaitEngine",
    "WaitSpec",
]
