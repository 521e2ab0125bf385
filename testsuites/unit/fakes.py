"""
In-memory stand-ins for the driver capability.

FakeClock drives every wait: sleep() advances time instantly, so timing
properties can be asserted exactly without real waiting.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Union

from robust_ui.driver import BrowserDriver, BrowserElement
from robust_ui.errors import ElementInteractionError, StaleElementError
from robust_ui.locator_parser import Locator, parse_locator


PROBE = "jQuery.active"


class FakeClock:
    """Monotonic clock whose sleep() just moves time forward."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _value(value: Any) -> Any:
    return value() if callable(value) else value


class FakeElement(BrowserElement):
    """Scriptable element. Errors are raised when set on the matching attribute."""

    def __init__(
        self,
        name: str = "element",
        text: str = "",
        attributes: Optional[Dict[str, Any]] = None,
        displayed: Union[bool, Callable[[], bool]] = True,
        enabled: bool = True,
    ):
        self.name = name
        self.text = text
        self.attributes = attributes or {}
        self.displayed = displayed
        self.enabled = enabled
        self.stale = False
        self.click_error: Optional[Exception] = None
        self.send_keys_error: Optional[Exception] = None
        self.on_click: Optional[Callable[[], None]] = None
        self.clicks = 0
        self.keys: List[str] = []
        self.cleared = 0
        self.options: Dict[str, str] = {}
        self.selected: List[str] = []

    def __repr__(self) -> str:
        return f"FakeElement({self.name!r})"

    def _check_stale(self) -> None:
        if self.stale:
            raise StaleElementError(f"{self.name} is not attached to the DOM")

    def get_text(self) -> str:
        self._check_stale()
        return _value(self.text)

    def get_attribute(self, name: str) -> Optional[str]:
        self._check_stale()
        return _value(self.attributes.get(name))

    def is_displayed(self) -> bool:
        self._check_stale()
        return _value(self.displayed)

    def is_enabled(self) -> bool:
        self._check_stale()
        return self.enabled

    def click(self) -> None:
        self.clicks += 1
        if self.click_error is not None:
            raise self.click_error
        if self.on_click is not None:
            self.on_click()

    def send_keys(self, value: str) -> None:
        if self.send_keys_error is not None:
            raise self.send_keys_error
        self.keys.append(value)

    def clear(self) -> None:
        self.cleared += 1

    def select_option(self, value: Optional[str] = None, label: Optional[str] = None) -> List[str]:
        """Options are a value -> label map; selecting an unknown option raises."""
        self._check_stale()
        if label is not None:
            matches = [v for v, text in self.options.items() if text == label]
        else:
            matches = [value] if value in self.options else []
        if not matches:
            raise ElementInteractionError(f"{self.name} has no option {value or label!r}")
        self.selected = matches[:1]
        return list(self.selected)


class FakeDriver(BrowserDriver):
    """
    Driver over a dict of locator -> elements.

    DOM entries and script results may be callables, evaluated on every
    lookup, so a test can make the page change over (fake) time. A script
    result that is an exception instance is raised.
    """

    def __init__(self, url: str = "http://localhost:3000/page") -> None:
        self.dom: Dict[Locator, Any] = {}
        self.script_results: Dict[str, Any] = {}
        self.scripts: List[tuple] = []
        self.url = url
        self.visited: List[str] = []
        self.refreshes = 0
        self.backs = 0
        self.cookies_deleted = 0
        self.quit_called = False
        self.find_error: Optional[Exception] = None

    def set(self, locator: str, elements: Any) -> None:
        self.dom[parse_locator(locator)] = elements

    def find_elements(self, locator: Locator) -> List[BrowserElement]:
        if self.find_error is not None:
            raise self.find_error
        return list(_value(self.dom.get(locator, [])))

    def find_element(self, locator: Locator) -> Optional[BrowserElement]:
        elements = self.find_elements(locator)
        return elements[0] if elements else None

    def execute_script(self, script: str, *args: Any) -> Any:
        self.scripts.append((script, args))
        result = self.script_results.get(script)
        if isinstance(result, Exception):
            raise result
        return _value(result)

    def navigate_to(self, url: str) -> None:
        self.visited.append(url)
        self.url = url

    def back(self) -> None:
        self.backs += 1

    def refresh(self) -> None:
        self.refreshes += 1

    def current_url(self) -> str:
        return self.url

    def quit(self) -> None:
        self.quit_called = True

    def delete_all_cookies(self) -> None:
        self.cookies_deleted += 1

    def scripts_named(self, script: str) -> List[tuple]:
        return [args for s, args in self.scripts if s == script]
