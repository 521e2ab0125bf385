"""
================================================================================
Driver Capability
================================================================================

Abstract interface the helper layer consumes from a browser-automation driver.

The engine only talks to these two classes, so any automation backend can be
plugged in by implementing them. `robust_ui.playwright_driver` provides the
Playwright implementation.

Contract:
    - find_element returns None when nothing matches (never raises for absence)
    - find_elements returns an empty list when nothing matches
    - element methods raise StaleElementError once the node is detached
    - a dead session surfaces as DriverError from any method

================================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from .locator_parser import Locator


class Keys:
    """Special keys accepted by BrowserElement.send_keys()."""
    ENTER = "Enter"
    TAB = "Tab"
    ESCAPE = "Escape"
    SPACE = " "

    ALL = (ENTER, TAB, ESCAPE, SPACE)


class BrowserElement(ABC):
    """A located UI element. Owned transiently by the caller."""

    @abstractmethod
    def get_text(self) -> str:
        """Return the rendered text of the element."""

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[str]:
        """Return an attribute value, or None when the attribute is absent."""

    @abstractmethod
    def is_displayed(self) -> bool:
        """Return True when the element is visible."""

    @abstractmethod
    def is_enabled(self) -> bool:
        """Return True when the element accepts input."""

    @abstractmethod
    def click(self) -> None:
        """Native click."""

    @abstractmethod
    def send_keys(self, value: str) -> None:
        """Type text, or press one of the Keys constants."""

    @abstractmethod
    def clear(self) -> None:
        """Clear an input's value."""

    @abstractmethod
    def select_option(self, value: Optional[str] = None, label: Optional[str] = None) -> List[str]:
        """Select a <select> option by value or visible label; return the selected values."""


class BrowserDriver(ABC):
    """One browser session (page) driven sequentially by one caller."""

    @abstractmethod
    def find_element(self, locator: Locator) -> Optional[BrowserElement]:
        """Return the first match or None."""

    @abstractmethod
    def find_elements(self, locator: Locator) -> List[BrowserElement]:
        """Return all matches in document order."""

    @abstractmethod
    def execute_script(self, script: str, *args: Any) -> Any:
        """
        Evaluate script in the page.

        Args:
            script: JavaScript expression or function source
            *args: Values (including BrowserElement instances) passed to the function

        Returns:
            The JSON-serializable result of the script

        Raises:
            ScriptExecutionError: If the script throws
        """

    @abstractmethod
    def navigate_to(self, url: str) -> None:
        """Load url in the current page."""

    @abstractmethod
    def back(self) -> None:
        """Go back one entry in history."""

    @abstractmethod
    def refresh(self) -> None:
        """Reload the current page."""

    @abstractmethod
    def current_url(self) -> str:
        """Return the URL of the current page."""

    @abstractmethod
    def quit(self) -> None:
        """End the session."""

    @abstractmethod
    def delete_all_cookies(self) -> None:
        """Remove every cookie of the session."""


__all__ = [
    "Keys",
    "BrowserElement",
    "BrowserDriver",
]
