"""
Element lookup by locator string.

Absence is a normal result here: find_one returns None and find_many returns
an empty list. Only infrastructure failures (DriverError) and malformed
locators (InvalidLocatorError) raise.
"""

from __future__ import annotations

from typing import List, Optional, Union

from loguru import logger

from .driver import BrowserDriver, BrowserElement
from .locator_parser import Locator, parse_locator


LocatorLike = Union[str, Locator]


class ElementQuery:
    """Resolves locator strings against one driver."""

    def __init__(self, driver: BrowserDriver):
        self.driver = driver

    def find_one(self, locator: LocatorLike) -> Optional[BrowserElement]:
        """
        Find the first element matching locator.

        Args:
            locator: Locator string or parsed Locator

        Returns:
            The element, or None when nothing matches
        """
        parsed = parse_locator(locator)
        element = self.driver.find_element(parsed)
        if element is None:
            logger.trace(f"No element for {parsed}")
        return element

    def find_many(self, locator: LocatorLike) -> List[BrowserElement]:
        """
        Find every element matching locator, in document order.

        Returns:
            Possibly empty list of elements
        """
        parsed = parse_locator(locator)
        return list(self.driver.find_elements(parsed))

    def exists(self, locator: LocatorLike) -> bool:
        """Return True when at least one element matches."""
        return self.find_one(locator) is not None


__all__ = [
    "ElementQuery",
    "LocatorLike",
]
