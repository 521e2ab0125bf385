"""
================================================================================
Locator Parser
================================================================================

Converts flexible locator strings into structured, strategy-tagged locators.

Supported formats:
    - "css=#submit.primary"      -> CSS selector
    - "id=happy" / "identifier=happy" -> element id
    - "link=Sign out"            -> anchor with exact link text
    - "name=username"            -> name attribute
    - "tag=a"                    -> tag name
    - "xpath=//div/article"      -> XPath
    - "//div[@id='x']"           -> XPath (leading slash)
    - "#id", ".class", "[attr]"  -> CSS
    - anything else              -> CSS

Prefixes are matched case-insensitively and only the first "=" splits the
type from the value, so "css=input[name='q']" keeps its attribute selector.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from .errors import InvalidLocatorError


class LocatorStrategy(Enum):
    """Element lookup strategies understood by the driver capability."""
    ID = "id"
    CSS = "css"
    XPATH = "xpath"
    LINK_TEXT = "link"
    NAME = "name"
    TAG_NAME = "tag"


@dataclass(frozen=True)
class Locator:
    """
    Parsed locator.

    Attributes:
        strategy: How the driver should look the element up
        value: Strategy-specific expression (selector, id, text, ...)
    """
    strategy: LocatorStrategy
    value: str

    def __str__(self) -> str:
        return f"{self.strategy.value}={self.value}"


class LocatorParser:
    """
    Parser for "type=value" and shorthand locator strings.

    Usage:
        >>> parser = LocatorParser()
        >>> parser.parse("css=#submit-btn")
        Locator(strategy=<LocatorStrategy.CSS: 'css'>, value='#submit-btn')
        >>> parser.parse("//div[@id='x']").strategy
        <LocatorStrategy.XPATH: 'xpath'>
    """

    # Recognized "type=" prefixes (lower-case) -> strategy
    PREFIXES: Dict[str, LocatorStrategy] = {
        "css": LocatorStrategy.CSS,
        "identifier": LocatorStrategy.ID,
        "id": LocatorStrategy.ID,
        "link": LocatorStrategy.LINK_TEXT,
        "name": LocatorStrategy.NAME,
        "tag": LocatorStrategy.TAG_NAME,
        "xpath": LocatorStrategy.XPATH,
    }

    CSS_HINTS = ("#", ".", "[")

    def parse(self, raw: Optional[str]) -> Locator:
        """
        Parse a locator string.

        Args:
            raw: Locator string, either "type=value" or a bare selector

        Returns:
            Structured Locator

        Raises:
            InvalidLocatorError: If raw is None or empty
        """
        if not raw:
            raise InvalidLocatorError(f"Invalid locator: {raw!r}")

        prefix, sep, remainder = raw.partition("=")
        if sep:
            strategy = self.PREFIXES.get(prefix.lower())
            if strategy is not None:
                return Locator(strategy, remainder)

        if raw.startswith("/"):
            return Locator(LocatorStrategy.XPATH, raw)
        if raw.startswith(self.CSS_HINTS):
            return Locator(LocatorStrategy.CSS, raw)
        if raw:
            # Tag names, combinators, pseudo-classes: let the CSS engine decide
            return Locator(LocatorStrategy.CSS, raw)

        # Unreachable for non-empty input; keeps the function total
        return Locator(LocatorStrategy.ID, raw)


_default_parser = LocatorParser()


def parse_locator(raw: Union[str, Locator, None]) -> Locator:
    """
    Parse a locator string with the shared parser.

    Already-parsed Locator objects are returned unchanged so callers can pass
    either form.
    """
    if isinstance(raw, Locator):
        return raw
    return _default_parser.parse(raw)


__all__ = [
    "LocatorStrategy",
    "Locator",
    "LocatorParser",
    "parse_locator",
]
