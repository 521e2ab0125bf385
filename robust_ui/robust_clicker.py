# ================================================================================
# Robust Clicker Module
# ================================================================================
#
# Clicking with escalating fallback strategies.
#
# A click first waits for its target, refuses ambiguous selectors, then walks
# a fallback chain until one strategy goes through:
#
#   1. native      - the driver's own click on the element
#   2. script      - synthetic mousedown + mouseup + click dispatched in the page
#   3. keyboard    - ENTER sent to the element
#
# Failures of individual stages are logged, never raised. The result of the
# chain is kept on `last_outcome` so callers can assert on it. After the chain,
# the clicker always waits for page activity to settle.
#
# Key Features:
#   - Fallback chain with per-stage logging
#   - Compound operations (click + wait) with exactly one retry on timeout
#   - Checkbox click with one re-click when the box did not toggle
#   - SVG click via dispatched events
#   - Allure step integration
#
# ================================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

import allure
from loguru import logger

from ui_tools.common import get_config

from .activity_settler import ActivitySettler
from .driver import BrowserDriver, BrowserElement, Keys
from .element_query import ElementQuery, LocatorLike
from .errors import (
    AmbiguousSelectorError,
    ElementAssertionError,
    ElementInteractionError,
    ScriptExecutionError,
    StaleElementError,
    WaitTimeoutError,
)
from .retry import retry_once
from .wait_engine import WaitEngine


# Failures that move the click on to the next strategy. DriverError is not here.
INTERACTION_ERRORS = (ElementInteractionError, StaleElementError, ScriptExecutionError)

SCRIPT_CLICK = """el => {
    for (const type of ['mousedown', 'mouseup', 'click']) {
        el.dispatchEvent(new MouseEvent(type, {bubbles: true, cancelable: true, view: window}));
    }
}"""

SVG_CLICK = "el => el.dispatchEvent(new Event('click', {bubbles: true, cancelable: true}))"


@dataclass
class ClickOutcome:
    """
    Result of one pass through the click fallback chain.

    Attributes:
        locator: Selector that was clicked
        strategy: Stage that went through ("native", "script", "keyboard"), or None
        failures: One message per stage that failed, in order
    """
    locator: str
    strategy: Optional[str] = None
    failures: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.strategy is not None


class RobustClicker:
    """
    Click helper with fallbacks, settling and compound operations.

    Example:
        clicker = RobustClicker(driver, query, wait_engine, settler)
        clicker.click("#save")
        clicker.click_and_wait_for_displayed("#open-settings", ".settings-panel")
        clicker.click_to_dismiss("css=.toast .close")
    """

    def __init__(
        self,
        driver: BrowserDriver,
        query: ElementQuery,
        wait_engine: WaitEngine,
        settler: ActivitySettler,
        pre_click_delay: Optional[float] = None,
        post_click_delay: Optional[float] = None,
    ):
        """
        Initialize the clicker.

        Args:
            driver: Session used for script-dispatched clicks
            query: Element lookup
            wait_engine: Presence/absence/visibility waits
            settler: Activity settler run after every click
            pre_click_delay: Seconds between presence and click; config ui.pre_click_delay
            post_click_delay: Seconds between click and settle; config ui.post_click_delay
        """
        self.driver = driver
        self.query = query
        self.wait_engine = wait_engine
        self.settler = settler
        self.pre_click_delay = float(
            pre_click_delay if pre_click_delay is not None
            else get_config("ui.pre_click_delay", 0.05)
        )
        self.post_click_delay = float(
            post_click_delay if post_click_delay is not None
            else get_config("ui.post_click_delay", 0.1)
        )
        self.last_outcome: Optional[ClickOutcome] = None

    def _click_target(self, locator: LocatorLike, fallback: BrowserElement) -> BrowserElement:
        """
        Pick the element to click from one lookup pass.

        The single visible match wins; with no visible match the first match
        is used so the fallback chain can still try it.

        Raises:
            AmbiguousSelectorError: If more than one match is visible
        """
        matches = self.query.find_many(locator)
        visible = []
        for element in matches:
            try:
                if element.is_displayed():
                    visible.append(element)
            except StaleElementError:
                continue
        if len(visible) > 1:
            raise AmbiguousSelectorError(str(locator), len(visible))
        if visible:
            return visible[0]
        return matches[0] if matches else fallback

    def _strategies(self, element: BrowserElement) -> List[Tuple[str, Callable[[], object]]]:
        return [
            ("native", element.click),
            ("script", lambda: self.driver.execute_script(SCRIPT_CLICK, element)),
            ("keyboard", lambda: element.send_keys(Keys.ENTER)),
        ]

    @allure.step("Click element: {locator}")
    def click(self, locator: LocatorLike) -> BrowserElement:
        """
        Click the single element matching locator.

        Args:
            locator: Locator string or parsed Locator

        Returns:
            The element that was clicked

        Raises:
            WaitTimeoutError: If the element never appears or activity never settles
            AmbiguousSelectorError: If more than one visible element matches
        """
        element = self.wait_engine.wait_for_present(locator)
        # Small human-like pause so late page setup can finish
        self.wait_engine.sleep(self.pre_click_delay)

        element = self._click_target(locator, element)

        logger.info(f"Clicking on {locator}.")
        outcome = ClickOutcome(locator=str(locator))
        for strategy, attempt in self._strategies(element):
            try:
                attempt()
            except INTERACTION_ERRORS as e:
                outcome.failures.append(f"{strategy}: {e}")
                logger.info(f'{strategy.capitalize()} click failed for "{locator}": {e}')
                continue
            outcome.strategy = strategy
            break

        if outcome.succeeded:
            logger.debug(f"Clicked {locator} using {outcome.strategy} click")
        else:
            logger.warning(f"❌ All click attempts failed for {locator}")
        self.last_outcome = outcome

        self.wait_engine.sleep(self.post_click_delay)
        self.settler.settle()
        return element

    def click_item(self, elements: Sequence[BrowserElement], index: int) -> BrowserElement:
        """Native click on one element of a previously found list."""
        element = elements[index]
        element.click()
        return element

    # =========================================================================
    # Compound Operations
    # =========================================================================

    @allure.step("Click {click_locator} and wait for {present_locator}")
    def click_and_wait_for_present(
        self,
        click_locator: LocatorLike,
        present_locator: LocatorLike,
    ) -> BrowserElement:
        """Click, then wait for another element to be present. Retried once on timeout."""
        def attempt() -> BrowserElement:
            self.click(click_locator)
            return self.wait_engine.wait_for_present(present_locator)

        return retry_once(attempt, WaitTimeoutError, f'click on selector="{click_locator}"')

    @allure.step("Click {click_locator} and wait for {displayed_locator} displayed")
    def click_and_wait_for_displayed(
        self,
        click_locator: LocatorLike,
        displayed_locator: LocatorLike,
    ) -> BrowserElement:
        """Click, then wait for another element to be visible. Retried once on timeout."""
        def attempt() -> BrowserElement:
            self.click(click_locator)
            return self.wait_engine.wait_for_displayed(displayed_locator)

        return retry_once(attempt, WaitTimeoutError, f'click on selector="{click_locator}"')

    @allure.step("Click to dismiss: {locator}")
    def click_to_dismiss(self, locator: LocatorLike) -> None:
        """
        Click an element that removes itself from the DOM, then wait for it to go.

        Only for elements that are actually removed; a merely hidden element
        never satisfies the absence wait.
        """
        def attempt() -> None:
            self.click(locator)
            self.wait_engine.wait_for_absent(locator)

        retry_once(attempt, WaitTimeoutError, f'click on selector="{locator}"')

    @allure.step("Click checkbox: {locator}")
    def click_checkbox(self, locator: LocatorLike) -> BrowserElement:
        """
        Click a checkbox and make sure it ends up checked.

        Raises:
            ElementAssertionError: If the box is still unchecked after a second click
        """
        checkbox = self.click(locator)
        checked = checkbox.get_attribute("checked")
        if checked != "true":
            logger.info(f'Retrying click on checkbox="{locator}" because it says it is still not checked.')
            checkbox = self.click(locator)
            checked = checkbox.get_attribute("checked")
        if checked != "true":
            raise ElementAssertionError(f"should be checked: {locator}")
        return checkbox

    # =========================================================================
    # SVG Clicks
    # =========================================================================

    @allure.step("Click SVG element: {locator}")
    def click_svg(self, locator: LocatorLike) -> BrowserElement:
        """Dispatch a bubbling click event on an SVG node, then settle."""
        element = self.wait_engine.wait_for_present(locator)
        logger.info(f"Dispatching SVG click on {locator}.")
        self.driver.execute_script(SVG_CLICK, element)
        self.settler.settle()
        return element

    @allure.step("Click SVG to dismiss: {locator}")
    def click_svg_to_dismiss(self, locator: LocatorLike) -> None:
        """SVG variant of click_to_dismiss."""
        def attempt() -> None:
            self.click_svg(locator)
            self.wait_engine.wait_for_absent(locator)

        retry_once(attempt, WaitTimeoutError, f'SVG click on selector="{locator}"')


__all__ = [
    "ClickOutcome",
    "RobustClicker",
    "SCRIPT_CLICK",
    "SVG_CLICK",
    "INTERACTION_ERRORS",
]
