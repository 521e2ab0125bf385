from unittest.mock import MagicMock

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from robust_ui.driver import Keys
from robust_ui.errors import (
    DriverError,
    ElementInteractionError,
    InvalidLocatorError,
    ScriptExecutionError,
    StaleElementError,
)
from robust_ui.browser_manager import BrowserManager
from robust_ui.locator_parser import parse_locator
from robust_ui.playwright_driver import (
    LIVE_STATE_SCRIPT,
    PlaywrightDriver,
    PlaywrightElement,
    to_playwright_selector,
    translate_errors,
)


@pytest.mark.parametrize(
    "raw, selector",
    [
        ("xpath=//div", "xpath=//div"),
        ("//div", "xpath=//div"),
        ("id=main", 'css=[id="main"]'),
        ("name=q", 'css=[name="q"]'),
        ("link=Sign out", 'css=a:text-is("Sign out")'),
        ("tag=body", "css=body"),
        ("#main .row", "css=#main .row"),
    ],
)
def test_selector_mapping(raw, selector):
    assert to_playwright_selector(parse_locator(raw)) == selector


@pytest.mark.parametrize(
    "error, expected",
    [
        (PlaywrightTimeoutError("Timeout 5000ms exceeded"), ElementInteractionError),
        (PlaywrightError("Target page, context or browser has been closed"), DriverError),
        (PlaywrightError("Element is not attached to the DOM"), StaleElementError),
        (PlaywrightError("Element is outside of the viewport"), ElementInteractionError),
        (PlaywrightError('Unexpected token "[" while parsing css selector "[[bad"'), InvalidLocatorError),
        (PlaywrightError('Unknown engine "foo" while parsing selector foo=bar'), InvalidLocatorError),
    ],
)
def test_translate_errors(error, expected):
    with pytest.raises(expected):
        with translate_errors("click", ElementInteractionError):
            raise error


def test_element_semantics():
    handle = MagicMock()
    handle.evaluate.return_value = True
    handle.get_attribute.return_value = "/docs"
    element = PlaywrightElement(handle, click_timeout_ms=1000)

    assert element.get_attribute("checked") == "true"
    assert element.get_attribute("href") == "/docs"

    element.click()
    handle.click.assert_called_once_with(timeout=1000)

    element.send_keys(Keys.ENTER)
    element.send_keys("hello")
    handle.press.assert_called_once_with("Enter")
    handle.type.assert_called_once_with("hello")

    element.clear()
    handle.fill.assert_called_once_with("")


def test_detached_element_is_stale():
    handle = MagicMock()
    handle.evaluate.return_value = False
    with pytest.raises(StaleElementError):
        PlaywrightElement(handle).is_displayed()


def test_driver_lookup_and_scripts():
    page = MagicMock()
    page.query_selector.return_value = None
    page.query_selector_all.return_value = [MagicMock(), MagicMock()]
    driver = PlaywrightDriver(page)

    assert driver.find_element(parse_locator("#missing")) is None
    assert len(driver.find_elements(parse_locator(".row"))) == 2
    page.query_selector_all.assert_called_once_with("css=.row")

    element = PlaywrightElement(MagicMock())
    driver.execute_script("jQuery.active")
    driver.execute_script("el => el.click()", element)
    driver.execute_script("([el, s]) => el.closest(s)", element, "li")
    assert page.evaluate.call_args_list[0].args == ("jQuery.active",)
    assert page.evaluate.call_args_list[1].args == ("el => el.click()", element.handle)
    assert page.evaluate.call_args_list[2].args == ("([el, s]) => el.closest(s)", [element.handle, "li"])


def test_script_failure_is_translated():
    page = MagicMock()
    page.evaluate.side_effect = PlaywrightError("ReferenceError: jQuery is not defined")
    with pytest.raises(ScriptExecutionError):
        PlaywrightDriver(page).execute_script("jQuery.active")


def test_quit_closes_context():
    page = MagicMock()
    driver = PlaywrightDriver(page)
    driver.quit()
    driver.delete_all_cookies()
    page.context.close.assert_called_once_with()
    page.context.clear_cookies.assert_called_once_with()


def test_malformed_selector_is_not_a_dead_session():
    page = MagicMock()
    page.query_selector.side_effect = PlaywrightError('Unexpected token "[" while parsing css selector "[[bad"')
    with pytest.raises(InvalidLocatorError):
        PlaywrightDriver(page).find_element(parse_locator("css=[[bad"))


@pytest.mark.parametrize("name", ["checked", "selected"])
def test_form_state_reads_live_property(name):
    handle = MagicMock()
    # Markup still carries the attribute but the user has cleared the state
    handle.evaluate.return_value = False
    element = PlaywrightElement(handle)

    assert element.get_attribute(name) is None
    handle.evaluate.assert_called_once_with(LIVE_STATE_SCRIPT, name)
    assert "hasAttribute" not in LIVE_STATE_SCRIPT


def test_select_option_passes_value_and_label():
    handle = MagicMock()
    handle.select_option.return_value = ["de"]
    element = PlaywrightElement(handle)

    assert element.select_option(label="German") == ["de"]
    handle.select_option.assert_called_once_with(value=None, label="German")


def test_quit_releases_tracked_context():
    manager = BrowserManager(headless=True, browser_type="chromium")
    manager._browser = MagicMock()
    context = manager._browser.new_context.return_value
    context.new_page.return_value.context = context

    driver = manager.new_driver()
    assert manager._contexts == [context]

    driver.quit()
    assert manager._contexts == []
    context.close.assert_called_once_with()
