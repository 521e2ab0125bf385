import pytest

from robust_ui.errors import ElementAssertionError, ElementInteractionError, PreconditionError
from robust_ui.page_base import BasePage
from ui_tools.common import GlobalConfig

from .fakes import FakeElement


class LoginPage(BasePage):
    URL_PATH = "/login"


def test_navigation(driver, page):
    page.navigate()
    page.navigate_to("/settings")
    page.navigate_to("https://other.test/x")
    page.refresh()
    page.back()

    assert driver.visited == ["http://app.test/", "http://app.test/settings", "https://other.test/x"]
    assert driver.refreshes == 1
    assert driver.backs == 1
    assert page.current_url() == "https://other.test/x"


def test_url_joins_base_and_path(driver, clock):
    login = LoginPage(driver, base_url="http://app.test/", clock=clock.monotonic, sleep=clock.sleep)
    assert login.url == "http://app.test/login"


def test_base_url_from_environment(monkeypatch, driver):
    monkeypatch.setenv("UI_BASE_URL", "http://env.test/")
    GlobalConfig.reset()
    try:
        assert BasePage(driver).base_url == "http://env.test"
    finally:
        GlobalConfig.reset()


def test_session_passthroughs(driver, page):
    page.delete_cookies()
    page.quit()
    assert driver.cookies_deleted == 1
    assert driver.quit_called


def test_get_text_retries_stale_element(driver, page):
    old, fresh = FakeElement("old", text="old"), FakeElement("fresh", text="Welcome")
    old.stale = True
    lookups = iter([[old], [fresh]])
    driver.set("#greeting", lambda: next(lookups))

    assert page.get_text("#greeting") == "Welcome"


def test_get_texts(driver, page):
    driver.set(".row", [FakeElement(text="a"), FakeElement(text="b")])
    assert page.get_texts(".row") == ["a", "b"]
    assert page.get_texts(".none") == []


def test_set_input_value(driver, page):
    field = FakeElement("field")
    driver.set("name=q", [field])

    page.set_input_value("name=q", "robots")
    page.set_input_value(field, None)

    assert field.cleared == 2
    assert field.keys == ["robots"]


def test_has_class_matches_whole_tokens(driver, page):
    driver.set("#save", [FakeElement(attributes={"class": "btn btn-primary"})])
    assert page.has_class("#save", "btn")
    assert not page.has_class("#save", "primary")


def test_is_enabled(driver, page):
    driver.set("#save", [FakeElement(enabled=False)])
    assert page.is_enabled("#save") is False
    with pytest.raises(ElementAssertionError):
        page.is_enabled("#missing")


def test_get_href_and_text_presence(driver, page):
    driver.set("link=Docs", [FakeElement(attributes={"href": "/docs"})])
    driver.set("tag=body", [FakeElement("body", text="Signed in as demo")])

    assert page.get_href("link=Docs") == "/docs"
    assert page.is_text_present("nope", "Signed in")
    assert not page.is_text_present("Signed out")
    assert page.element_exists("link=Docs")


def test_presence_assertions(driver, page):
    driver.set("#here", [FakeElement()])

    assert page.assert_element_present("#here")
    page.assert_element_not_present("#gone")
    with pytest.raises(ElementAssertionError, match="#gone"):
        page.assert_element_present("#gone")
    with pytest.raises(AssertionError):
        page.assert_element_not_present("#here")


def test_assert_element_not_shown(driver, page):
    driver.set("#hidden", [FakeElement(displayed=False)])
    driver.set("#shown", [FakeElement()])

    page.assert_element_not_shown("#hidden", "should stay hidden", timeout_seconds=1)
    page.assert_element_not_shown("#missing", "should not exist", timeout_seconds=1)
    with pytest.raises(ElementAssertionError, match="banner leaked"):
        page.assert_element_not_shown("#shown", "banner leaked", timeout_seconds=1)


def test_text_assertions(driver, page):
    driver.set(".msg", [FakeElement(text="Saved draft"), FakeElement(text="Published post")])
    driver.set("#empty", [FakeElement(text="")])

    assert page.assert_element_present_with_text(".msg", "Published").text == "Published post"
    with pytest.raises(ElementAssertionError):
        page.assert_element_present_with_text(".msg", "Deleted")
    page.assert_element_has_no_text("#empty")
    with pytest.raises(ElementAssertionError, match=r'Selector="\.msg"'):
        page.assert_element_has_no_text(".msg")
    with pytest.raises(ElementAssertionError):
        page.assert_substring("cat", "dog")


def test_page_text_assertions(driver, page):
    driver.set("tag=body", [FakeElement("body", text="Order confirmed")])

    page.assert_text_present("Order", "confirmed", timeout_seconds=1)
    page.assert_text_not_present("Error", timeout_seconds=1)
    with pytest.raises(ElementAssertionError, match="assert_text_present"):
        page.assert_text_present("Refunded", timeout_seconds=1)
    with pytest.raises(ElementAssertionError, match="assert_text_not_present"):
        page.assert_text_not_present("Order", timeout_seconds=1)


def test_scroll_and_mouse_scripts(driver, page, clock):
    item = FakeElement("item")
    driver.set("#item", [item])

    page.scroll_to(0, 250)
    page.scroll_into_view("#item")
    page.focus_on_closest("#item")

    assert driver.scripts_named("window.scrollTo(0, 250)") == [()]
    assert driver.scripts[-1][1] == (item, "li")
    assert clock.sleeps[-1] == 0.1


def test_click_passthrough_records_outcome(driver, page):
    driver.set("#save", [FakeElement()])
    page.click("#save")
    assert page.last_click_outcome.strategy == "native"


def test_capture_and_report_failure(driver, page):
    driver.script_results["document.documentElement.innerHTML"] = "<head></head><body>oops</body>"

    path = page.capture_on_failure("test_checkout", "placing order", AssertionError("no receipt"))
    page.report_failure("couldn't place order")

    assert path.exists()
    assert page.errors.snapshot() == ["couldnt place order"]


@pytest.fixture
def country(driver):
    element = FakeElement("country")
    element.options = {"de": "Germany", "fr": "France"}
    driver.set("name=country", [element])
    return element


def test_select_option_by_value_and_label(page, country):
    assert page.select_option("name=country", value="fr") == ["fr"]
    assert page.select_option("name=country", label="Germany") == ["de"]
    assert country.selected == ["de"]


def test_select_option_retries_stale_select(driver, page):
    old, fresh = FakeElement("old"), FakeElement("fresh")
    old.stale = True
    fresh.options = {"de": "Germany"}
    lookups = iter([[old], [fresh]])
    driver.set("name=country", lambda: next(lookups))

    assert page.select_option("name=country", value="de") == ["de"]
    assert fresh.selected == ["de"]


def test_select_option_argument_checks(page, country):
    with pytest.raises(PreconditionError):
        page.select_option("name=country")
    with pytest.raises(PreconditionError):
        page.select_option("name=country", value="de", label="Germany")
    with pytest.raises(ElementInteractionError):
        page.select_option("name=country", value="xx")
