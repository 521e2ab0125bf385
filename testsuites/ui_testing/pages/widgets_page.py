"""
================================================================================
Widgets Page Object
================================================================================

Page object over a self-contained HTML page exercising the situations the
robust helpers exist for: content that appears late, elements that remove
themselves, checkboxes and duplicated selectors.

================================================================================
"""

from __future__ import annotations

from typing import List
from urllib.parse import quote

import allure

from robust_ui import BasePage, BrowserElement


WIDGETS_HTML = """<!DOCTYPE html>
<html>
<head><title>Widgets</title></head>
<body>
  <button id="open-settings" onclick="setTimeout(() => {
      document.getElementById('settings').style.display = 'block';
  }, 300)">Settings</button>
  <div id="settings" style="display: none">Settings panel</div>

  <div class="toast">Saved <span class="close" onclick="this.parentNode.remove()">x</span></div>

  <label><input type="checkbox" id="agree"> I agree</label>
  <label><input type="checkbox" id="newsletter" checked> Newsletter</label>

  <select name="country">
    <option value="de">Germany</option>
    <option value="fr">France</option>
  </select>

  <button id="load-items" onclick="let n = 0; const t = setInterval(() => {
      const li = document.createElement('li');
      li.className = 'item';
      li.textContent = 'Item ' + (++n);
      document.getElementById('items').appendChild(li);
      if (n === 3) { clearInterval(t); }
  }, 150)">Load</button>
  <ul id="items"></ul>

  <button class="dup">One</button>
  <button class="dup">Two</button>
</body>
</html>"""


class WidgetsPage(BasePage):
    """Widgets demo page."""

    SETTINGS_BUTTON = "#open-settings"
    SETTINGS_PANEL = "#settings"
    TOAST_CLOSE = "css=.toast .close"
    AGREE_CHECKBOX = "id=agree"
    NEWSLETTER_CHECKBOX = "id=newsletter"
    COUNTRY_SELECT = "name=country"
    LOAD_ITEMS_BUTTON = "#load-items"
    ITEMS = "css=#items .item"
    DUPLICATE_BUTTON = ".dup"

    @property
    def url(self) -> str:
        return "data:text/html," + quote(WIDGETS_HTML)

    @allure.step("Open widgets page")
    def open(self) -> "WidgetsPage":
        self.navigate()
        self.wait_for_present(self.SETTINGS_BUTTON)
        return self

    @allure.step("Open settings panel")
    def open_settings(self) -> BrowserElement:
        return self.click_and_wait_for_displayed(self.SETTINGS_BUTTON, self.SETTINGS_PANEL)

    @allure.step("Dismiss toast")
    def dismiss_toast(self) -> None:
        self.click_to_dismiss(self.TOAST_CLOSE)

    @allure.step("Accept terms")
    def accept_terms(self) -> BrowserElement:
        return self.click_checkbox(self.AGREE_CHECKBOX)

    @allure.step("Unsubscribe from newsletter")
    def unsubscribe(self) -> BrowserElement:
        return self.click(self.NEWSLETTER_CHECKBOX)

    @allure.step("Choose country {label}")
    def choose_country(self, label: str) -> List[str]:
        return self.select_option(self.COUNTRY_SELECT, label=label)

    @allure.step("Load items")
    def load_items(self, expected: int = 3) -> List[str]:
        self.click(self.LOAD_ITEMS_BUTTON)
        self.wait_for_count(self.ITEMS, expected, timeout_seconds=5)
        return self.get_texts(self.ITEMS)
