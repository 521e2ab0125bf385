"""
UI Page Objects package.

Page objects here are built on `robust_ui.BasePage` and drive self-contained
HTML fixtures, so the suite needs a browser but no running application.
"""

from testsuites.ui_testing.pages.widgets_page import WidgetsPage

__all__ = [
    "WidgetsPage",
]
