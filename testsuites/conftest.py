"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the pytest configuration for the robust UI test suites.
It registers common markers and tags unit tests by the component they cover.

================================================================================
"""

import pytest


# Test module name fragment -> component marker
COMPONENT_MARKERS = {
    "locator_parser": "locators",
    "element_query": "locators",
    "wait_engine": "waits",
    "activity_settler": "settle",
    "robust_clicker": "clicks",
    "retry": "clicks",
    "diagnostic_capture": "diagnostics",
    "error_list": "diagnostics",
    "page_base": "pages",
    "playwright_driver": "driver",
    "config": "config",
}


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "unit: Tests running against the in-memory driver"
    )
    config.addinivalue_line(
        "markers", "ui: Tests driving a real browser"
    )

    # Component markers
    config.addinivalue_line(
        "markers", "locators: Locator parsing and element lookup"
    )
    config.addinivalue_line(
        "markers", "waits: Bounded presence, absence, count and visibility waits"
    )
    config.addinivalue_line(
        "markers", "settle: Activity settling and reload escalation"
    )
    config.addinivalue_line(
        "markers", "clicks: Click fallback chain and compound clicks"
    )
    config.addinivalue_line(
        "markers", "diagnostics: DOM snapshots and failure reporting"
    )
    config.addinivalue_line(
        "markers", "pages: Base page object helpers and assertions"
    )
    config.addinivalue_line(
        "markers", "driver: Playwright driver adapter"
    )
    config.addinivalue_line(
        "markers", "config: Configuration loading"
    )


def pytest_collection_modifyitems(config, items):
    """
    Add markers to collected tests based on where they live.
    """
    for item in items:
        path = str(item.fspath)

        if "unit" in path.split("testsuites", 1)[-1]:
            item.add_marker(pytest.mark.unit)

        for fragment, marker in COMPONENT_MARKERS.items():
            if f"test_{fragment}" in path:
                item.add_marker(getattr(pytest.mark, marker))


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Robust UI Helper Layer",
        "=" * 60,
        "",
    ]
