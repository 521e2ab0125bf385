"""
Test suites package.

Kept importable so page objects and fixtures can be shared between suites:
  - unit: robust UI helpers against an in-memory driver
  - ui_testing: the same helpers against a real Playwright browser
"""
