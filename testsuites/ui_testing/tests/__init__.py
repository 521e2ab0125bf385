"""Widgets page UI tests."""
