"""Unit tests for the robust UI helper layer (no browser required)."""
