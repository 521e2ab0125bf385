"""Browser-backed tests for the robust UI helpers."""
