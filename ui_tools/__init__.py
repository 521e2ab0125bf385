"""
================================================================================
UI Tools
================================================================================

Shared infrastructure for the robust UI helper layer.

Modules:
    - common: Configuration loading and loguru logger setup

Example:
    from ui_tools.common import get_config, init_logger

    init_logger()
    snapshot_dir = get_config("diagnostics.snapshot_dir", "target/screenshots")

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
]
