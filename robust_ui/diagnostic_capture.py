"""
================================================================================
Diagnostic Capture
================================================================================

Saves the live DOM when a test fails, for post-mortem inspection.

The snapshot is taken from the browser's current document rather than the
original server response, so client-side changes are included. Script blocks
are commented out (kept for reference, never executed) and a base tag is
injected so relative images and stylesheets still resolve when the file is
opened later.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

import allure
from loguru import logger

from ui_tools.common import ensure_directory, get_config

from .driver import BrowserDriver
from .errors import PreconditionError


# Default output directory for DOM snapshots
SNAPSHOT_DIR = "target/screenshots"

SCRIPT_BLOCK = re.compile(r"(<script.*?</script>)", re.DOTALL | re.IGNORECASE)


class SnapshotWriter(ABC):
    """Persistence capability: write text content to a path."""

    @abstractmethod
    def write_text(self, path: Path, content: str) -> None:
        """Persist content at path, creating parent directories as needed."""


class FileSnapshotWriter(SnapshotWriter):
    """Writes snapshots to the local filesystem as UTF-8."""

    def write_text(self, path: Path, content: str) -> None:
        ensure_directory(str(path.parent))
        path.write_text(content, encoding="utf-8")


def sanitize_dom(inner_html: str, base_url: str) -> str:
    """
    Turn a documentElement.innerHTML dump into a standalone, inert HTML page.

    Args:
        inner_html: Markup inside the <html> element
        base_url: URL the page was loaded from

    Returns:
        HTML with script blocks commented out and a base tag in the head
    """
    html = f"<html>{inner_html}</html>"
    html = SCRIPT_BLOCK.sub(
        lambda m: f"\n<!-- Disabled to preserve page integrity {m.group(1)} -->",
        html,
    )
    return html.replace("<head>", f'<head><base href="{base_url}"/>', 1)


class DiagnosticCapture:
    """
    Writes sanitized DOM snapshots for failed tests.

    Usage:
        capture = DiagnosticCapture(driver)
        try:
            ...
        except AssertionError as e:
            capture.capture("test_checkout", "submitting the order", e)
            raise
    """

    def __init__(
        self,
        driver: Optional[BrowserDriver],
        writer: Optional[SnapshotWriter] = None,
        snapshot_dir: Union[str, Path, None] = None,
    ):
        """
        Initialize diagnostic capture.

        Args:
            driver: Session to snapshot; None makes every capture a logged no-op
            writer: Persistence capability; defaults to the local filesystem
            snapshot_dir: Output directory; config diagnostics.snapshot_dir
        """
        self.driver = driver
        self.writer = writer or FileSnapshotWriter()
        self.snapshot_dir = Path(
            snapshot_dir or get_config("diagnostics.snapshot_dir", SNAPSHOT_DIR)
        )

    def capture(
        self,
        session_label: str,
        context: Optional[str],
        cause: Optional[BaseException],
    ) -> Optional[Path]:
        """
        Snapshot the current page.

        Args:
            session_label: Test or session name, used in the file name
            context: What the test was doing when it failed, for the log line
            cause: The failure being diagnosed

        Returns:
            Path of the written snapshot, or None when nothing could be captured

        Raises:
            PreconditionError: If cause is None
            OSError: If the snapshot cannot be written
        """
        if cause is None:
            raise PreconditionError("cause must not be None")
        if self.driver is None:
            logger.critical("Diagnostic capture aborted because driver=None.")
            return None

        inner_html = self.driver.execute_script("document.documentElement.innerHTML")
        if inner_html is None:
            logger.critical(
                "Possibly encountered a timeout, but attempt to capture innerHTML returned None."
            )
            return None

        html = sanitize_dom(inner_html, self.driver.current_url())
        filename = f"{session_label}-{int(time.time() * 1000)}-failure-report-snapshot.html"
        path = self.snapshot_dir / filename
        self.writer.write_text(path, html)

        message = "Encountered a problem.  "
        if context is not None:
            message += f"Context: {context}.  "
        logger.opt(exception=cause).critical(f"{message}Saved html snapshot to: {path.resolve()}")

        allure.attach(
            html,
            name=f"DOM snapshot: {session_label}",
            attachment_type=allure.attachment_type.HTML,
        )
        return path


__all__ = [
    "SnapshotWriter",
    "FileSnapshotWriter",
    "DiagnosticCapture",
    "sanitize_dom",
    "SNAPSHOT_DIR",
]
