"""
================================================================================
Activity Settler
================================================================================

Waits for asynchronous UI work (pending XHRs and the like) to finish.

Many front-end frameworks keep working after an interaction returns. The
settler samples an in-page counter of in-flight requests until it reaches
zero. Pages without the probed framework are treated as already quiet.

Escalation policy:
    1. Poll the probe until quiescent or the timeout passes
    2. On timeout, reload the page once and poll again with the same timeout
    3. A second timeout raises SettleTimeoutError

================================================================================
"""

from __future__ import annotations

from typing import Optional, Tuple

from loguru import logger

from ui_tools.common import get_config

from .driver import BrowserDriver
from .errors import ScriptExecutionError, SettleTimeoutError, WaitTimeoutError
from .wait_engine import WaitEngine, WaitSpec


DEFAULT_ACTIVITY_PROBE = "jQuery.active"


class ActivitySettler:
    """
    Blocks until page activity is quiescent.

    Usage:
        settler = ActivitySettler(driver, wait_engine)
        settler.settle()                  # default 45s, one reload allowed
        settler.settle(timeout_seconds=10)
    """

    def __init__(
        self,
        driver: BrowserDriver,
        wait_engine: WaitEngine,
        probe_script: Optional[str] = None,
        default_timeout: Optional[float] = None,
    ):
        """
        Initialize the settler.

        Args:
            driver: Session whose page is probed and, if needed, reloaded
            wait_engine: Supplies the polling loop and clock
            probe_script: Expression returning the in-flight count; config ui.activity_probe
            default_timeout: Seconds per attempt; config ui.settle_timeout
        """
        self.driver = driver
        self.wait_engine = wait_engine
        self.probe_script = probe_script or get_config("ui.activity_probe", DEFAULT_ACTIVITY_PROBE)
        self.default_timeout = float(
            default_timeout if default_timeout is not None
            else get_config("ui.settle_timeout", 45)
        )

    def active_count(self) -> int:
        """
        Sample the number of in-flight async operations.

        A probe that throws or returns something other than an integer means
        the page does not use the probed framework, which counts as zero.
        DriverError is not caught.
        """
        value = None
        try:
            value = self.driver.execute_script(self.probe_script)
            active = int(value)
        except ScriptExecutionError as e:
            logger.info(f"Ignoring that {self.probe_script} failed. The page probably does not use it. {e}")
            return 0
        except (TypeError, ValueError):
            logger.info(f"Ignoring non-numeric {self.probe_script} result: {value!r}")
            return 0
        if active != 0:
            logger.debug(f"active={active}")
        return active

    def _is_quiescent(self) -> Tuple[bool, int]:
        active = self.active_count()
        return active == 0, active

    def _poll(self, timeout_seconds: float) -> None:
        self.wait_engine.poll_until(
            self._is_quiescent,
            WaitSpec(timeout_seconds=timeout_seconds),
            "settle",
            self.probe_script,
            describe=lambda active: f"active={active}",
        )

    def settle(self, timeout_seconds: Optional[float] = None) -> None:
        """
        Wait for activity to finish, reloading the page once if it stalls.

        Args:
            timeout_seconds: Budget for each of the (at most two) poll attempts

        Raises:
            SettleTimeoutError: If activity is still pending after the reload
        """
        timeout = timeout_seconds if timeout_seconds is not None else self.default_timeout
        start = self.wait_engine.clock()

        try:
            self._poll(timeout)
        except WaitTimeoutError:
            logger.critical(
                f"After waiting for {timeout}s, {self.probe_script} was still active, retrying..."
            )
            self.driver.refresh()
            try:
                self._poll(timeout)
            except WaitTimeoutError as e:
                logger.critical(
                    f"After waiting for another {timeout}s, {self.probe_script} was still active, failing..."
                )
                raise SettleTimeoutError(timeout, "still active after one reload") from e

        elapsed_ms = (self.wait_engine.clock() - start) * 1000
        logger.debug(f"Waited for {elapsed_ms:.0f}ms waiting for {self.probe_script} to be inactive.")


__all__ = [
    "ActivitySettler",
    "DEFAULT_ACTIVITY_PROBE",
]
