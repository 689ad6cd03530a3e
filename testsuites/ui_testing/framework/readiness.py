"""
================================================================================
Readiness Detector
================================================================================

Composite "page is settled" predicate. All three signals must hold:

    1. document.readyState == "complete"
    2. jQuery / Angular report no outstanding requests (absent library = idle)
    3. No well-known loading indicator is visible

Called before nearly every element wait, so the ready path returns after a
single evaluation without sleeping.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Optional, Sequence

from loguru import logger

from . import scripts
from .exceptions import PortalAutomationError, StaleElementError, WaitTimeoutError
from .failures import FailureRecord, Outcome

if TYPE_CHECKING:
    from .session import Session


DEFAULT_READY_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 0.5


class ReadinessDetector:
    """Evaluates and waits for the readiness predicate on one session."""

    def __init__(self, session: "Session", loading_selectors: Sequence[str] = scripts.LOADING_SELECTORS):
        self.session = session
        self.loading_selectors = list(loading_selectors)

    def is_ready(self) -> bool:
        """Evaluate the predicate once."""
        driver = self.session.driver
        if driver.execute_script(scripts.READY_STATE) != "complete":
            return False
        if not driver.execute_script(scripts.AJAX_IDLE):
            return False
        visible_loaders = driver.execute_script(scripts.VISIBLE_LOADING_COUNT, self.loading_selectors)
        return not visible_loaders

    def wait_for_page_load(self, timeout: Optional[float] = None, poll_interval: Optional[float] = None) -> None:
        """
        Block until the page is ready.

        Args:
            timeout: Seconds to wait, DEFAULT_READY_TIMEOUT when omitted
            poll_interval: Seconds between evaluations, the session's poll interval when omitted

        Raises:
            WaitTimeoutError: The predicate did not hold within `timeout`
        """
        timeout = DEFAULT_READY_TIMEOUT if timeout is None else timeout
        poll_interval = self.session.waits.poll_interval if poll_interval is None else poll_interval

        if self._check():
            return

        logger.debug(f"Page not ready yet, polling up to {timeout}s")
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            time.sleep(min(poll_interval, max(deadline - time.monotonic(), 0)))
            if self._check():
                return

        raise WaitTimeoutError(f"Page did not become ready within {timeout}s")

    def try_wait_for_page_load(self, timeout: float) -> Outcome[None]:
        """Tolerant variant: a timeout is logged and returned, never raised."""
        try:
            self.wait_for_page_load(timeout)
        except WaitTimeoutError as e:
            logger.warning(f"Optional readiness wait gave up: {e}")
            return Outcome.failed(FailureRecord.from_exception(e, step="wait for page load"))
        return Outcome.success()

    def is_page_responsive(self) -> bool:
        """Document complete and jQuery idle; a failing check counts as unresponsive."""
        try:
            return bool(self.session.driver.execute_script(scripts.PAGE_RESPONSIVE))
        except PortalAutomationError as e:
            logger.debug(f"Responsiveness check failed: {e}")
            return False

    def _check(self) -> bool:
        try:
            return self.is_ready()
        except StaleElementError:
            # Navigation replaced the document mid-evaluation.
            return False


__all__ = ["ReadinessDetector", "DEFAULT_READY_TIMEOUT", "DEFAULT_POLL_INTERVAL"]
