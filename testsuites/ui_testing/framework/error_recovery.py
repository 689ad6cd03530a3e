"""
================================================================================
Error Recovery Engine
================================================================================

Bounded, best-effort remediation run before a retry.

Recovery is advisory: it returns whether its steps completed, never whether
the original target is now usable, and it never raises. A failing recovery
must not hide the failure that triggered it.

Strategies per category:
    ElementNotFound / DatePicker  readiness wait, mid-page scroll, overlay
                                  waits, reload when the operation is critical
    Timeout                       growing waits probing responsiveness, then
                                  a connectivity check
    StaleElement                  settle delay, reload on request
    Network / GenericDriverError  delay then liveness check; declines on a
                                  session-level fault

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from . import scripts
from .config import PortalConfig
from .element_actions import ElementActions
from .failures import FailureCategory, FailureRecord
from .locators import By
from .readiness import ReadinessDetector
from .reporting import ReportSink
from .retry_policy import RETRY_LIMITS
from .session import Session


@dataclass(frozen=True)
class RecoveryContext:
    """Hints about the failed operation."""

    critical: bool = False
    reload: bool = False
    session_fault: bool = False

    @classmethod
    def from_hint(cls, hint: str) -> "RecoveryContext":
        """Build from a free-form hint such as "critical login step"."""
        lowered = hint.lower()
        return cls(
            critical="critical" in lowered,
            reload="refresh" in lowered or "reload" in lowered,
            session_fault="session" in lowered,
        )


@dataclass(frozen=True)
class RecoverySettings:
    """Delays and bounds used by recovery (seconds)."""

    settle_delay: float = 1.0
    backoff_base: float = 2.0
    driver_fault_delay: float = 2.0
    overlay_timeout: float = 10.0
    scroll_pause: float = 1.0
    readiness_timeout: float = 30.0

    @classmethod
    def from_config(cls, config: PortalConfig) -> "RecoverySettings":
        return cls(
            settle_delay=float(config.get("recovery.settle_delay", 1.0)),
            backoff_base=float(config.get("recovery.backoff_base", 2.0)),
            driver_fault_delay=float(config.get("recovery.driver_fault_delay", 2.0)),
            overlay_timeout=float(config.get("recovery.overlay_timeout", 10.0)),
            scroll_pause=float(config.get("recovery.scroll_pause", 1.0)),
            readiness_timeout=config.readiness_timeout,
        )


class ErrorRecovery:
    """Pre-retry remediation for one session."""

    def __init__(
        self,
        session: Session,
        settings: Optional[RecoverySettings] = None,
        reporter: Optional[ReportSink] = None,
        actions: Optional[ElementActions] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.session = session
        self.settings = settings or RecoverySettings.from_config(session.config)
        self.actions = actions or ElementActions(session, reporter)
        self.reporter = self.actions.reporter
        self.readiness: ReadinessDetector = self.actions.readiness
        self._sleep = sleep

    def recover(self, record: FailureRecord, context: Optional[RecoveryContext] = None) -> bool:
        """
        Attempt remediation for `record`.

        Returns:
            True when the category's strategy completed, False otherwise
        """
        context = context or RecoveryContext()
        strategies = {
            FailureCategory.ELEMENT_NOT_FOUND: self._recover_missing_element,
            FailureCategory.DATE_PICKER: self._recover_missing_element,
            FailureCategory.TIMEOUT: self._recover_timeout,
            FailureCategory.STALE_ELEMENT: self._recover_stale_element,
            FailureCategory.NETWORK: self._recover_driver_fault,
            FailureCategory.GENERIC_DRIVER_ERROR: self._recover_driver_fault,
        }
        strategy = strategies.get(record.category)
        if strategy is None:
            logger.info(f"No recovery strategy for {record.category.value}")
            return False

        try:
            self.reporter.record_step(f"Recovering from {record.category.value} ({record.exception_type})")
            recovered = strategy(context)
        except Exception as e:
            logger.error(f"Recovery for {record.category.value} failed: {type(e).__name__}: {e}")
            recovered = False
        logger.info(f"Recovery for {record.category.value}: {'succeeded' if recovered else 'declined'}")
        return recovered

    def _recover_missing_element(self, context: RecoveryContext) -> bool:
        logger.warning("Element not found, attempting recovery strategies...")
        self.readiness.wait_for_page_load(self.settings.readiness_timeout)
        self.session.driver.execute_script(scripts.SCROLL_MID_PAGE)
        self._sleep(self.settings.scroll_pause)

        for selector in scripts.LOADING_SELECTORS:
            if not self.actions.wait_for_invisible(By.css(selector), self.settings.overlay_timeout):
                logger.debug(f"Overlay {selector} still visible, continuing")

        if context.critical:
            logger.info("Reloading page for critical element recovery")
            self.session.driver.refresh()
            self.readiness.wait_for_page_load(self.settings.readiness_timeout)
        return True

    def _recover_timeout(self, context: RecoveryContext) -> bool:
        logger.warning("Timeout occurred, attempting extended wait strategies...")
        attempts = RETRY_LIMITS[FailureCategory.TIMEOUT]
        for attempt in range(1, attempts + 1):
            self._sleep(self.settings.backoff_base * attempt)
            if self.readiness.is_page_responsive():
                logger.info(f"Page responsive after extended wait {attempt} of {attempts}")
                return True

        url = self.session.driver.current_url
        logger.info(f"Connectivity confirmed at {url}")
        return True

    def _recover_stale_element(self, context: RecoveryContext) -> bool:
        logger.warning("Stale element detected, letting the DOM settle...")
        self._sleep(self.settings.settle_delay)
        if context.reload:
            self.session.driver.refresh()
            self.readiness.wait_for_page_load(self.settings.readiness_timeout)
        return True

    def _recover_driver_fault(self, context: RecoveryContext) -> bool:
        logger.warning("Driver fault, checking browser liveness...")
        self._sleep(self.settings.driver_fault_delay)
        try:
            title = self.session.driver.title
        except Exception as e:
            if context.session_fault:
                logger.warning(f"Session-level fault, leaving session recreation to teardown: {e}")
            else:
                logger.warning(f"Browser unresponsive: {e}")
            return False
        logger.info(f"Browser responsive (title: {title!r})")
        return True


__all__ = ["ErrorRecovery", "RecoveryContext", "RecoverySettings"]
