"""
================================================================================
Reporting Sink
================================================================================

Step-level and outcome-level events for the UI suite.

Features:
    - ReportSink protocol: record_step / record_outcome / attach_screenshot
    - Allure + loguru implementation, safe for many writer threads
    - Screenshot capture to disk and report
    - Failure troubleshooting message per failure category
    - Final failure report: category, retries, URL and last screenshot

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol, Union

import allure
from loguru import logger

from portal_tools.report_tools import ExecutionSummary, attach_page_state, attach_png, attach_text

from .exceptions import PortalAutomationError
from .failures import FailureCategory, FailureRecord

if TYPE_CHECKING:
    from .session import Session


OUTCOME_STATUSES = ("passed", "failed", "broken", "skipped", "rerun")


class ReportSink(Protocol):
    """Destination for step and outcome events."""

    def record_step(self, message: str) -> None: ...

    def record_outcome(self, status: str, message: str) -> None: ...

    def attach_screenshot(self, data: Union[bytes, str, Path], name: str = "Screenshot") -> None: ...


class AllureReportSink:
    """
    Report sink writing to Allure and the log stream.

    One instance is shared by all test threads; tallies are lock-guarded and
    Allure itself keys steps by the calling thread's current test.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._summary = ExecutionSummary()

    def record_step(self, message: str) -> None:
        logger.info(message)
        with allure.step(message):
            pass
        with self._lock:
            self._summary.steps += 1

    def record_outcome(self, status: str, message: str) -> None:
        status = status.lower()
        with self._lock:
            if status in OUTCOME_STATUSES:
                setattr(self._summary, status, getattr(self._summary, status) + 1)
        if status in ("failed", "broken"):
            logger.error(f"[{status.upper()}] {message}")
        elif status == "rerun":
            logger.warning(f"[RERUN] {message}")
        else:
            logger.info(f"[{status.upper()}] {message}")
        attach_text(message, name=f"Outcome: {status}")

    def attach_screenshot(self, data: Union[bytes, str, Path], name: str = "Screenshot") -> None:
        attach_png(data, name=name)

    def summary(self) -> ExecutionSummary:
        with self._lock:
            return replace(self._summary)


# ================================================================================
# Screenshots
# ================================================================================

def _safe_name(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", name).strip("_") or "screenshot"


def capture_screenshot(
    session: "Session",
    name: str,
    reporter: Optional[ReportSink] = None,
    directory: Optional[Union[str, Path]] = None,
) -> Optional[bytes]:
    """
    Capture the current page.

    Args:
        session: Session whose page is captured
        name: Attachment and file name stem
        reporter: Sink receiving the PNG, if any
        directory: Folder for a timestamped PNG copy, if any

    Returns:
        PNG bytes, or None when the browser could not produce them
    """
    try:
        data = session.driver.screenshot()
    except PortalAutomationError as e:
        logger.warning(f"Screenshot failed for {name}: {e}")
        return None

    if directory:
        path = Path(directory) / f"{_safe_name(name)}_{datetime.now():%Y%m%d_%H%M%S_%f}.png"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            logger.debug(f"Screenshot saved: {path}")
        except OSError as e:
            logger.warning(f"Could not save screenshot to {path}: {e}")

    if reporter is not None:
        reporter.attach_screenshot(data, name)
    return data


# ================================================================================
# Failure context
# ================================================================================

TROUBLESHOOTING_TIPS = {
    FailureCategory.ELEMENT_NOT_FOUND: (
        "Check if element locator is correct",
        "Verify element is visible on the page",
        "Ensure page has loaded completely",
        "Check for dynamic content or overlays",
    ),
    FailureCategory.TIMEOUT: (
        "Increase wait timeout if needed",
        "Check network connectivity",
        "Verify server response time",
        "Look for JavaScript errors on page",
    ),
    FailureCategory.STALE_ELEMENT: (
        "Re-locate the element after the page re-renders",
        "Wait for the triggering request to finish before interacting",
    ),
    FailureCategory.DATE_PICKER: (
        "Check the calendar widget opened before picking a date",
        "Verify the month navigation reached the target month",
    ),
    FailureCategory.NETWORK: (
        "Check the application and API are reachable",
        "Look for proxy or certificate errors",
    ),
    FailureCategory.GENERIC_DRIVER_ERROR: (
        "Check the browser did not crash or close",
        "Verify the installed browser matches the Playwright version",
    ),
}


def format_failure_details(record: FailureRecord, test_name: str) -> str:
    """Troubleshooting block for a failure record."""
    lines = [
        "TEST FAILURE DETAILS",
        "=" * 40,
        f"Test Name: {test_name}",
        f"Step: {record.step or '<unknown>'}",
        f"Category: {record.category.value}",
        f"Error Type: {record.exception_type}",
        f"Error Message: {record.message}",
    ]
    tips = TROUBLESHOOTING_TIPS.get(record.category)
    if tips:
        lines.append("")
        lines.append("TROUBLESHOOTING TIPS:")
        lines.extend(f"- {tip}" for tip in tips)
    lines.append("=" * 40)
    return "\n".join(lines)


def format_failure_message(exc: BaseException, test_name: str, step: str) -> str:
    """Troubleshooting block for a failed step."""
    return format_failure_details(FailureRecord.from_exception(exc, step), test_name)


@dataclass(frozen=True)
class FailureReport:
    """What a finally-failed test reports."""

    test_name: str
    record: FailureRecord
    retries: int
    url: Optional[str]
    screenshot: Optional[bytes]

    def render(self) -> str:
        return (
            f"Test '{self.test_name}' failed after {self.retries} retr{'y' if self.retries == 1 else 'ies'}. "
            f"Category: {self.record.category.value}. "
            f"URL: {self.url or '<unavailable>'}. "
            f"Error: {self.record.summary()}"
        )

    def details(self) -> str:
        return format_failure_details(self.record, self.test_name)


def report_final_failure(
    reporter: ReportSink,
    session: Optional["Session"],
    record: FailureRecord,
    test_name: str,
    retries: int,
    screenshot_dir: Optional[Union[str, Path]] = None,
) -> FailureReport:
    """
    Report a test that will not be retried again.

    Sends category, retry count, current URL and last screenshot to the sink
    and the log. Never raises for browser problems.
    """
    url = title = None
    screenshot = None
    if session is not None and session.alive:
        try:
            url = session.driver.current_url
            title = session.driver.title
        except PortalAutomationError as e:
            logger.warning(f"Could not read page state for {test_name}: {e}")
        screenshot = capture_screenshot(session, f"{test_name}_failure", reporter, screenshot_dir)

    report = FailureReport(test_name=test_name, record=record, retries=retries, url=url, screenshot=screenshot)
    attach_page_state(url, title)
    details = report.details()
    attach_text(details, name="Failure details")
    logger.error(f"\n{details}")
    reporter.record_outcome("failed", report.render())
    return report


__all__ = [
    "ReportSink",
    "AllureReportSink",
    "FailureReport",
    "capture_screenshot",
    "format_failure_details",
    "format_failure_message",
    "report_final_failure",
]
