"""
================================================================================
Retry Plugin
================================================================================

pytest plugin re-running failed tests according to the RetryPolicy.

Features:
    - Whole-test reruns; each attempt gets fresh function fixtures (new session)
    - Retry count chosen by failure category, fixed backoff between attempts
    - Error recovery on the live session before a retry
    - Final failure report: category, retries, URL and screenshot
    - Per-test cleanup fixture and suite-wide cleanup at session end
    - Per-test timings with a summary at session end

Options:
    --no-test-retry        run every test once
    --retry-backoff SECS   override retry.backoff_seconds

Markers:
    no_retry               never rerun this test
    recovery(hint)         recovery hint, e.g. "critical" or "refresh"
    unit                   in-memory tests, never rerun

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Iterator, List, Optional

import pytest
from _pytest.runner import runtestprotocol
from loguru import logger

from portal_tools.common import init_logger
from portal_tools.report_tools import attach_text

from .cleanup import TestDataCleanup
from .config import PortalConfig, load_config
from .error_recovery import ErrorRecovery, RecoveryContext
from .failures import FailureRecord
from .performance import PerformanceMonitor
from .reporting import AllureReportSink, report_final_failure
from .retry_policy import RetryDecision, RetryPolicy, RetryState
from .session import Session


CONFIG_KEY = pytest.StashKey[PortalConfig]()
POLICY_KEY = pytest.StashKey[RetryPolicy]()
SINK_KEY = pytest.StashKey[AllureReportSink]()
CLEANUP_KEY = pytest.StashKey[TestDataCleanup]()
MONITOR_KEY = pytest.StashKey[PerformanceMonitor]()

STATE_KEY = pytest.StashKey[Optional[RetryState]]()
DECISION_KEY = pytest.StashKey[Optional[RetryDecision]]()


# ================================================================================
# Configuration
# ================================================================================

def pytest_addoption(parser):
    group = parser.getgroup("portal-retry", "Provider portal test retries")
    group.addoption(
        "--no-test-retry",
        action="store_true",
        default=False,
        help="Run every test once, ignoring the retry policy",
    )
    group.addoption(
        "--retry-backoff",
        action="store",
        type=float,
        default=None,
        help="Seconds to wait before each retry (default: retry.backoff_seconds)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "no_retry: never rerun this test on failure")
    config.addinivalue_line("markers", "recovery(hint): recovery hint such as 'critical' or 'refresh'")

    portal_config = load_config()
    init_logger(portal_config)

    backoff = config.getoption("--retry-backoff")
    config.stash[CONFIG_KEY] = portal_config
    config.stash[POLICY_KEY] = RetryPolicy(
        backoff_seconds=portal_config.retry_backoff if backoff is None else backoff
    )
    config.stash[SINK_KEY] = AllureReportSink()
    config.stash[CLEANUP_KEY] = TestDataCleanup()
    config.stash[MONITOR_KEY] = PerformanceMonitor(
        threshold_ms=float(portal_config.get("performance.threshold_ms", 60000))
    )


def _retries_enabled(item: pytest.Item) -> bool:
    if item.config.getoption("--no-test-retry"):
        return False
    if not item.config.stash[CONFIG_KEY].get("retry.enabled", True):
        return False
    if item.get_closest_marker("unit") is not None:
        return False
    return item.get_closest_marker("no_retry") is None


# ================================================================================
# Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def portal_config(pytestconfig) -> PortalConfig:
    """Immutable configuration loaded once per run."""
    return pytestconfig.stash[CONFIG_KEY]


@pytest.fixture(scope="session")
def report_sink(pytestconfig) -> AllureReportSink:
    """Report sink shared by all tests of the run."""
    return pytestconfig.stash[SINK_KEY]


@pytest.fixture
def test_data_cleanup(request) -> Iterator[TestDataCleanup]:
    """Cleanup registry; whatever the test registers is deleted at teardown."""
    registry = request.config.stash[CLEANUP_KEY]
    yield registry
    result = registry.run_cleanup(request.node.nodeid)
    if not result.ok:
        logger.warning(f"{len(result.failed)} cleanup actions failed for {request.node.nodeid}")


# ================================================================================
# Run protocol
# ================================================================================

@pytest.hookimpl(tryfirst=True)
def pytest_runtest_protocol(item, nextitem):
    """Run `item`, re-running it while the retry policy allows."""
    policy = item.config.stash[POLICY_KEY]
    monitor = item.config.stash[MONITOR_KEY]
    item.ihook.pytest_runtest_logstart(nodeid=item.nodeid, location=item.location)
    monitor.start_test(item.nodeid)

    state: Optional[RetryState] = None
    while True:
        item.stash[STATE_KEY] = state
        item.stash[DECISION_KEY] = None
        reports = runtestprotocol(item, nextitem=nextitem, log=False)
        decision = item.stash.get(DECISION_KEY, None)

        if decision is None or not decision.retry:
            retries = state.attempt if state else 0
            for report in reports:
                report.user_properties.append(("retries", retries))
                item.ihook.pytest_runtest_logreport(report=report)
            break

        for report in reports:
            if report.failed:
                report.outcome = "rerun"
            item.ihook.pytest_runtest_logreport(report=report)
        state = decision.state
        policy.backoff()

    monitor.end_test(item.nodeid)
    item.ihook.pytest_runtest_logfinish(nodeid=item.nodeid, location=item.location)
    return True


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when not in ("setup", "call"):
        return

    sink = item.config.stash[SINK_KEY]
    if report.skipped:
        sink.record_outcome("skipped", item.nodeid)
        return
    if report.passed:
        if report.when == "call":
            sink.record_outcome("passed", item.nodeid)
        return
    if call.excinfo is None:
        return

    record = FailureRecord.from_exception(call.excinfo.value, step=f"{item.name} [{report.when}]")
    session = _live_session(item)

    if not _retries_enabled(item):
        report_final_failure(sink, session, record, item.nodeid, 0, _screenshot_dir(item))
        return

    state = item.stash.get(STATE_KEY, None)
    decision = item.config.stash[POLICY_KEY].decide(record, state)
    item.stash[DECISION_KEY] = decision

    if decision.retry:
        sink.record_outcome("rerun", f"{item.nodeid}: {decision.reason}. {record.summary()}")
        if session is not None:
            marker = item.get_closest_marker("recovery")
            context = RecoveryContext.from_hint(marker.args[0]) if marker and marker.args else RecoveryContext()
            ErrorRecovery(session, reporter=sink).recover(record, context)
    else:
        retries = state.attempt if state else 0
        report_final_failure(sink, session, record, item.nodeid, retries, _screenshot_dir(item))


@pytest.hookimpl(tryfirst=True)
def pytest_report_teststatus(report, config):
    if report.outcome == "rerun":
        return "rerun", "R", ("RERUN", {"yellow": True})
    return None


def pytest_sessionfinish(session, exitstatus):
    config = session.config
    if CLEANUP_KEY not in config.stash:
        return

    result = config.stash[CLEANUP_KEY].run_all()
    if result.cleaned or result.failed:
        logger.info(f"Suite cleanup: {len(result.cleaned)} deleted, {len(result.failed)} failed")

    monitor = config.stash[MONITOR_KEY]
    if monitor.test_count:
        summary = monitor.summary()
        logger.info(f"\n{summary}")
        attach_text(summary, name="Performance Summary")

    logger.info(f"Report summary: {config.stash[SINK_KEY].summary().to_dict()}")


def _live_session(item: pytest.Item) -> Optional[Session]:
    funcargs = getattr(item, "funcargs", None) or {}
    sessions: List[Session] = [value for value in funcargs.values() if isinstance(value, Session)]
    for session in sessions:
        if session.alive:
            return session
    return None


def _screenshot_dir(item: pytest.Item) -> str:
    return str(item.config.stash[CONFIG_KEY].get("reports.screenshots_dir", "reports/screenshots"))
