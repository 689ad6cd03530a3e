import pytest

from testsuites.ui_testing.framework import scripts
from testsuites.ui_testing.framework.exceptions import StaleElementError, WaitTimeoutError
from testsuites.ui_testing.framework.failures import FailureCategory
from testsuites.ui_testing.framework.readiness import ReadinessDetector


def test_ready_page_returns_without_sleeping(fake_session, fake_driver, sleeps):
    detector = ReadinessDetector(fake_session)

    detector.wait_for_page_load(timeout=5)
    detector.wait_for_page_load(timeout=5)

    assert sleeps == []
    # one evaluation of each signal per call
    assert fake_driver.script_count(scripts.READY_STATE) == 2
    assert fake_driver.script_count(scripts.VISIBLE_LOADING_COUNT) == 2


def test_tolerant_variant_is_idempotent_on_ready_page(fake_session, sleeps):
    detector = ReadinessDetector(fake_session)

    first = detector.try_wait_for_page_load(timeout=5)
    second = detector.try_wait_for_page_load(timeout=5)

    assert first.ok and second.ok
    assert sleeps == []


def test_waits_until_document_complete(fake_session, fake_driver):
    fake_driver.ready_states = ["loading", "interactive", "complete"]

    ReadinessDetector(fake_session).wait_for_page_load(timeout=1, poll_interval=0.01)

    assert fake_driver.script_count(scripts.READY_STATE) == 3


@pytest.mark.parametrize(
    "setup",
    [
        lambda d: setattr(d, "ready_states", ["loading"]),
        lambda d: setattr(d, "ajax_idle", False),
        lambda d: setattr(d, "loading_count", 2),
    ],
    ids=["document_loading", "ajax_busy", "spinner_visible"],
)
def test_each_signal_blocks_readiness(fake_session, fake_driver, setup):
    setup(fake_driver)
    detector = ReadinessDetector(fake_session)

    assert detector.is_ready() is False
    with pytest.raises(WaitTimeoutError):
        detector.wait_for_page_load(timeout=0.05, poll_interval=0.01)


def test_tolerant_variant_returns_failure_instead_of_raising(fake_session, fake_driver):
    fake_driver.loading_count = 1

    outcome = ReadinessDetector(fake_session).try_wait_for_page_load(timeout=0.05)

    assert not outcome.ok
    assert outcome.failure.category == FailureCategory.TIMEOUT
    assert outcome.failure.exception_type == "WaitTimeoutError"


def test_loading_selectors_are_passed_to_the_page(fake_session, fake_driver, monkeypatch):
    seen = []
    original = fake_driver.execute_script

    def spy(script, arg=None):
        if script == scripts.VISIBLE_LOADING_COUNT:
            seen.append(arg)
        return original(script, arg)

    monkeypatch.setattr(fake_driver, "execute_script", spy)
    ReadinessDetector(fake_session, loading_selectors=[".busy"]).is_ready()

    assert seen == [[".busy"]]


def test_stale_document_counts_as_not_ready(fake_session, fake_driver):
    fake_driver.script_errors[scripts.READY_STATE] = StaleElementError("Execution context was destroyed")

    outcome = ReadinessDetector(fake_session).try_wait_for_page_load(timeout=0.05)

    assert not outcome.ok


def test_failing_responsiveness_check_reports_false(fake_session, fake_driver):
    detector = ReadinessDetector(fake_session)
    assert detector.is_page_responsive() is True

    fake_driver.script_errors[scripts.PAGE_RESPONSIVE] = StaleElementError("detached")
    assert detector.is_page_responsive() is False
