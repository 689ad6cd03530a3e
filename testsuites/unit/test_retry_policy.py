import pytest

from testsuites.ui_testing.framework.exceptions import (
    ElementNotFoundError,
    OptionNotFoundError,
    SessionInitError,
)
from testsuites.ui_testing.framework.failures import FailureCategory, FailureRecord
from testsuites.ui_testing.framework.retry_policy import (
    DEFAULT_BACKOFF_SECONDS,
    RETRY_LIMITS,
    RetryPolicy,
    RetryState,
    with_retry,
)


class WebDriverException(Exception):
    pass


def _failing(exc, times=None):
    calls = {"count": 0}

    def operation():
        calls["count"] += 1
        if times is None or calls["count"] <= times:
            raise exc
        return "ok"

    return operation, calls


def test_missing_element_retried_three_times_with_backoff():
    sleeps = []
    policy = RetryPolicy(sleep=sleeps.append)
    operation, calls = _failing(ElementNotFoundError("no such element: Unable to locate element: #save"))

    with pytest.raises(ElementNotFoundError):
        policy.run(operation, step="save")

    assert calls["count"] == 4
    assert sleeps == [DEFAULT_BACKOFF_SECONDS] * 3
    assert all(delay >= 2 for delay in sleeps)


def test_generic_driver_error_retried_once():
    sleeps = []
    policy = RetryPolicy(sleep=sleeps.append)
    operation, calls = _failing(WebDriverException("chrome not reachable"))

    with pytest.raises(WebDriverException):
        policy.run(operation)

    assert calls["count"] == 2
    assert len(sleeps) == 1


def test_success_after_retry_returns_value():
    policy = RetryPolicy(sleep=lambda _: None)
    operation, calls = _failing(TimeoutError("timed out"), times=2)

    assert policy.run(operation) == "ok"
    assert calls["count"] == 3


@pytest.mark.parametrize("exc", [SessionInitError("no browser"), OptionNotFoundError("Option 'X' not found")])
def test_non_retryable_failures_are_not_retried(exc):
    sleeps = []
    operation, calls = _failing(exc)

    with pytest.raises(type(exc)):
        RetryPolicy(sleep=sleeps.append).run(operation)

    assert calls["count"] == 1
    assert sleeps == []


def test_recover_hook_runs_before_each_retry():
    seen = []
    policy = RetryPolicy(sleep=lambda _: None)
    operation, _ = _failing(ConnectionError("connection refused"))

    with pytest.raises(ConnectionError):
        policy.run(operation, recover=lambda record: seen.append(record.category))

    assert seen == [FailureCategory.NETWORK] * RETRY_LIMITS[FailureCategory.NETWORK]


def test_counter_is_scoped_per_invocation():
    policy = RetryPolicy(sleep=lambda _: None)
    first, first_calls = _failing(TimeoutError("timed out"))
    second, second_calls = _failing(TimeoutError("timed out"))

    with pytest.raises(TimeoutError):
        policy.run(first)
    with pytest.raises(TimeoutError):
        policy.run(second)

    assert first_calls["count"] == second_calls["count"] == 3


def test_decide_advances_state_by_value():
    policy = RetryPolicy()
    record = FailureRecord.from_exception(ElementNotFoundError("no such element"))

    state = RetryState()
    decision = policy.decide(record, state)

    assert decision.retry
    assert state.attempt == 0
    assert decision.state.attempt == 1
    assert decision.state.max_attempts == 3
    assert decision.state.category == FailureCategory.ELEMENT_NOT_FOUND


def test_decide_stops_at_limit():
    policy = RetryPolicy()
    record = FailureRecord.from_exception(Exception("target closed"))

    first = policy.decide(record)
    second = policy.decide(record, first.state)

    assert first.retry is True
    assert second.retry is False
    assert second.state.exhausted


def test_retry_decorator():
    calls = {"count": 0}

    @with_retry(RetryPolicy(sleep=lambda _: None), step="flaky")
    def flaky():
        calls["count"] += 1
        if calls["count"] < 2:
            raise ElementNotFoundError("Unable to locate element")
        return calls["count"]

    assert flaky() == 2


def test_zero_backoff_skips_sleep():
    sleeps = []
    RetryPolicy(backoff_seconds=0, sleep=sleeps.append).backoff()
    assert sleeps == []
