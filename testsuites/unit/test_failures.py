import pytest

from testsuites.ui_testing.framework.exceptions import (
    DriverError,
    ElementNotFoundError,
    SessionInitError,
    StaleElementError,
    WaitTimeoutError,
)
from testsuites.ui_testing.framework.failures import FailureCategory, FailureRecord, Outcome, classify_failure


class WebDriverException(Exception):
    pass


class NoSuchElementException(Exception):
    pass


@pytest.mark.parametrize(
    "exc, category",
    [
        (Exception("Unable to locate element: {\"method\":\"xpath\"}"), FailureCategory.ELEMENT_NOT_FOUND),
        (NoSuchElementException(""), FailureCategory.ELEMENT_NOT_FOUND),
        (ElementNotFoundError("#save"), FailureCategory.ELEMENT_NOT_FOUND),
        (WaitTimeoutError("waiting 30s"), FailureCategory.TIMEOUT),
        (Exception("Operation timed out"), FailureCategory.TIMEOUT),
        (Exception("DatePicker did not open"), FailureCategory.DATE_PICKER),
        (Exception("calendar month not reached"), FailureCategory.DATE_PICKER),
        (Exception("net::ERR_CONNECTION_REFUSED"), FailureCategory.NETWORK),
        (StaleElementError("detached"), FailureCategory.STALE_ELEMENT),
        (Exception("element is not attached to the DOM"), FailureCategory.STALE_ELEMENT),
        (WebDriverException("chrome not reachable"), FailureCategory.GENERIC_DRIVER_ERROR),
        (DriverError("boom"), FailureCategory.GENERIC_DRIVER_ERROR),
        (ValueError("unexpected"), FailureCategory.UNKNOWN),
    ],
)
def test_classification(exc, category):
    assert classify_failure(exc) == category


def test_first_matching_rule_wins():
    exc = Exception("no such element after timeout")
    assert classify_failure(exc) == FailureCategory.ELEMENT_NOT_FOUND


def test_update_date_is_not_a_date_picker_failure():
    assert classify_failure(AssertionError("update date mismatch")) == FailureCategory.UNKNOWN


def test_record_from_exception():
    record = FailureRecord.from_exception(SessionInitError("browser missing"), step="acquire")

    assert record.category == FailureCategory.GENERIC_DRIVER_ERROR
    assert record.exception_type == "SessionInitError"
    assert record.retryable is False
    assert record.step == "acquire"
    assert record.summary().startswith("GenericDriverError (SessionInitError)")


def test_record_summary_truncates_long_messages():
    record = FailureRecord.from_exception(ValueError("x" * 300))
    assert record.summary().endswith("x" * 100 + "...")


def test_record_is_immutable():
    record = FailureRecord.from_exception(ValueError("x"))
    with pytest.raises(AttributeError):
        record.message = "changed"


def test_outcome_truthiness():
    assert Outcome.success(5)
    assert Outcome.success(5).value == 5
    failed = Outcome.failed(FailureRecord.from_exception(ValueError("x")))
    assert not failed
    assert failed.failure.category == FailureCategory.UNKNOWN
