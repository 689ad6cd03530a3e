"""
================================================================================
Failure Classification
================================================================================

Failure categories, immutable failure records and the `Outcome` result type.

Classification is an ordered substring match over "<ClassName>: <message>";
the first matching rule wins, so a message mentioning both a missing element
and a timeout counts as a missing element. Framework exceptions matching no
rule fall back to the category their class declares.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, Optional, Tuple, TypeVar


class FailureCategory(str, Enum):
    """Classification bucket driving the retry-count policy."""

    ELEMENT_NOT_FOUND = "ElementNotFound"
    TIMEOUT = "Timeout"
    DATE_PICKER = "DatePicker"
    NETWORK = "Network"
    STALE_ELEMENT = "StaleElement"
    GENERIC_DRIVER_ERROR = "GenericDriverError"
    UNKNOWN = "Unknown"


# Ordered: first match wins. Patterns are compared lower-cased.
CLASSIFICATION_RULES: Tuple[Tuple[FailureCategory, Tuple[str, ...]], ...] = (
    (FailureCategory.ELEMENT_NOT_FOUND, (
        "no such element", "unable to locate element", "elementnotfound", "nosuchelement",
    )),
    (FailureCategory.TIMEOUT, ("timeout", "timed out")),
    (FailureCategory.DATE_PICKER, ("datepicker", "date picker", "calendar")),
    (FailureCategory.NETWORK, ("connection", "network", "net::err")),
    (FailureCategory.STALE_ELEMENT, (
        "staleelement", "stale element", "not attached to the dom",
    )),
    (FailureCategory.GENERIC_DRIVER_ERROR, (
        "webdriverexception", "drivererror", "target closed", "has been closed",
    )),
)


def describe_exception(exc: BaseException) -> str:
    """Render an exception the way classification sees it."""
    message = str(exc)
    name = type(exc).__name__
    return f"{name}: {message}" if message else name


def classify_failure(exc: BaseException) -> FailureCategory:
    """
    Classify an exception into a retry category.

    Args:
        exc: The caught exception

    Returns:
        The first category whose pattern appears in the class name or message,
        else the category the exception class declares, else UNKNOWN
    """
    haystack = describe_exception(exc).lower()
    for category, patterns in CLASSIFICATION_RULES:
        if any(pattern in haystack for pattern in patterns):
            return category
    declared = getattr(exc, "category", None)
    return declared if isinstance(declared, FailureCategory) else FailureCategory.UNKNOWN


@dataclass(frozen=True)
class FailureRecord:
    """A caught failure. Never mutated after creation."""

    category: FailureCategory
    message: str
    step: str
    exception_type: str
    retryable: bool = True
    timestamp: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_exception(cls, exc: BaseException, step: str = "") -> "FailureRecord":
        """Classify `exc` and capture it as a record."""
        return cls(
            category=classify_failure(exc),
            message=str(exc),
            step=step,
            exception_type=type(exc).__name__,
            retryable=getattr(exc, "retryable", True),
        )

    def summary(self) -> str:
        text = self.message if len(self.message) <= 100 else self.message[:100] + "..."
        return f"{self.category.value} ({self.exception_type}): {text}"


T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of an operation whose failure is acceptable to the caller.

    Used instead of catching and discarding an exception at call sites where
    the awaited condition is optional.
    """

    value: Optional[T] = None
    failure: Optional[FailureRecord] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, failure: FailureRecord) -> "Outcome[T]":
        return cls(failure=failure)

    def __bool__(self) -> bool:
        return self.ok


__all__ = [
    "FailureCategory",
    "FailureRecord",
    "Outcome",
    "classify_failure",
    "describe_exception",
    "CLASSIFICATION_RULES",
]
