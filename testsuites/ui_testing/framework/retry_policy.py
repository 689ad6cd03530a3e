"""
================================================================================
Retry Policy Engine
================================================================================

Decides whether a failed logical operation (normally a whole test) is run
again, based on the failure category.

States per invocation:
    Initial -> Failed(category) -> Retrying(attempt) -> Succeeded | ExhaustedFailed

Retry table (retries after the first failure):
    ElementNotFound, StaleElement, DatePicker   3
    Timeout, Network                            2
    GenericDriverError                          1
    Unknown                                     2

A fixed backoff (2s by default) separates attempts. The retry counter lives
in an immutable RetryState that is created per invocation and replaced, never
mutated, on each retry.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from functools import wraps
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

from loguru import logger

from .failures import FailureCategory, FailureRecord


RETRY_LIMITS: Mapping[FailureCategory, int] = {
    FailureCategory.ELEMENT_NOT_FOUND: 3,
    FailureCategory.STALE_ELEMENT: 3,
    FailureCategory.DATE_PICKER: 3,
    FailureCategory.TIMEOUT: 2,
    FailureCategory.NETWORK: 2,
    FailureCategory.GENERIC_DRIVER_ERROR: 1,
    FailureCategory.UNKNOWN: 2,
}

DEFAULT_BACKOFF_SECONDS = 2.0

T = TypeVar("T")


@dataclass(frozen=True)
class RetryState:
    """Retries used so far by one logical invocation."""

    attempt: int = 0
    max_attempts: int = 0
    category: Optional[FailureCategory] = None

    def advance(self, category: FailureCategory, max_attempts: int) -> "RetryState":
        return replace(self, attempt=self.attempt + 1, max_attempts=max_attempts, category=category)

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts


@dataclass(frozen=True)
class RetryDecision:
    """Outcome of one policy evaluation."""

    retry: bool
    state: RetryState
    record: FailureRecord
    reason: str = ""


class RetryPolicy:
    """
    Category-driven retry decisions with a fixed backoff.

    Args:
        backoff_seconds: Sleep before each retry
        limits: Category to max-retries table, RETRY_LIMITS when omitted
        sleep: Sleep function, replaceable in tests
    """

    def __init__(
        self,
        backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
        limits: Optional[Mapping[FailureCategory, int]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.backoff_seconds = backoff_seconds
        self.limits: Dict[FailureCategory, int] = dict(limits or RETRY_LIMITS)
        self._sleep = sleep

    def max_retries(self, category: FailureCategory) -> int:
        return self.limits.get(category, self.limits[FailureCategory.UNKNOWN])

    def decide(self, record: FailureRecord, state: Optional[RetryState] = None) -> RetryDecision:
        """
        Decide whether to retry after `record`.

        Args:
            record: The failure just observed
            state: State carried from earlier attempts of this invocation; None on first failure

        Returns:
            RetryDecision carrying the advanced state when retrying
        """
        state = state or RetryState()
        limit = self.max_retries(record.category)

        if not record.retryable:
            return RetryDecision(False, state, record, f"{record.exception_type} is never retried")
        if state.attempt >= limit:
            return RetryDecision(
                False, replace(state, max_attempts=limit, category=record.category), record,
                f"{record.category.value} allows {limit} retries, {state.attempt} used",
            )
        next_state = state.advance(record.category, limit)
        return RetryDecision(True, next_state, record, f"{record.category.value} retry {next_state.attempt} of {limit}")

    def backoff(self) -> None:
        """Sleep the fixed inter-attempt delay."""
        if self.backoff_seconds > 0:
            self._sleep(self.backoff_seconds)

    def run(
        self,
        operation: Callable[[], T],
        step: str = "",
        recover: Optional[Callable[[FailureRecord], Any]] = None,
    ) -> T:
        """
        Run `operation`, retrying per policy. The counter is local to this call.

        Args:
            operation: Callable to run
            step: Step name recorded in failure records
            recover: Pre-retry hook given the failure record; its result is advisory

        Returns:
            The operation's result

        Raises:
            The last exception once retries are exhausted or not allowed
        """
        state: Optional[RetryState] = None
        while True:
            try:
                return operation()
            except Exception as e:
                record = FailureRecord.from_exception(e, step)
                decision = self.decide(record, state)
                if not decision.retry:
                    logger.error(f"{step or 'Operation'} failed finally: {decision.reason}. {record.summary()}")
                    raise
                logger.warning(f"{step or 'Operation'} failed ({record.summary()}); {decision.reason}")
                if recover is not None:
                    recover(record)
                self.backoff()
                state = decision.state


def with_retry(policy: Optional[RetryPolicy] = None, step: Optional[str] = None):
    """
    Decorator running the wrapped callable under a RetryPolicy.

    Args:
        policy: RetryPolicy to apply, a default one when omitted
        step: Step name for failure records, the function name when omitted
    """
    policy = policy or RetryPolicy()

    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            return policy.run(lambda: func(*args, **kwargs), step=step or func.__name__)

        return wrapper

    return decorator


__all__ = [
    "RETRY_LIMITS",
    "DEFAULT_BACKOFF_SECONDS",
    "RetryDecision",
    "RetryPolicy",
    "RetryState",
    "with_retry",
]
