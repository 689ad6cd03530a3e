"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework for the provider portal.

Components:
    - session: Per-thread browser sessions and driver setup
    - readiness: Page readiness detection
    - element_actions: Waits and interactions with fallbacks
    - failures / retry_policy: Failure classification and retry decisions
    - error_recovery: Best-effort recovery between attempts
    - reporting: Allure step, outcome and screenshot reporting
    - retry_plugin: pytest plugin wiring retries, recovery and cleanup

Author: Automation Team
License: MIT
================================================================================
"""

from .config import PortalConfig, load_config
from .element_actions import ElementActions
from .error_recovery import ErrorRecovery, RecoveryContext
from .exceptions import (
    ConfigurationError,
    DatePickerError,
    DriverError,
    ElementNotFoundError,
    InteractionError,
    OptionNotFoundError,
    PortalAutomationError,
    SessionInitError,
    StaleElementError,
    WaitTimeoutError,
)
from .failures import FailureCategory, FailureRecord, Outcome, classify_failure
from .locators import By
from .readiness import ReadinessDetector
from .reporting import AllureReportSink
from .retry_policy import RETRY_LIMITS, RetryPolicy, RetryState
from .session import Session, SessionRegistry

__all__ = [
    "AllureReportSink",
    "By",
    "ConfigurationError",
    "DatePickerError",
    "DriverError",
    "ElementActions",
    "ElementNotFoundError",
    "ErrorRecovery",
    "FailureCategory",
    "FailureRecord",
    "InteractionError",
    "OptionNotFoundError",
    "Outcome",
    "PortalAutomationError",
    "PortalConfig",
    "RETRY_LIMITS",
    "ReadinessDetector",
    "RecoveryContext",
    "RetryPolicy",
    "RetryState",
    "Session",
    "SessionInitError",
    "SessionRegistry",
    "StaleElementError",
    "WaitTimeoutError",
    "classify_failure",
    "load_config",
]
