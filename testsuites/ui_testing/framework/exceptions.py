"""
================================================================================
UI Framework Exceptions
================================================================================

Exception hierarchy raised by the provider portal UI framework.

Every class carries the failure category used by the retry policy and a
`retryable` flag. Playwright errors are translated into this hierarchy at the
driver adapter so the rest of the framework never handles them directly.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from .failures import FailureCategory


class PortalAutomationError(Exception):
    """Base class for all UI framework errors."""

    category: FailureCategory = FailureCategory.UNKNOWN
    retryable: bool = True


class SessionInitError(PortalAutomationError):
    """Browser session could not be created. Environment problem, never retried."""

    category = FailureCategory.GENERIC_DRIVER_ERROR
    retryable = False


class WaitTimeoutError(PortalAutomationError, TimeoutError):
    """A bounded wait expired before its condition held."""

    category = FailureCategory.TIMEOUT


class ElementNotFoundError(PortalAutomationError):
    """No element matched a locator."""

    category = FailureCategory.ELEMENT_NOT_FOUND


class StaleElementError(PortalAutomationError):
    """A resolved element was detached from the DOM."""

    category = FailureCategory.STALE_ELEMENT


class InteractionError(PortalAutomationError):
    """A click or type failed even after the scripted fallback."""


class OptionNotFoundError(PortalAutomationError):
    """A dropdown scan finished without an exact match."""

    retryable = False


class DatePickerError(PortalAutomationError):
    """The calendar widget could not be driven to the requested date."""

    category = FailureCategory.DATE_PICKER


class DriverError(PortalAutomationError):
    """The browser or page is closed or otherwise unusable."""

    category = FailureCategory.GENERIC_DRIVER_ERROR


class ConfigurationError(PortalAutomationError):
    """Raised when configuration loading or access fails."""

    retryable = False


__all__ = [
    "PortalAutomationError",
    "SessionInitError",
    "WaitTimeoutError",
    "ElementNotFoundError",
    "StaleElementError",
    "InteractionError",
    "OptionNotFoundError",
    "DatePickerError",
    "DriverError",
    "ConfigurationError",
]
