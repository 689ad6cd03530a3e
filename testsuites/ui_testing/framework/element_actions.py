# ================================================================================
# Element Actions Module
# ================================================================================
#
# Every interaction with a portal element funnels through this module so wait
# and fallback behaviour is applied uniformly.
#
# Key Features:
#   - Polling waits: present, visible, clickable, invisible
#   - Readiness check before every clickable, visible and present wait
#   - Scripted click fallback when the native click is refused
#   - Native clear plus scripted value reset before typing
#   - Case-insensitive, first-match dropdown selection
#   - Calendar widget date selection
#   - Step events to the report sink before and after each primitive
#
# Primitives never sleep-and-repeat an action. Retrying is done per test by
# the retry policy.
#
# ================================================================================

import time
from datetime import date
from functools import wraps
from pathlib import Path
from typing import Callable, List, Optional, Union

from loguru import logger

from . import scripts
from .date_picker import CALENDAR_BUTTON, DatePicker
from .driver import Element
from .exceptions import (
    ElementNotFoundError,
    InteractionError,
    OptionNotFoundError,
    StaleElementError,
    WaitTimeoutError,
)
from .failures import FailureRecord, Outcome
from .locators import By
from .readiness import ReadinessDetector
from .reporting import AllureReportSink, ReportSink
from .session import Session


Target = Union[By, Element]

DROPDOWN_OPTIONS = By.xpath("//ul[@role='listbox']/li")


def describe_target(target: Target) -> str:
    """Human-readable label for step events."""
    if isinstance(target, By):
        return str(target)
    if isinstance(target, date):
        return target.isoformat()
    locator = getattr(target, "locator", None)
    return f"element({locator})" if locator else "element"


def reported_step(action: str):
    """
    Decorator emitting step events around an element primitive.

    The label is the `description` keyword when given, else the first
    positional argument rendered by describe_target.
    """

    def decorator(func: Callable):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            label = kwargs.get("description") or (describe_target(args[0]) if args else "")
            self.reporter.record_step(f"{action}: {label}")
            try:
                result = func(self, *args, **kwargs)
            except Exception as e:
                self.reporter.record_step(f"{action} failed: {label} ({type(e).__name__})")
                raise
            self.reporter.record_step(f"{action} done: {label}")
            return result

        return wrapper

    return decorator


class ElementActions:
    """
    Element interaction engine bound to one session.

    Example:
        actions = ElementActions(session)
        actions.click(By.xpath("//button[@type='submit']"), description="Submit button")
        actions.type_text(By.css("input[name='name']"), "Acme Health", description="Name field")
    """

    def __init__(
        self,
        session: Session,
        reporter: Optional[ReportSink] = None,
        readiness: Optional[ReadinessDetector] = None,
    ):
        """
        Initialize ElementActions for a session.

        Args:
            session: Session owned by the calling thread
            reporter: Step event sink, Allure when omitted
            readiness: Readiness detector, built for the session when omitted
        """
        self.session = session
        self.driver = session.driver
        self.reporter = reporter or AllureReportSink()
        self.readiness = readiness or ReadinessDetector(session)

    # ------------------------------------------------------------------
    # Waits
    # ------------------------------------------------------------------

    @reported_step("Wait for clickable")
    def wait_for_clickable(self, target: Target, timeout: Optional[float] = None, description: str = "") -> Element:
        """
        Wait until the element exists, is displayed, enabled and not covered.

        Args:
            target: Locator or already resolved element
            timeout: Seconds to wait, the session default when omitted
            description: Human-readable description for reporting

        Returns:
            The resolved element

        Raises:
            WaitTimeoutError: The element did not become clickable in time
        """
        self._await_readiness(timeout)
        return self._poll(target, self._is_clickable, timeout, "clickable")

    @reported_step("Wait for visible")
    def wait_for_visible(self, target: Target, timeout: Optional[float] = None, description: str = "") -> Element:
        """Wait until the element is displayed; the page must be ready first."""
        self._await_readiness(timeout)
        return self._poll(target, lambda element: element.is_displayed(), timeout, "visible")

    @reported_step("Wait for present")
    def wait_for_present(self, target: Target, timeout: Optional[float] = None, description: str = "") -> Element:
        """Wait until the element is attached to the DOM; the page must be ready first."""
        self._await_readiness(timeout)
        return self._poll(target, lambda element: True, timeout, "present")

    @reported_step("Wait for invisible")
    def wait_for_invisible(self, locator: By, timeout: Optional[float] = None, description: str = "") -> bool:
        """
        Wait until no element matching `locator` is displayed.

        Returns:
            True once absent or hidden, False if still shown when `timeout` expired
        """
        timeout = self.session.waits.default_timeout if timeout is None else timeout
        deadline = time.monotonic() + timeout
        while True:
            try:
                elements = self.driver.find_elements(locator)
                if not any(self._displayed_quietly(element) for element in elements):
                    return True
            except StaleElementError:
                pass
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.debug(f"{locator} still visible after {timeout}s")
                return False
            time.sleep(min(self.session.waits.poll_interval, remaining))

    def wait_for_transient_indicator(
        self,
        locator: By,
        appear_timeout: Optional[float] = None,
        disappear_timeout: Optional[float] = None,
        description: str = "",
    ) -> Outcome[None]:
        """
        Wait for an indicator that may flash by, such as a progress bar.

        Not seeing it appear is not an error; the failure is returned.

        Args:
            locator: Indicator locator
            appear_timeout: Seconds to wait for it to show
            disappear_timeout: Seconds to wait for it to go away once shown
            description: Human-readable description for reporting
        """
        config = self.session.config
        appear_timeout = float(config.get("waits.transient_appear", 5.0)) if appear_timeout is None else appear_timeout
        disappear_timeout = (
            float(config.get("waits.transient_disappear", 30.0)) if disappear_timeout is None else disappear_timeout
        )
        label = description or str(locator)
        try:
            self.wait_for_visible(locator, appear_timeout, description=label)
        except WaitTimeoutError as e:
            logger.debug(f"{label} never appeared")
            return Outcome.failed(FailureRecord.from_exception(e, step=f"wait for {label} to appear"))

        if not self.wait_for_invisible(locator, disappear_timeout, description=label):
            error = WaitTimeoutError(f"{label} still visible after {disappear_timeout}s")
            return Outcome.failed(FailureRecord.from_exception(error, step=f"wait for {label} to disappear"))
        return Outcome.success()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    @reported_step("Click")
    def click(self, target: Target, description: str = "") -> None:
        """
        Click an element, falling back to a scripted click.

        Raises:
            InteractionError: The scripted click failed as well
        """
        element = self.wait_for_clickable(target, description=description)
        try:
            element.click()
            return
        except Exception as e:
            logger.warning(f"Native click refused on {description or describe_target(target)}: {e}")

        self.reporter.record_step(f"Scripted click fallback: {description or describe_target(target)}")
        try:
            self.driver.execute_script(scripts.JS_CLICK, element)
        except Exception as e:
            raise InteractionError(
                f"Click failed after scripted fallback on {description or describe_target(target)}: {e}"
            ) from e

    @reported_step("Type text")
    def type_text(self, target: Target, text: str, description: str = "") -> None:
        """
        Replace the element's content with `text`.

        The field is cleared natively and by a scripted value reset, then the
        text is sent verbatim.
        """
        element = self.wait_for_visible(target, description=description)
        element.clear()
        self.driver.execute_script(scripts.RESET_VALUE, element)
        element.send_keys(text)
        logger.debug(f"Typed {len(text)} characters into {description or describe_target(target)}")

    @reported_step("Get text")
    def get_text(self, target: Target, description: str = "") -> str:
        """Visible text of the element, surrounding whitespace removed."""
        text = self.wait_for_visible(target, description=description).text
        return (text or "").strip()

    @reported_step("Check displayed")
    def is_displayed(self, target: Target, timeout: Optional[float] = None, description: str = "") -> bool:
        """
        Whether the element becomes visible within `timeout`.

        Never raises for a missing, stale or slow element.
        """
        timeout = self.session.waits.display_check if timeout is None else timeout
        try:
            self.wait_for_visible(target, timeout, description=description)
            return True
        except (ElementNotFoundError, StaleElementError, WaitTimeoutError) as e:
            logger.debug(f"{description or describe_target(target)} not displayed: {type(e).__name__}")
            return False

    @reported_step("Select option")
    def select_by_visible_text(
        self,
        dropdown: Target,
        text: str,
        options_locator: By = DROPDOWN_OPTIONS,
        description: str = "",
    ) -> int:
        """
        Open a dropdown and click the first option whose text equals `text`.

        Comparison ignores case and surrounding whitespace. The whole list is
        scanned before giving up.

        Returns:
            Index of the clicked option

        Raises:
            OptionNotFoundError: No option matched
        """
        self.click(dropdown, description=description)
        options = self._wait_for_options(options_locator)
        wanted = text.strip().casefold()

        for index, option in enumerate(options):
            option_text = (option.text or "").strip()
            if option_text.casefold() == wanted:
                logger.info(f"Selecting option '{option_text}' (index {index})")
                self.click(option, description=f"option '{option_text}'")
                return index

        raise OptionNotFoundError(
            f"Option '{text}' not found after scanning {len(options)} options of {options_locator}"
        )

    @reported_step("Select date")
    def select_date(self, target_date: date, opener: By = CALENDAR_BUTTON, description: str = "") -> None:
        """
        Pick a date in the calendar widget opened by `opener`.

        Raises:
            DatePickerError: The widget did not reach or offer the date
        """
        DatePicker(self, opener).select(target_date)

    @reported_step("Hover")
    def hover(self, target: Target, description: str = "") -> None:
        element = self.wait_for_visible(target, description=description)
        element.hover()

    @reported_step("Upload file")
    def upload_file(self, target: Target, file_path: Union[str, Path], description: str = "") -> None:
        """
        Upload a file through a file input.

        Args:
            target: File input locator or element
            file_path: Path to the file to upload
            description: Human-readable description for reporting
        """
        element = self.wait_for_present(target, description=description)
        element.set_input_files(str(file_path))

    @reported_step("Scroll to element")
    def scroll_to(self, target: Target, description: str = "") -> None:
        element = self.wait_for_present(target, description=description)
        self.driver.execute_script(scripts.SCROLL_INTO_VIEW, element)

    @reported_step("Scroll to position")
    def scroll_to_position(self, x: int = 0, y: int = 0, description: str = "") -> None:
        self.driver.execute_script(scripts.SCROLL_TO_POSITION, [x, y])

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _await_readiness(self, timeout: Optional[float]) -> None:
        """Readiness wait preceding an element wait, never longer than the caller allows."""
        readiness_timeout = self.session.waits.readiness_timeout
        if timeout is not None:
            readiness_timeout = min(readiness_timeout, timeout)
        self.readiness.wait_for_page_load(readiness_timeout)

    def _resolve(self, target: Target) -> Element:
        if isinstance(target, By):
            return self.driver.find_element(target)
        return target

    def _poll(
        self,
        target: Target,
        condition: Callable[[Element], bool],
        timeout: Optional[float],
        condition_name: str,
    ) -> Element:
        """Re-resolve and test `target` until `condition` holds, ignoring missing and stale nodes."""
        timeout = self.session.waits.default_timeout if timeout is None else timeout
        deadline = time.monotonic() + timeout
        last_error: Optional[Exception] = None
        while True:
            try:
                element = self._resolve(target)
                if condition(element):
                    return element
                last_error = None
            except (ElementNotFoundError, StaleElementError) as e:
                last_error = e
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            time.sleep(min(self.session.waits.poll_interval, remaining))

        message = f"Timed out after {timeout}s waiting for {describe_target(target)} to be {condition_name}"
        if isinstance(last_error, ElementNotFoundError):
            # Never found at all: keep the cause in the text so it classifies as a missing element.
            message = f"{message}: {last_error}"
        raise WaitTimeoutError(message) from last_error

    def _is_clickable(self, element: Element) -> bool:
        return (
            element.is_displayed()
            and element.is_enabled()
            and not self.driver.execute_script(scripts.IS_OBSTRUCTED, element)
        )

    @staticmethod
    def _displayed_quietly(element: Element) -> bool:
        try:
            return element.is_displayed()
        except StaleElementError:
            return False

    def _wait_for_options(self, options_locator: By) -> List[Element]:
        deadline = time.monotonic() + self.session.waits.default_timeout
        while True:
            options = self.driver.find_elements(options_locator)
            if options or time.monotonic() >= deadline:
                return options
            time.sleep(self.session.waits.poll_interval)


__all__ = ["ElementActions", "DROPDOWN_OPTIONS", "Target", "describe_target", "reported_step"]
