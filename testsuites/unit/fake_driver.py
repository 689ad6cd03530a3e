"""
================================================================================
In-Memory Driver
================================================================================

Driver and Element doubles for unit tests. They satisfy the framework's
Driver/Element protocols, answer the scripts in framework.scripts, and record
every call so tests can assert on behaviour without a browser.

Usage:
    driver = FakeDriver()
    button = driver.add(By.css("#save"), FakeElement(text="Save"))
    driver.ready_states = ["loading", "complete"]

================================================================================
"""

from typing import Any, Callable, Dict, List, Optional

from testsuites.ui_testing.framework import scripts
from testsuites.ui_testing.framework.exceptions import (
    DriverError,
    ElementNotFoundError,
    StaleElementError,
)
from testsuites.ui_testing.framework.locators import By


PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


class FakeElement:
    """Element double with switchable state."""

    def __init__(
        self,
        text: str = "",
        displayed: bool = True,
        enabled: bool = True,
        obstructed: bool = False,
        attributes: Optional[Dict[str, str]] = None,
        click_error: Optional[Exception] = None,
        on_click: Optional[Callable[[], None]] = None,
    ):
        self._text = text
        self.displayed = displayed
        self.enabled = enabled
        self.obstructed = obstructed
        self.attributes = dict(attributes or {})
        self.click_error = click_error
        self.on_click = on_click
        self.stale = False
        self.locator: Optional[By] = None
        self.value = ""
        self.clicks = 0
        self.scripted_clicks = 0
        self.text_reads = 0
        self.hovered = False
        self.uploaded: Optional[str] = None

    def _check_attached(self) -> None:
        if self.stale:
            raise StaleElementError("stale element reference: element is not attached to the DOM")

    @property
    def text(self) -> str:
        self._check_attached()
        self.text_reads += 1
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = value

    def is_displayed(self) -> bool:
        self._check_attached()
        return self.displayed

    def is_enabled(self) -> bool:
        self._check_attached()
        return self.enabled

    def click(self) -> None:
        self._check_attached()
        if self.click_error is not None:
            raise self.click_error
        self.clicks += 1
        if self.on_click is not None:
            self.on_click()

    def clear(self) -> None:
        self._check_attached()
        self.value = ""

    def send_keys(self, text: str) -> None:
        self._check_attached()
        self.value += text

    def hover(self) -> None:
        self._check_attached()
        self.hovered = True

    def set_input_files(self, path: str) -> None:
        self._check_attached()
        self.uploaded = path

    def get_attribute(self, name: str) -> Optional[str]:
        self._check_attached()
        return self.attributes.get(name)

    def __repr__(self) -> str:
        return f"FakeElement({self._text!r})"


class FakeDriver:
    """
    Driver double.

    Page state is plain attributes. `ready_states` is consumed one value per
    readiness evaluation; the last value sticks.
    """

    def __init__(self, url: str = "http://portal.test/"):
        self.elements: Dict[By, List[FakeElement]] = {}
        self.ready_states: List[str] = ["complete"]
        self.ajax_idle = True
        self.loading_count = 0
        self.responsive = True
        self._url = url
        self._title = "Provider Portal"
        self.title_error: Optional[Exception] = None
        self.url_error: Optional[Exception] = None
        self.navigate_error: Optional[Exception] = None
        self.quit_error: Optional[Exception] = None
        self.script_errors: Dict[str, Exception] = {}
        self.scripted_click_error: Optional[Exception] = None

        self.scripts: List[str] = []
        self.visited: List[str] = []
        self.refreshes = 0
        self.timeouts: Optional[tuple] = None
        self.quit_called = False

    # ------------------------------------------------------------------
    # Test setup helpers
    # ------------------------------------------------------------------

    def add(self, locator: By, *elements: FakeElement) -> FakeElement:
        """Register elements under `locator`; returns the first."""
        for element in elements:
            element.locator = locator
        self.elements.setdefault(locator, []).extend(elements)
        return elements[0]

    def remove(self, locator: By) -> None:
        self.elements.pop(locator, None)

    def script_count(self, script: str) -> int:
        return self.scripts.count(script)

    # ------------------------------------------------------------------
    # Driver protocol
    # ------------------------------------------------------------------

    @property
    def current_url(self) -> str:
        if self.url_error is not None:
            raise self.url_error
        return self._url

    @property
    def title(self) -> str:
        if self.title_error is not None:
            raise self.title_error
        return self._title

    def navigate(self, url: str) -> None:
        if self.navigate_error is not None:
            raise self.navigate_error
        self.visited.append(url)
        self._url = url

    def find_element(self, locator: By) -> FakeElement:
        found = self.elements.get(locator)
        if not found:
            raise ElementNotFoundError(f"no such element: Unable to locate element {locator}")
        return found[0]

    def find_elements(self, locator: By) -> List[FakeElement]:
        return list(self.elements.get(locator, []))

    def execute_script(self, script: str, arg: Any = None) -> Any:
        self.scripts.append(script)
        if script in self.script_errors:
            raise self.script_errors[script]

        if script == scripts.READY_STATE:
            state = self.ready_states[0]
            if len(self.ready_states) > 1:
                self.ready_states.pop(0)
            return state
        if script == scripts.AJAX_IDLE:
            return self.ajax_idle
        if script == scripts.VISIBLE_LOADING_COUNT:
            return self.loading_count
        if script == scripts.PAGE_RESPONSIVE:
            return self.responsive
        if script == scripts.IS_OBSTRUCTED:
            return arg.obstructed
        if script == scripts.JS_CLICK:
            if self.scripted_click_error is not None:
                raise self.scripted_click_error
            arg.scripted_clicks += 1
            return None
        if script == scripts.RESET_VALUE:
            arg.value = ""
            return None
        return None

    def refresh(self) -> None:
        self.refreshes += 1

    def screenshot(self) -> bytes:
        if self.quit_called:
            raise DriverError("Take screenshot: Target page, context or browser has been closed")
        return PNG_BYTES

    def set_timeouts(self, implicit_wait: float, page_load: float, script: float) -> None:
        self.timeouts = (implicit_wait, page_load, script)

    def quit(self) -> None:
        self.quit_called = True
        if self.quit_error is not None:
            raise self.quit_error


class RecordingSink:
    """ReportSink that keeps events in memory."""

    def __init__(self):
        self.steps: List[str] = []
        self.outcomes: List[tuple] = []
        self.screenshots: List[tuple] = []

    def record_step(self, message: str) -> None:
        self.steps.append(message)

    def record_outcome(self, status: str, message: str) -> None:
        self.outcomes.append((status, message))

    def attach_screenshot(self, data, name: str = "Screenshot") -> None:
        self.screenshots.append((name, data))
