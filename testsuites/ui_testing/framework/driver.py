"""
================================================================================
Driver Adapter
================================================================================

The narrow driver interface the framework depends on, and its Playwright
(sync API) implementation.

Features:
    - Driver / Element protocols: the only browser surface the core uses
    - Playwright errors translated into the framework exception hierarchy
    - One Playwright instance per driver; the sync API is thread-confined,
      so each test thread launches its own
    - Browser launch presets (viewport, HTTPS errors ignored)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import subprocess
import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Protocol

from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    ElementHandle,
    Error as PlaywrightError,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    sync_playwright,
)

from .config import PortalConfig
from .exceptions import (
    DriverError,
    ElementNotFoundError,
    PortalAutomationError,
    SessionInitError,
    StaleElementError,
    WaitTimeoutError,
)
from .locators import By


# ================================================================================
# Interface
# ================================================================================

class Element(Protocol):
    """A live, possibly stale reference to a DOM node."""

    @property
    def text(self) -> str: ...

    def is_displayed(self) -> bool: ...

    def is_enabled(self) -> bool: ...

    def click(self) -> None: ...

    def clear(self) -> None: ...

    def send_keys(self, text: str) -> None: ...

    def hover(self) -> None: ...

    def set_input_files(self, path: str) -> None: ...

    def get_attribute(self, name: str) -> Optional[str]: ...


class Driver(Protocol):
    """Browser session surface consumed by the framework."""

    @property
    def current_url(self) -> str: ...

    @property
    def title(self) -> str: ...

    def navigate(self, url: str) -> None: ...

    def find_element(self, locator: By) -> Element: ...

    def find_elements(self, locator: By) -> List[Element]: ...

    def execute_script(self, script: str, arg: Any = None) -> Any: ...

    def refresh(self) -> None: ...

    def screenshot(self) -> bytes: ...

    def set_timeouts(self, implicit_wait: float, page_load: float, script: float) -> None: ...

    def quit(self) -> None: ...


# ================================================================================
# Error translation
# ================================================================================

_STALE_MARKERS = ("not attached to the dom", "element is detached", "execution context was destroyed")
_CLOSED_MARKERS = ("target closed", "has been closed", "browser has disconnected", "connection closed")


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise Playwright errors from `action` as framework exceptions."""
    try:
        yield
    except PortalAutomationError:
        raise
    except PlaywrightTimeoutError as e:
        raise WaitTimeoutError(f"{action} timed out: {e.message}") from e
    except PlaywrightError as e:
        message = e.message or str(e)
        lowered = message.lower()
        if any(marker in lowered for marker in _STALE_MARKERS):
            raise StaleElementError(f"{action}: stale element, {message}") from e
        if any(marker in lowered for marker in _CLOSED_MARKERS):
            raise DriverError(f"{action}: {message}") from e
        raise DriverError(f"{action} failed: {message}") from e


# ================================================================================
# Playwright implementation
# ================================================================================

class PlaywrightElement:
    """Element adapter over a Playwright ElementHandle."""

    def __init__(self, handle: ElementHandle, page: Page, locator: Optional[By] = None, action_timeout_ms: float = 5000):
        self.handle = handle
        self._page = page
        self.locator = locator
        self._timeout = action_timeout_ms

    @property
    def text(self) -> str:
        with translate_errors("Read element text"):
            return self.handle.inner_text()

    def is_displayed(self) -> bool:
        with translate_errors("Check element visibility"):
            return self.handle.is_visible()

    def is_enabled(self) -> bool:
        with translate_errors("Check element enabled"):
            return self.handle.is_enabled()

    def click(self) -> None:
        with translate_errors("Click element"):
            self.handle.click(timeout=self._timeout)

    def clear(self) -> None:
        with translate_errors("Clear element"):
            self.handle.fill("", timeout=self._timeout)

    def send_keys(self, text: str) -> None:
        with translate_errors("Type into element"):
            self.handle.focus()
            self._page.keyboard.type(text)

    def hover(self) -> None:
        with translate_errors("Hover element"):
            self.handle.hover(timeout=self._timeout)

    def set_input_files(self, path: str) -> None:
        with translate_errors("Upload file"):
            self.handle.set_input_files(path, timeout=self._timeout)

    def get_attribute(self, name: str) -> Optional[str]:
        with translate_errors(f"Read attribute {name}"):
            return self.handle.get_attribute(name)

    def __repr__(self) -> str:
        return f"PlaywrightElement({self.locator or 'handle'})"


class PlaywrightDriver:
    """
    Driver adapter owning one Playwright instance, browser, context and page.

    Created and used on a single thread only.
    """

    # Default browser launch options
    DEFAULT_LAUNCH_ARGS = [
        "--ignore-certificate-errors",
    ]

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
        action_timeout: float = 5.0,
    ):
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self.page = page
        self._action_timeout_ms = action_timeout * 1000
        self._implicit_wait_ms = 0.0
        self.script_timeout = 0.0

    @property
    def current_url(self) -> str:
        with translate_errors("Read current URL"):
            return self.page.url

    @property
    def title(self) -> str:
        with translate_errors("Read page title"):
            return self.page.title()

    def navigate(self, url: str) -> None:
        logger.debug(f"Navigating to: {url}")
        with translate_errors(f"Navigate to {url}"):
            self.page.goto(url, wait_until="load")

    def find_element(self, locator: By) -> PlaywrightElement:
        selector = locator.to_playwright()
        with translate_errors(f"Find element {locator}"):
            if self._implicit_wait_ms > 0:
                try:
                    handle = self.page.wait_for_selector(
                        selector, state="attached", timeout=self._implicit_wait_ms
                    )
                except PlaywrightTimeoutError:
                    handle = None
            else:
                handle = self.page.query_selector(selector)
        if handle is None:
            raise ElementNotFoundError(f"no such element: Unable to locate element {locator}")
        return self._wrap(handle, locator)

    def find_elements(self, locator: By) -> List[PlaywrightElement]:
        with translate_errors(f"Find elements {locator}"):
            handles = self.page.query_selector_all(locator.to_playwright())
        return [self._wrap(handle, locator) for handle in handles]

    def execute_script(self, script: str, arg: Any = None) -> Any:
        with translate_errors("Execute script"):
            return self.page.evaluate(script, self._unwrap(arg))

    def refresh(self) -> None:
        logger.debug("Reloading page")
        with translate_errors("Reload page"):
            self.page.reload(wait_until="load")

    def screenshot(self) -> bytes:
        with translate_errors("Take screenshot"):
            return self.page.screenshot(full_page=False)

    def set_timeouts(self, implicit_wait: float, page_load: float, script: float) -> None:
        """
        Apply session timeouts.

        Playwright has no script timeout; the value is stored for reporting only.
        """
        self._implicit_wait_ms = implicit_wait * 1000
        self.script_timeout = script
        self.page.set_default_navigation_timeout(page_load * 1000)
        self.page.set_default_timeout(self._action_timeout_ms)

    def quit(self) -> None:
        """Close page, context, browser and Playwright. Raises the first failure after trying all."""
        errors = []
        for closer in (self._context.close, self._browser.close, self._playwright.stop):
            try:
                closer()
            except PlaywrightError as e:
                errors.append(e)
        if errors:
            raise DriverError(f"Driver shutdown incomplete: {errors[0]}") from errors[0]
        logger.debug("Browser closed")

    def _wrap(self, handle: ElementHandle, locator: Optional[By]) -> PlaywrightElement:
        return PlaywrightElement(handle, self.page, locator, self._action_timeout_ms)

    @staticmethod
    def _unwrap(arg: Any) -> Any:
        if isinstance(arg, PlaywrightElement):
            return arg.handle
        if isinstance(arg, (list, tuple)):
            return [PlaywrightDriver._unwrap(item) for item in arg]
        return arg


def launch_playwright_driver(config: PortalConfig) -> PlaywrightDriver:
    """
    Start Playwright and open a fresh page for one test thread.

    Args:
        config: Portal configuration (browser name, headless flag, viewport)

    Returns:
        A ready PlaywrightDriver
    """
    playwright = sync_playwright().start()
    try:
        if config.browser == "firefox":
            launcher = playwright.firefox
        elif config.browser == "webkit":
            launcher = playwright.webkit
        else:
            launcher = playwright.chromium

        launch_args = PlaywrightDriver.DEFAULT_LAUNCH_ARGS if launcher is playwright.chromium else []
        browser = launcher.launch(headless=config.headless, args=launch_args)
        context_options: Dict[str, Any] = {
            "viewport": {
                "width": int(config.get("browser.viewport_width", 1920)),
                "height": int(config.get("browser.viewport_height", 1080)),
            },
            "ignore_https_errors": True,
        }
        context = browser.new_context(**context_options)
        page = context.new_page()
    except PlaywrightError:
        playwright.stop()
        raise

    logger.debug(f"Browser started: {config.browser} (headless={config.headless})")
    return PlaywrightDriver(playwright, browser, context, page, action_timeout=config.action_timeout)


def install_browser(browser: str) -> None:
    """Run `playwright install <browser>` for this interpreter."""
    logger.info(f"Installing Playwright browser: {browser}")
    result = subprocess.run(
        [sys.executable, "-m", "playwright", "install", browser],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise SessionInitError(f"Playwright install failed for {browser}: {result.stderr.strip()}")


__all__ = [
    "Driver",
    "Element",
    "PlaywrightDriver",
    "PlaywrightElement",
    "launch_playwright_driver",
    "install_browser",
    "translate_errors",
]
