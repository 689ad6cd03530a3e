"""
================================================================================
Session Registry
================================================================================

Per-thread ownership of one browser session.

Features:
    - At most one live Session per thread, never shared across threads
    - Configured implicit-wait, page-load and script timeouts
    - Navigation to the base URL and a readiness wait before handing over
    - Unconditional, never-raising release
    - Browser install runs at most once per browser per process

Usage:
    registry = SessionRegistry()
    session = registry.acquire(config)
    try:
        ...
    finally:
        registry.release(session)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, ClassVar, Optional, Set

from loguru import logger

from .config import PortalConfig
from .driver import Driver, install_browser, launch_playwright_driver
from .exceptions import SessionInitError
from .readiness import ReadinessDetector


DriverFactory = Callable[[PortalConfig], Driver]
BrowserSetup = Callable[[str], None]


@dataclass(frozen=True)
class WaitSettings:
    """Default wait configuration carried by a session (seconds)."""

    default_timeout: float = 30.0
    poll_interval: float = 0.5
    display_check: float = 5.0
    readiness_timeout: float = 30.0
    implicit_wait: float = 0.0
    page_load_timeout: float = 30.0
    script_timeout: float = 30.0

    @classmethod
    def from_config(cls, config: PortalConfig) -> "WaitSettings":
        return cls(
            default_timeout=config.default_timeout,
            poll_interval=config.poll_interval,
            display_check=float(config.get("waits.display_check", 5.0)),
            readiness_timeout=config.readiness_timeout,
            implicit_wait=config.implicit_wait,
            page_load_timeout=config.page_load_timeout,
            script_timeout=config.script_timeout,
        )


@dataclass
class Session:
    """One driver handle plus its wait settings, owned by one thread for one test."""

    driver: Driver
    config: PortalConfig
    waits: WaitSettings
    owner_thread: int = field(default_factory=threading.get_ident)
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    created_at: datetime = field(default_factory=datetime.now)
    alive: bool = True

    def __repr__(self) -> str:
        return f"Session(id={self.session_id}, thread={self.owner_thread}, alive={self.alive})"


class SessionRegistry:
    """
    Creates and tears down thread-confined sessions.

    The driver factory and browser setup are injectable so unit tests can run
    against an in-memory driver.
    """

    _setup_done: ClassVar[Set[str]] = set()
    _setup_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        driver_factory: Optional[DriverFactory] = None,
        browser_setup: Optional[BrowserSetup] = None,
    ):
        self._driver_factory = driver_factory or launch_playwright_driver
        self._browser_setup = browser_setup or install_browser
        self._local = threading.local()

    # ------------------------------------------------------------------
    # Driver setup cache
    # ------------------------------------------------------------------

    def ensure_driver_setup(self, browser: str) -> None:
        """Run the browser setup for `browser` unless this process already did."""
        with self._setup_lock:
            if browser in self._setup_done:
                return
            self._browser_setup(browser)
            self._setup_done.add(browser)
            logger.debug(f"Driver setup completed for: {browser}")

    @classmethod
    def reset_setup_cache(cls) -> None:
        """Forget completed browser setups. Test helper."""
        with cls._setup_lock:
            cls._setup_done.clear()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def current(self) -> Optional[Session]:
        """The live session owned by the calling thread, if any."""
        session = getattr(self._local, "session", None)
        if session is not None and session.alive:
            return session
        return None

    def acquire(self, config: PortalConfig) -> Session:
        """
        Create the calling thread's session.

        Args:
            config: Immutable portal configuration

        Returns:
            A live Session whose start page reported ready

        Raises:
            SessionInitError: The thread already owns a live session, or the
                browser could not be started, navigated or made ready
        """
        existing = self.current()
        if existing is not None:
            raise SessionInitError(
                f"Thread {threading.current_thread().name} already owns live session {existing.session_id}"
            )

        waits = WaitSettings.from_config(config)
        driver: Optional[Driver] = None
        try:
            if config.auto_install_browsers:
                self.ensure_driver_setup(config.browser)
            driver = self._driver_factory(config)
            driver.set_timeouts(waits.implicit_wait, waits.page_load_timeout, waits.script_timeout)
            session = Session(driver=driver, config=config, waits=waits)
            driver.navigate(config.base_url)
            ReadinessDetector(session).wait_for_page_load(waits.readiness_timeout)
        except Exception as e:
            if driver is not None:
                self._quit_quietly(driver)
            logger.error(f"Session creation failed: {type(e).__name__}: {e}")
            raise SessionInitError(f"Could not start {config.browser} session: {e}") from e

        self._local.session = session
        logger.info(f"Session {session.session_id} started on {threading.current_thread().name}")
        return session

    def release(self, session: Optional[Session]) -> None:
        """Tear down `session` unconditionally. Never raises."""
        if session is None:
            return
        try:
            self._quit_quietly(session.driver)
        finally:
            session.alive = False
            if getattr(self._local, "session", None) is session:
                self._local.session = None
        logger.info(f"Session {session.session_id} released")

    @staticmethod
    def _quit_quietly(driver: Driver) -> None:
        try:
            driver.quit()
        except Exception as e:
            logger.warning(f"Driver quit failed (ignored): {type(e).__name__}: {e}")


__all__ = ["Session", "SessionRegistry", "WaitSettings"]
