import threading

import pytest

from testsuites.ui_testing.framework.exceptions import DriverError, SessionInitError
from testsuites.ui_testing.framework.session import SessionRegistry
from testsuites.unit.fake_driver import FakeDriver


class DriverFactory:
    """Hands out a new FakeDriver per call and remembers them."""

    def __init__(self, configure=None):
        self.drivers = []
        self._configure = configure
        self._lock = threading.Lock()

    def __call__(self, config):
        driver = FakeDriver()
        if self._configure:
            self._configure(driver)
        with self._lock:
            self.drivers.append(driver)
        return driver


@pytest.fixture(autouse=True)
def _fresh_setup_cache():
    SessionRegistry.reset_setup_cache()
    yield
    SessionRegistry.reset_setup_cache()


def test_acquire_configures_navigates_and_waits(unit_config):
    factory = DriverFactory()
    registry = SessionRegistry(driver_factory=factory, browser_setup=lambda browser: None)

    session = registry.acquire(unit_config)

    driver = factory.drivers[0]
    assert session.driver is driver
    assert driver.timeouts == (unit_config.implicit_wait, unit_config.page_load_timeout, unit_config.script_timeout)
    assert driver.visited == [unit_config.base_url]
    assert registry.current() is session
    registry.release(session)


def test_second_acquire_on_same_thread_is_rejected(unit_config):
    registry = SessionRegistry(driver_factory=DriverFactory(), browser_setup=lambda browser: None)
    session = registry.acquire(unit_config)

    with pytest.raises(SessionInitError):
        registry.acquire(unit_config)

    registry.release(session)
    assert registry.current() is None


def test_threads_get_distinct_sessions_and_release_independently(unit_config):
    factory = DriverFactory()
    registry = SessionRegistry(driver_factory=factory, browser_setup=lambda browser: None)
    acquired = {}
    first_ready = threading.Event()
    second_released = threading.Event()

    def first():
        session = registry.acquire(unit_config)
        acquired["first"] = session
        first_ready.set()
        second_released.wait(5)
        acquired["first_alive_after_other_release"] = session.alive and registry.current() is session
        registry.release(session)

    def second():
        first_ready.wait(5)
        session = registry.acquire(unit_config)
        acquired["second"] = session
        registry.release(session)
        second_released.set()

    threads = [threading.Thread(target=first), threading.Thread(target=second)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(10)

    assert acquired["first"] is not acquired["second"]
    assert acquired["first"].driver is not acquired["second"].driver
    assert acquired["first"].owner_thread != acquired["second"].owner_thread
    assert acquired["first_alive_after_other_release"] is True
    assert all(driver.quit_called for driver in factory.drivers)


def test_failed_start_quits_driver_and_raises(unit_config):
    factory = DriverFactory(lambda driver: setattr(driver, "navigate_error", DriverError("net::ERR_NAME_NOT_RESOLVED")))
    registry = SessionRegistry(driver_factory=factory, browser_setup=lambda browser: None)

    with pytest.raises(SessionInitError) as excinfo:
        registry.acquire(unit_config)

    assert isinstance(excinfo.value.__cause__, DriverError)
    assert factory.drivers[0].quit_called
    assert registry.current() is None


def test_page_never_ready_fails_session_start(unit_config):
    factory = DriverFactory(lambda driver: setattr(driver, "loading_count", 1))
    registry = SessionRegistry(driver_factory=factory, browser_setup=lambda browser: None)

    with pytest.raises(SessionInitError):
        registry.acquire(unit_config)

    assert factory.drivers[0].quit_called


def test_release_never_raises(unit_config):
    factory = DriverFactory(lambda driver: setattr(driver, "quit_error", DriverError("has been closed")))
    registry = SessionRegistry(driver_factory=factory, browser_setup=lambda browser: None)
    session = registry.acquire(unit_config)

    registry.release(session)
    registry.release(None)

    assert session.alive is False
    assert registry.current() is None


def test_browser_setup_runs_once_per_browser(unit_config):
    installs = []
    config = unit_config.with_overrides({"browser.auto_install": True})
    registry = SessionRegistry(driver_factory=DriverFactory(), browser_setup=installs.append)

    for _ in range(3):
        registry.release(registry.acquire(config))
    SessionRegistry(driver_factory=DriverFactory(), browser_setup=installs.append).ensure_driver_setup("chromium")

    assert installs == ["chromium"]


def test_browser_setup_skipped_unless_enabled(unit_config):
    installs = []
    registry = SessionRegistry(driver_factory=DriverFactory(), browser_setup=installs.append)

    registry.release(registry.acquire(unit_config))

    assert installs == []
