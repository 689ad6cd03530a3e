"""
================================================================================
Unit Test Configuration
================================================================================

Fixtures wiring the framework to the in-memory driver with short waits.

================================================================================
"""

import copy
from typing import List

import pytest

from testsuites.ui_testing.framework.config import DEFAULTS, PortalConfig
from testsuites.ui_testing.framework.element_actions import ElementActions
from testsuites.ui_testing.framework.session import Session, WaitSettings
from testsuites.unit.fake_driver import FakeDriver, RecordingSink


FAST_WAITS = WaitSettings(
    default_timeout=0.3,
    poll_interval=0.01,
    display_check=0.1,
    readiness_timeout=0.3,
)


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "unit" in str(item.fspath).replace("\\", "/").split("/"):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def unit_config() -> PortalConfig:
    """Defaults with waits and recovery delays shrunk for fast tests."""
    return PortalConfig(copy.deepcopy(DEFAULTS)).with_overrides({
        "waits.default_timeout": 0.3,
        "waits.poll_interval": 0.01,
        "waits.display_check": 0.1,
        "waits.readiness_timeout": 0.3,
        "waits.transient_appear": 0.1,
        "waits.transient_disappear": 0.2,
        "recovery.overlay_timeout": 0.05,
        "retry.backoff_seconds": 0.0,
    })


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def fake_session(fake_driver: FakeDriver, unit_config: PortalConfig) -> Session:
    return Session(driver=fake_driver, config=unit_config, waits=FAST_WAITS)


@pytest.fixture
def fake_actions(fake_session: Session, sink: RecordingSink) -> ElementActions:
    return ElementActions(fake_session, reporter=sink)


@pytest.fixture
def sleeps(monkeypatch) -> List[float]:
    """Record time.sleep calls made by framework code instead of sleeping."""
    calls: List[float] = []
    monkeypatch.setattr("time.sleep", lambda seconds: calls.append(seconds))
    return calls
