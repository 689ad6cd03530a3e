"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for session management, page objects, and test data in UI tests.

Key Features:
- One browser session per test, owned by the running thread
- Page Object fixtures built on a shared ElementActions
- Super-admin login fixture
- Tests here drive a real browser and only run with --live

================================================================================
"""

from typing import Iterator

import pytest

from testsuites.ui_testing.framework.cleanup import PortalApiClient
from testsuites.ui_testing.framework.config import PortalConfig
from testsuites.ui_testing.framework.data_generator import TestDataGenerator
from testsuites.ui_testing.framework.element_actions import ElementActions
from testsuites.ui_testing.framework.reporting import AllureReportSink
from testsuites.ui_testing.framework.session import Session, SessionRegistry
from testsuites.ui_testing.pages.location_page import LocationPage
from testsuites.ui_testing.pages.login_page import LoginPage, login_as_super_admin
from testsuites.ui_testing.pages.nurse_page import NursePage
from testsuites.ui_testing.pages.provider_group_page import ProviderGroupPage
from testsuites.ui_testing.pages.staff_page import StaffPage


# ================================================================================
# Pytest Configuration
# ================================================================================

def pytest_collection_modifyitems(config, items):
    """Skip browser tests unless --live was given."""
    if config.getoption("--live"):
        return
    skip_live = pytest.mark.skip(reason="needs a running portal; use --live")
    for item in items:
        if "ui_testing/tests" in str(item.fspath).replace("\\", "/"):
            item.add_marker(pytest.mark.live)
            item.add_marker(skip_live)


# ================================================================================
# Session Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def session_registry() -> SessionRegistry:
    """
    Session-scoped registry.

    Tracks one live session per worker thread and runs browser setup once.
    """
    return SessionRegistry()


@pytest.fixture(scope="function")
def session(session_registry: SessionRegistry, portal_config: PortalConfig) -> Iterator[Session]:
    """
    Function-scoped browser session.

    Each test (and each retry of it) gets a fresh browser, released
    unconditionally at teardown.
    """
    live_session = session_registry.acquire(portal_config)
    try:
        yield live_session
    finally:
        session_registry.release(live_session)


@pytest.fixture
def actions(session: Session, report_sink: AllureReportSink) -> ElementActions:
    """Element interaction engine bound to this test's session."""
    return ElementActions(session, reporter=report_sink)


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(actions: ElementActions) -> LoginPage:
    return LoginPage(actions)


@pytest.fixture
def provider_group_page(actions: ElementActions) -> ProviderGroupPage:
    return ProviderGroupPage(actions)


@pytest.fixture
def staff_page(actions: ElementActions) -> StaffPage:
    return StaffPage(actions)


@pytest.fixture
def location_page(actions: ElementActions) -> LocationPage:
    return LocationPage(actions)


@pytest.fixture
def nurse_page(actions: ElementActions) -> NursePage:
    return NursePage(actions)


@pytest.fixture
def logged_in(actions: ElementActions) -> LoginPage:
    """Page logged in as the configured super admin."""
    return login_as_super_admin(actions)


# ================================================================================
# Utility Fixtures
# ================================================================================

@pytest.fixture
def data_generator() -> TestDataGenerator:
    return TestDataGenerator()


@pytest.fixture
def portal_api(portal_config: PortalConfig) -> Iterator[PortalApiClient]:
    """REST client used for cleanup of created entities."""
    with PortalApiClient.from_config(portal_config) as api:
        yield api
