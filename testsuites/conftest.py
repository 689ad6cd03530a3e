"""
================================================================================
Suite Pytest Configuration
================================================================================

This module provides the pytest configuration shared by the unit and UI
suites. It registers common markers and tags collected items by location.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests between components"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests simulating user flows"
    )
    config.addinivalue_line(
        "markers", "critical: Failures block the release"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: UI-specific tests"
    )
    config.addinivalue_line(
        "markers", "unit: In-memory tests of the automation framework"
    )
    config.addinivalue_line(
        "markers", "live: Needs a real browser and portal (enable with --live)"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "auth: Tests related to authentication"
    )
    config.addinivalue_line(
        "markers", "provider_group: Tests related to provider group management"
    )
    config.addinivalue_line(
        "markers", "staff: Tests related to provider group staff"
    )
    config.addinivalue_line(
        "markers", "location: Tests related to provider group locations"
    )
    config.addinivalue_line(
        "markers", "nurse: Tests related to nurse administration"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-add the 'ui' marker to tests in the ui_testing directory."""
    for item in items:
        if "ui_testing" in str(item.fspath):
            item.add_marker(pytest.mark.ui)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Provider Portal UI Automation",
        "=" * 60,
        "",
    ]
