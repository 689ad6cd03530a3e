"""
Repository-level pytest configuration.

  - Registers the retry/recovery plugin and pytester for the whole tree
  - Adds the --live switch that enables browser tests

Real credentials come from CREDENTIALS_EMAIL / CREDENTIALS_PASSWORD in CI.
"""

from __future__ import annotations


pytest_plugins = [
    "pytester",
    "testsuites.ui_testing.framework.retry_plugin",
]


def pytest_addoption(parser):
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run UI tests against a real browser and portal",
    )


