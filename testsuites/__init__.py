"""
Provider portal test suites.

  - ui_testing: framework, page objects and live browser tests
  - unit: framework tests against an in-memory driver

Kept importable so fixtures, page objects and `run_tests.py` share one namespace.
"""
