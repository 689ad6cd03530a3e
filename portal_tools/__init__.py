"""
================================================================================
Portal Automation Tools
================================================================================

Shared, framework-independent helpers used by the provider portal test suites.

Packages:
    - common: Loguru logging setup
    - report_tools: Allure attachment helpers and execution summaries

Author: Automation Team
License: MIT
================================================================================
"""

__version__ = "1.0.0"
