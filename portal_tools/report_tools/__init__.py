"""
================================================================================
Report Tools
================================================================================

Allure attachment helpers and execution summaries shared by the suites.

================================================================================
"""

from .allure_utils import (
    ExecutionSummary,
    attach_json,
    attach_page_state,
    attach_png,
    attach_text,
)

__all__ = [
    "ExecutionSummary",
    "attach_json",
    "attach_page_state",
    "attach_png",
    "attach_text",
]
