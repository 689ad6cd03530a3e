"""
Portal navigation shared by the page objects: the progress bar shown while
a view loads, and the first provider group row of the list.
"""

from __future__ import annotations

from loguru import logger

from testsuites.ui_testing.framework.element_actions import ElementActions
from testsuites.ui_testing.framework.locators import By


PROGRESS_BAR = By.xpath("//div[span[@role='progressbar']]")
FIRST_PROVIDER_GROUP_LINK = By.xpath("//tbody/tr[1]/td[1]/div[1]/a[1]")


def wait_for_progress(actions: ElementActions) -> bool:
    """Let the progress bar come and go; returns False if it never showed or stuck."""
    outcome = actions.wait_for_transient_indicator(PROGRESS_BAR, description="Progress bar")
    if not outcome.ok:
        logger.debug(f"Progress bar: {outcome.failure.message}")
    return outcome.ok


def open_first_provider_group(actions: ElementActions) -> None:
    """Open the details of the first provider group in the list."""
    wait_for_progress(actions)
    actions.click(FIRST_PROVIDER_GROUP_LINK, description="First provider group")
    wait_for_progress(actions)


__all__ = ["FIRST_PROVIDER_GROUP_LINK", "PROGRESS_BAR", "open_first_provider_group", "wait_for_progress"]
