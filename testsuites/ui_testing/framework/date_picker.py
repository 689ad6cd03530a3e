"""
================================================================================
Date Picker
================================================================================

Drives the portal's calendar widget to a given date:

    calendar button -> year view -> year -> month arrows -> day cell

The widget shows one month at a time with a "<Month> <Year>" header. Day
cells are laid out in up to six rows; leading cells of the previous month are
blank, so the first row holding the day number is the right one.

Any failure inside the widget surfaces as DatePickerError so the retry
policy treats it as a date picker problem.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import TYPE_CHECKING, Dict

from loguru import logger

from .exceptions import DatePickerError, PortalAutomationError
from .locators import By

if TYPE_CHECKING:
    from .element_actions import ElementActions


CALENDAR_BUTTON = By.xpath("//button[@aria-label='Choose date']")
YEAR_VIEW_BUTTON = By.xpath("//button[@aria-label='calendar view is open, switch to year view']")
DISPLAYED_MONTH = By.xpath("//div[button[contains(@aria-label, 'calendar view')]]/div")
NEXT_MONTH_BUTTON = By.xpath("//button[@title='Next month']")
PREVIOUS_MONTH_BUTTON = By.xpath("//button[@title='Previous month']")

CALENDAR_ROWS = 6

# Full and abbreviated English month names, lower-cased
MONTHS: Dict[str, int] = {
    **{name.lower(): index for index, name in enumerate(calendar.month_name) if name},
    **{name.lower(): index for index, name in enumerate(calendar.month_abbr) if name},
}


def year_option(year: int) -> By:
    return By.xpath(f"//div[@role='radiogroup']/div/button[text()='{year}']")


def day_cell(row: int, day: int) -> By:
    return By.xpath(f"//div[@role='row' and @aria-rowindex='{row}']//button[text()='{day}']")


def parse_month(header: str) -> int:
    """Month number from a calendar header such as 'March 2026'."""
    words = header.split()
    month = MONTHS.get(words[0].lower()) if words else None
    if month is None:
        raise DatePickerError(f"Unrecognised calendar header '{header}'")
    return month


class DatePicker:
    """
    Calendar widget driver.

    Example:
        DatePicker(actions).select(date(2026, 11, 17))
    """

    def __init__(self, actions: "ElementActions", opener: By = CALENDAR_BUTTON):
        self.actions = actions
        self.opener = opener

    def select(self, target: date) -> None:
        """
        Pick `target` in the calendar.

        Raises:
            DatePickerError: The widget did not reach or offer the date
        """
        label = f"{target:%d/%m/%Y}"
        self._step("open calendar", label, lambda: self.actions.click(self.opener, description="Calendar button"))
        self._step("choose year", label, lambda: self._choose_year(target.year))
        self._step("choose month", label, lambda: self._choose_month(target.month))
        self._step("choose day", label, lambda: self._choose_day(target.day))
        logger.info(f"Date selected: {label}")

    def _step(self, name: str, label: str, action) -> None:
        try:
            action()
        except DatePickerError:
            raise
        except PortalAutomationError as e:
            raise DatePickerError(f"Date picker step '{name}' failed for {label}") from e

    def _choose_year(self, year: int) -> None:
        self.actions.click(YEAR_VIEW_BUTTON, description="Year view button")
        self.actions.click(year_option(year), description=f"Year {year}")

    def _choose_month(self, month: int) -> None:
        # One lap of the year is always enough
        for _ in range(12):
            shown = parse_month(self.actions.get_text(DISPLAYED_MONTH, description="Displayed month"))
            if shown == month:
                return
            arrow = NEXT_MONTH_BUTTON if shown < month else PREVIOUS_MONTH_BUTTON
            self.actions.click(arrow, description="Month arrow")
        raise DatePickerError(f"Date picker never showed {calendar.month_name[month]}")

    def _choose_day(self, day: int) -> None:
        for row in range(1, CALENDAR_ROWS + 1):
            cells = self.actions.driver.find_elements(day_cell(row, day))
            if cells:
                self.actions.click(cells[0], description=f"Day {day}")
                return
            logger.debug(f"Day {day} not in calendar row {row}")
        raise DatePickerError(f"Day {day} is not offered by the date picker")


__all__ = ["CALENDAR_BUTTON", "DatePicker", "day_cell", "parse_month", "year_option"]
