"""
================================================================================
Address Sub-Form
================================================================================

Address block embedded in the provider group, location and staff forms.
The state field is an autocomplete listbox.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger

from testsuites.ui_testing.framework.data_generator import AddressData
from testsuites.ui_testing.framework.element_actions import DROPDOWN_OPTIONS, ElementActions
from testsuites.ui_testing.framework.locators import By


class AddressForm:
    """Address sub-form."""

    LINE1_INPUT = By.xpath("//input[@placeholder='Enter Address Line 1']")
    LINE2_INPUT = By.xpath("//input[@placeholder='Enter Address Line 2']")
    CITY_INPUT = By.xpath("//input[@placeholder='Enter City']")
    STATE_INPUT = By.xpath("//input[@placeholder='Select State']")
    STATE_OPTIONS = DROPDOWN_OPTIONS
    ZIP_CODE_INPUT = By.xpath("//input[@placeholder='Enter Zipcode' or @placeholder='Enter Zip Code']")

    LINE1_REQUIRED_ERROR = By.xpath("//label[contains(text(), 'Line 1') and contains(text(), 'required')]")
    ZIP_CODE_REQUIRED_ERROR = By.xpath("//label[contains(text(), 'Zip code') and contains(text(), 'required')]")

    def __init__(self, actions: ElementActions):
        self.actions = actions

    @allure.step("Fill address")
    def fill(self, address: AddressData) -> None:
        logger.debug(f"Filling address in {address.city}, {address.state or 'no state'}")
        self.actions.type_text(self.LINE1_INPUT, address.line1, description="Address line 1")
        if address.line2:
            self.actions.type_text(self.LINE2_INPUT, address.line2, description="Address line 2")
        self.actions.type_text(self.CITY_INPUT, address.city, description="City")
        if address.state:
            self.select_state(address.state)
        self.actions.type_text(self.ZIP_CODE_INPUT, address.zip_code, description="Zip code")

    @allure.step("Select state {state}")
    def select_state(self, state: str) -> int:
        return self.actions.select_by_visible_text(
            self.STATE_INPUT, state, options_locator=self.STATE_OPTIONS, description="State dropdown"
        )

    def get_line1_required_error(self) -> str:
        return self.actions.get_text(self.LINE1_REQUIRED_ERROR, description="Line 1 required error")

    def get_zip_code_required_error(self) -> str:
        return self.actions.get_text(self.ZIP_CODE_REQUIRED_ERROR, description="Zip code required error")


__all__ = ["AddressForm"]
