"""
================================================================================
Location Page Object
================================================================================

Locations tab of a provider group and its "Add Location" dialog. The
dialog reuses the address sub-form; its save button is the second
"Add Location" label on the page.

Validation messages render as <span> elements, except the zip code error
which is a <label>.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger

from testsuites.ui_testing.framework.data_generator import LocationData
from testsuites.ui_testing.framework.element_actions import ElementActions
from testsuites.ui_testing.framework.locators import By

from .address_form import AddressForm
from .navigation import open_first_provider_group, wait_for_progress


class LocationPage:
    """Locations tab and Add Location dialog."""

    LOCATIONS_TAB = By.xpath("//button[text()='Locations']")
    ADD_LOCATION_BUTTON = By.xpath("//span[text()='Add Location']")
    NAME_INPUT = By.xpath("//input[@placeholder='Enter Name']")
    PHONE_INPUT = By.xpath("//input[@placeholder='Enter Phone Number']")
    EMAIL_INPUT = By.xpath("//input[@placeholder='Enter Email']")
    SAVE_BUTTON = By.xpath("(//span[text()='Add Location'])[2]")

    SUCCESS_MESSAGE = By.xpath("//span[text()='Location added successfully!']")
    NAME_REQUIRED_ERROR = By.xpath("//span[text()='Name is mandatory']")
    PHONE_INVALID_ERROR = By.xpath("//span[contains(text(), 'Invalid phone number. Please use +91, +1, or +61 f')]")
    EMAIL_REQUIRED_ERROR = By.xpath("//span[text()='Email id is mandatory']")
    EMAIL_INVALID_ERROR = By.xpath("//span[text()='Invalid email format']")

    def __init__(self, actions: ElementActions):
        self.actions = actions
        self.address = AddressForm(actions)

    @allure.step("Open the Add Location dialog")
    def open_add_location(self) -> None:
        open_first_provider_group(self.actions)
        self.actions.click(self.LOCATIONS_TAB, description="Locations tab")
        wait_for_progress(self.actions)
        self.actions.click(self.ADD_LOCATION_BUTTON, description="Add Location button")

    @allure.step("Fill location form")
    def fill_form(self, data: LocationData) -> None:
        self.actions.type_text(self.NAME_INPUT, data.name, description="Name field")
        self.actions.type_text(self.PHONE_INPUT, data.phone, description="Phone field")
        self.actions.type_text(self.EMAIL_INPUT, data.email, description="Email field")
        self.address.fill(data.address)

    @allure.step("Save location")
    def save(self) -> None:
        self.actions.click(self.SAVE_BUTTON, description="Add Location save button")
        wait_for_progress(self.actions)

    @allure.step("Add location")
    def add_location(self, data: LocationData) -> None:
        logger.info(f"Adding location '{data.name}'")
        self.open_add_location()
        self.fill_form(data)
        self.save()

    def get_success_message(self) -> str:
        return self.actions.get_text(self.SUCCESS_MESSAGE, description="Success message")

    def get_name_required_error(self) -> str:
        return self.actions.get_text(self.NAME_REQUIRED_ERROR, description="Name required error")

    def get_phone_invalid_error(self) -> str:
        return self.actions.get_text(self.PHONE_INVALID_ERROR, description="Phone invalid error")

    def get_email_required_error(self) -> str:
        return self.actions.get_text(self.EMAIL_REQUIRED_ERROR, description="Email required error")

    def get_email_invalid_error(self) -> str:
        return self.actions.get_text(self.EMAIL_INVALID_ERROR, description="Email invalid error")

    def get_zip_code_required_error(self) -> str:
        return self.address.get_zip_code_required_error()


__all__ = ["LocationPage"]
