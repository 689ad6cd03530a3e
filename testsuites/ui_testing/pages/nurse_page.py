"""
================================================================================
Nurse Page Object
================================================================================

Settings -> Admin Users -> Nurse, and the "Add Nurse" form.

The form has two state pickers: the address state (first "Select State"
input) and the licensed state (second one), whose options read
"<State> (<code>)". The license expiry is picked in the calendar widget.

Field errors render in a <div class="...error..."> right after the input.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger

from testsuites.ui_testing.framework.data_generator import NurseData
from testsuites.ui_testing.framework.element_actions import ElementActions
from testsuites.ui_testing.framework.locators import By

from .address_form import AddressForm
from .navigation import wait_for_progress


def field_error(placeholder: str) -> By:
    return By.xpath(
        f"//input[@placeholder='{placeholder}']/following-sibling::div[contains(@class, 'error')]"
    )


def licensed_state_option(state: str) -> By:
    return By.xpath(f"//ul[@role='listbox']/li[contains(., '{state} (')]")


class NursePage:
    """Nurse list and Add Nurse form."""

    SETTINGS_MENU = By.xpath("//span[text()='Settings']")
    ADMIN_USERS_TAB = By.xpath("//button[text()='Admin Users']")
    NURSE_TAB = By.xpath("//span[text()='Nurse']")
    ADD_NURSE_BUTTON = By.xpath("//span[normalize-space()='Add Nurse']")
    FIRST_NAME_INPUT = By.xpath("//input[@placeholder='Enter First Name']")
    LAST_NAME_INPUT = By.xpath("//input[@placeholder='Enter Last Name']")
    EMAIL_INPUT = By.xpath("//input[@placeholder='Enter Email']")
    PHONE_INPUT = By.xpath("//input[@placeholder='Enter Phone Number']")
    NPI_INPUT = By.xpath("//input[@placeholder='Enter NPI Number']")
    GENDER_DROPDOWN = By.xpath("//button[@role='combobox']/span[text()='Select Gender']")
    LICENSE_NUMBER_INPUT = By.xpath("//input[@placeholder='Enter License Number']")
    LICENSED_STATE_INPUT = By.xpath("(//input[@placeholder='Select State'])[2]")
    SAVE_BUTTON = By.xpath("(//button[@type='submit' and contains(., 'Add Nurse')])[2]")

    SUCCESS_MESSAGE = By.xpath("//*[text()='Nurse added successfully!']")
    FIRST_NAME_ERROR = field_error("Enter First Name")
    LAST_NAME_ERROR = field_error("Enter Last Name")
    EMAIL_ERROR = field_error("Enter Email")
    PHONE_ERROR = field_error("Enter Phone Number")

    def __init__(self, actions: ElementActions):
        self.actions = actions
        self.address = AddressForm(actions)

    @allure.step("Open the Add Nurse form")
    def open_add_nurse(self) -> None:
        wait_for_progress(self.actions)
        self.actions.click(self.SETTINGS_MENU, description="Settings menu")
        self.actions.click(self.ADMIN_USERS_TAB, description="Admin Users tab")
        self.actions.click(self.NURSE_TAB, description="Nurse tab")
        wait_for_progress(self.actions)
        self.actions.click(self.ADD_NURSE_BUTTON, description="Add Nurse button")

    @allure.step("Fill nurse form")
    def fill_form(self, data: NurseData) -> None:
        self.actions.type_text(self.FIRST_NAME_INPUT, data.first_name, description="First name field")
        self.actions.type_text(self.LAST_NAME_INPUT, data.last_name, description="Last name field")
        self.actions.type_text(self.EMAIL_INPUT, data.email, description="Email field")
        self.actions.type_text(self.PHONE_INPUT, data.phone, description="Phone field")
        self.actions.type_text(self.NPI_INPUT, data.npi, description="NPI field")
        if data.gender:
            self.actions.select_by_visible_text(self.GENDER_DROPDOWN, data.gender, description="Gender dropdown")
        self.address.fill(data.address)
        self.actions.type_text(self.LICENSE_NUMBER_INPUT, data.license_number, description="License number field")
        self.select_licensed_state(data.license_state)
        self.actions.select_date(data.license_expiry, description="License expiry")

    @allure.step("Select licensed state {state}")
    def select_licensed_state(self, state: str) -> None:
        self.actions.type_text(self.LICENSED_STATE_INPUT, state, description="Licensed state field")
        self.actions.click(licensed_state_option(state), description=f"Licensed state '{state}'")

    @allure.step("Save nurse")
    def save(self) -> None:
        self.actions.click(self.SAVE_BUTTON, description="Add Nurse save button")
        wait_for_progress(self.actions)

    @allure.step("Add nurse")
    def add_nurse(self, data: NurseData) -> None:
        logger.info(f"Adding nurse '{data.first_name} {data.last_name}', license expiring {data.license_expiry}")
        self.open_add_nurse()
        self.fill_form(data)
        self.save()

    def get_success_message(self) -> str:
        return self.actions.get_text(self.SUCCESS_MESSAGE, description="Success message")

    def get_first_name_error(self) -> str:
        return self.actions.get_text(self.FIRST_NAME_ERROR, description="First name error")

    def get_last_name_error(self) -> str:
        return self.actions.get_text(self.LAST_NAME_ERROR, description="Last name error")

    def get_email_error(self) -> str:
        return self.actions.get_text(self.EMAIL_ERROR, description="Email error")

    def get_phone_error(self) -> str:
        return self.actions.get_text(self.PHONE_ERROR, description="Phone error")


__all__ = ["NursePage"]
