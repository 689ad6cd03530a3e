"""
================================================================================
Staff Page Object
================================================================================

Staff tab of a provider group and its "Add Staff" dialog.

Flow of an add:
    first provider group -> Staff tab -> "Add Staff" -> names, email, phone ->
    role -> gender -> address -> save

A saved staff member becomes the first row of the staff table, linked by
full name.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger

from testsuites.ui_testing.framework.data_generator import StaffData
from testsuites.ui_testing.framework.element_actions import ElementActions
from testsuites.ui_testing.framework.locators import By

from .address_form import AddressForm
from .navigation import FIRST_PROVIDER_GROUP_LINK, open_first_provider_group, wait_for_progress


class StaffPage:
    """Staff tab and Add Staff dialog."""

    STAFF_TAB = By.xpath("//button[text()='Staff']")
    ADD_STAFF_BUTTON = By.xpath("//span[text()='Add Staff']")
    FIRST_NAME_INPUT = By.xpath("//input[@placeholder='Enter First Name']")
    LAST_NAME_INPUT = By.xpath("//input[@placeholder='Enter Last Name']")
    EMAIL_INPUT = By.xpath("//input[@placeholder='Enter Email']")
    PHONE_INPUT = By.xpath("//input[@placeholder='Enter Phone Number']")
    ROLE_DROPDOWN = By.xpath("//button[@role='combobox']/span[text()='Select Staff Role']")
    GENDER_DROPDOWN = By.xpath("//button[@role='combobox']/span[text()='Select Gender']")
    SAVE_BUTTON = By.xpath("//div[div[p[text()='Add Staff']]]//button[text()='Add Staff']")
    FIRST_STAFF_LINK = FIRST_PROVIDER_GROUP_LINK

    FIRST_NAME_REQUIRED_ERROR = By.xpath("//label[text()='First Name is required']")
    LAST_NAME_REQUIRED_ERROR = By.xpath("//label[text()='Last Name is required']")
    PHONE_INVALID_ERROR = By.xpath("//label[text()='Invalid phone number. It must be 10 digits.']")
    PHONE_REQUIRED_ERROR = By.xpath("//label[normalize-space()='Phone is required']")
    EMAIL_REQUIRED_ERROR = By.xpath("//label[text()='Email is required']")

    def __init__(self, actions: ElementActions):
        self.actions = actions
        self.address = AddressForm(actions)

    @allure.step("Open the Add Staff dialog")
    def open_add_staff(self) -> None:
        open_first_provider_group(self.actions)
        self.actions.click(self.STAFF_TAB, description="Staff tab")
        wait_for_progress(self.actions)
        self.actions.click(self.ADD_STAFF_BUTTON, description="Add Staff button")

    @allure.step("Fill staff form")
    def fill_form(self, data: StaffData) -> None:
        self.actions.type_text(self.FIRST_NAME_INPUT, data.first_name, description="First name field")
        self.actions.type_text(self.LAST_NAME_INPUT, data.last_name, description="Last name field")
        self.actions.type_text(self.EMAIL_INPUT, data.email, description="Email field")
        self.actions.type_text(self.PHONE_INPUT, data.phone, description="Phone field")
        if data.role:
            self.actions.select_by_visible_text(self.ROLE_DROPDOWN, data.role, description="Staff role dropdown")
        if data.gender:
            self.actions.select_by_visible_text(self.GENDER_DROPDOWN, data.gender, description="Gender dropdown")
        if data.address is not None:
            self.address.fill(data.address)

    @allure.step("Save staff")
    def save(self) -> None:
        self.actions.click(self.SAVE_BUTTON, description="Add Staff save button")
        wait_for_progress(self.actions)

    @allure.step("Add staff")
    def add_staff(self, data: StaffData) -> None:
        logger.info(f"Adding staff '{data.full_name}' as {data.role}")
        self.open_add_staff()
        self.fill_form(data)
        self.save()

    def get_first_staff_name(self) -> str:
        return self.actions.get_text(self.FIRST_STAFF_LINK, description="First staff row")

    def get_first_name_error(self) -> str:
        return self.actions.get_text(self.FIRST_NAME_REQUIRED_ERROR, description="First name required error")

    def get_last_name_error(self) -> str:
        return self.actions.get_text(self.LAST_NAME_REQUIRED_ERROR, description="Last name required error")

    def get_phone_invalid_error(self) -> str:
        return self.actions.get_text(self.PHONE_INVALID_ERROR, description="Phone invalid error")

    def get_phone_required_error(self) -> str:
        return self.actions.get_text(self.PHONE_REQUIRED_ERROR, description="Phone required error")

    def get_email_required_error(self) -> str:
        return self.actions.get_text(self.EMAIL_REQUIRED_ERROR, description="Email required error")


__all__ = ["StaffPage"]
