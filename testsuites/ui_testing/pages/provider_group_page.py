"""
================================================================================
Provider Group Page Object
================================================================================

Provider group list and the add/edit form.

Flow of an add:
    progress bar settles -> "New Provider Group" -> manual entry ->
    fields -> address -> submit -> progress bar settles

Validation errors render as <label> elements next to each field; the
getters return their trimmed text for exact comparison.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger

from testsuites.ui_testing.framework.data_generator import AddressData, ProviderGroupData
from testsuites.ui_testing.framework.element_actions import ElementActions
from testsuites.ui_testing.framework.locators import By

from .address_form import AddressForm
from .navigation import PROGRESS_BAR, wait_for_progress


class ProviderGroupPage:
    """Provider group list and form."""

    NEW_PROVIDER_GROUP_BUTTON = By.xpath("//button[.//span[text()='New Provider Group']]")
    MANUAL_ENTRY_RADIO = By.xpath("//input[@type='radio' and @value='manualEntry']")
    NAME_INPUT = By.xpath("//input[@name='name' or @placeholder='Enter Name']")
    EMAIL_INPUT = By.xpath("//input[@name='email' or @placeholder='Enter Email']")
    PHONE_INPUT = By.xpath("//input[@name='phoneNumber' or @placeholder='Enter Phone Number']")
    NPI_INPUT = By.xpath("//input[@name='npiNumber' or @placeholder='Enter NPI Number']")
    SUBDOMAIN_INPUT = By.xpath("//input[@placeholder='Enter Sub Domain']")
    SUBMIT_BUTTON = By.xpath("//button[@type='submit' or contains(@class, 'submit')]")
    EDIT_BUTTON = By.xpath("//button[contains(@aria-label, 'edit') or .//span[text()='Edit']]")
    PROGRESS_BAR = PROGRESS_BAR

    SUCCESS_MESSAGE = By.xpath("//div[contains(@class, 'success')]//span[contains(text(), 'Provider group')]")

    NAME_REQUIRED_ERROR = By.xpath("//label[contains(text(), 'Name') and contains(text(), 'required')]")
    EMAIL_INVALID_ERROR = By.xpath("//label[contains(text(), 'Invalid email')]")
    EMAIL_REQUIRED_ERROR = By.xpath("//label[contains(text(), 'Email') and contains(text(), 'required')]")
    PHONE_INVALID_ERROR = By.xpath("//label[contains(text(), 'Invalid phone number')]")
    PHONE_REQUIRED_ERROR = By.xpath("//label[contains(text(), 'Phone') and contains(text(), 'required')]")
    NPI_INVALID_ERROR = By.xpath("//label[contains(text(), 'Must be 10 digits') or contains(text(), 'Invalid NPI')]")
    NPI_REQUIRED_ERROR = By.xpath("//label[contains(text(), 'NPI') and contains(text(), 'required')]")
    SUBDOMAIN_INVALID_ERROR = By.xpath(
        "//label[contains(text(),'Subdomain must only contain lowercase letters, num')]"
    )
    SUBDOMAIN_REQUIRED_ERROR = By.xpath("//label[contains(text(), 'Sub domain') and contains(text(), 'required')]")

    def __init__(self, actions: ElementActions):
        self.actions = actions
        self.address = AddressForm(actions)

    # ------------------------------------------------------------------
    # Flows
    # ------------------------------------------------------------------

    def wait_for_progress(self) -> bool:
        """Let the progress bar come and go; returns False if it never showed or stuck."""
        return wait_for_progress(self.actions)

    @allure.step("Open the new provider group form")
    def open_new_form(self) -> None:
        self.wait_for_progress()
        self.actions.click(self.NEW_PROVIDER_GROUP_BUTTON, description="New Provider Group button")
        self.select_manual_entry()

    def select_manual_entry(self) -> None:
        radio = self.actions.wait_for_present(self.MANUAL_ENTRY_RADIO, description="Manual entry radio")
        if radio.get_attribute("checked") is None:
            self.actions.click(radio, description="Manual entry radio")

    @allure.step("Fill provider group form")
    def fill_form(
        self,
        name: str = "",
        email: str = "",
        phone: str = "",
        npi: str = "",
        subdomain: str = "",
        address: Optional[AddressData] = None,
    ) -> None:
        """
        Fill the form fields. Empty strings are typed as well so required
        checks fire on a cleared field.
        """
        self.actions.type_text(self.NAME_INPUT, name, description="Name field")
        self.actions.type_text(self.EMAIL_INPUT, email, description="Email field")
        self.actions.type_text(self.PHONE_INPUT, phone, description="Phone field")
        self.actions.type_text(self.NPI_INPUT, npi, description="NPI field")
        self.actions.type_text(self.SUBDOMAIN_INPUT, subdomain, description="Subdomain field")
        if address is not None:
            self.address.fill(address)

    @allure.step("Submit provider group form")
    def submit(self) -> None:
        self.actions.click(self.SUBMIT_BUTTON, description="Submit button")
        self.wait_for_progress()

    @allure.step("Add provider group")
    def add_provider_group(self, data: ProviderGroupData) -> None:
        logger.info(f"Adding provider group '{data.name}' ({data.subdomain})")
        self.open_new_form()
        self.fill_form(
            name=data.name,
            email=data.email,
            phone=data.phone,
            npi=data.npi,
            subdomain=data.subdomain,
            address=data.address,
        )
        self.submit()

    @allure.step("Edit provider group name to {new_name}")
    def edit_provider_group_name(self, new_name: str) -> None:
        self.wait_for_progress()
        self.actions.click(self.EDIT_BUTTON, description="Edit button")
        self.actions.type_text(self.NAME_INPUT, new_name, description="Name field")
        self.submit()

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def get_success_message(self) -> str:
        return self.actions.get_text(self.SUCCESS_MESSAGE, description="Success message")

    def get_name_required_error(self) -> str:
        return self.actions.get_text(self.NAME_REQUIRED_ERROR, description="Name required error")

    def get_email_invalid_error(self) -> str:
        return self.actions.get_text(self.EMAIL_INVALID_ERROR, description="Email invalid error")

    def get_email_required_error(self) -> str:
        return self.actions.get_text(self.EMAIL_REQUIRED_ERROR, description="Email required error")

    def get_phone_invalid_error(self) -> str:
        return self.actions.get_text(self.PHONE_INVALID_ERROR, description="Phone invalid error")

    def get_phone_required_error(self) -> str:
        return self.actions.get_text(self.PHONE_REQUIRED_ERROR, description="Phone required error")

    def get_npi_invalid_error(self) -> str:
        return self.actions.get_text(self.NPI_INVALID_ERROR, description="NPI invalid error")

    def get_npi_required_error(self) -> str:
        return self.actions.get_text(self.NPI_REQUIRED_ERROR, description="NPI required error")

    def get_subdomain_invalid_error(self) -> str:
        return self.actions.get_text(self.SUBDOMAIN_INVALID_ERROR, description="Subdomain invalid error")

    def get_subdomain_required_error(self) -> str:
        return self.actions.get_text(self.SUBDOMAIN_REQUIRED_ERROR, description="Subdomain required error")

    def get_address_required_error(self) -> str:
        return self.address.get_line1_required_error()

    def get_field_error(self, field: str) -> str:
        """
        Error text for a field by key, as used in data-driven cases.

        Keys: name, email_invalid, email_required, phone_invalid,
        phone_required, npi_invalid, npi_required, subdomain_invalid,
        subdomain_required, address_required.
        """
        getter = getattr(self, f"get_{field}_error", None)
        if getter is None:
            getter = getattr(self, f"get_{field}_required_error", None)
        if getter is None:
            raise KeyError(f"No error getter for field '{field}'")
        return getter()


__all__ = ["ProviderGroupPage"]
