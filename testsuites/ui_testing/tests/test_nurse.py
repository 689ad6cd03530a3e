"""
================================================================================
Nurse UI Tests
================================================================================

Adding a nurse from Settings -> Admin Users, license expiry picked in the
calendar widget.

================================================================================
"""

import allure
import pytest

from testsuites.ui_testing.pages.messages import NurseMessages
from testsuites.ui_testing.pages.nurse_page import NursePage


@allure.epic("UI Testing")
@allure.feature("Nurses")
@pytest.mark.nurse
class TestNurse:
    """Nurse add suite."""

    @allure.story("Add Nurse")
    @allure.title("A nurse with a future license expiry is added")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    @pytest.mark.e2e
    def test_add_nurse(self, logged_in, nurse_page: NursePage, data_generator, portal_config):
        nurse = data_generator.nurse(
            gender=portal_config.default_gender,
            state=portal_config.default_state,
            license_valid_days=portal_config.license_valid_days,
        )

        with allure.step("Add nurse"):
            nurse_page.add_nurse(nurse)

        with allure.step("Verify success message"):
            assert nurse_page.get_success_message() == NurseMessages.ADDED

    @allure.story("Form Validation")
    @allure.title("Malformed email and phone are rejected")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    def test_invalid_email_and_phone(self, logged_in, nurse_page: NursePage):
        nurse_page.open_add_nurse()
        nurse_page.actions.type_text(NursePage.EMAIL_INPUT, "not-an-email", description="Email field")
        nurse_page.actions.type_text(NursePage.PHONE_INPUT, "12345", description="Phone field")
        nurse_page.save()

        assert nurse_page.get_email_error() == NurseMessages.EMAIL_INVALID
        assert nurse_page.get_phone_error() == NurseMessages.PHONE_INVALID
