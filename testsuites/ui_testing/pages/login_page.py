"""
================================================================================
Super Admin Login Page Object
================================================================================

Locators and flows of the super-admin login screen.

Page objects hold their own locators as data and act through an
ElementActions collaborator; they inherit no behaviour.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger

from testsuites.ui_testing.framework.element_actions import ElementActions
from testsuites.ui_testing.framework.locators import By


class LoginPage:
    """Super-admin login page."""

    EMAIL_INPUT = By.xpath("//input[@placeholder='Enter Your Email']")
    PASSWORD_INPUT = By.xpath("//input[@placeholder='Enter your Password']")
    LOGIN_BUTTON = By.xpath("//button[text()='Login']")
    PROVIDER_GROUPS_HEADING = By.xpath(
        "//span[contains(@class, 'MuiTypography-bodySmall') and normalize-space()='Provider Groups']"
    )
    INVALID_EMAIL_ERROR = By.xpath("//span[text()='Invalid email address']")
    INVALID_PASSWORD_ERROR = By.xpath("//span[contains(text(),'Password must be 8+ characters, with at least one ')]")
    PROFILE_ICON = By.xpath("//div[contains(@class,'MuiAvatar-root')]//*[name()='svg']")
    LOGOUT_MENU_ITEM = By.xpath("//p[text()='Logout']")
    CONFIRM_LOGOUT_BUTTON = By.xpath("//p[text()='Yes']")

    def __init__(self, actions: ElementActions):
        self.actions = actions

    @allure.step("Enter email")
    def enter_email(self, email: str) -> None:
        self.actions.type_text(self.EMAIL_INPUT, email, description="Email field")

    @allure.step("Enter password")
    def enter_password(self, password: str) -> None:
        self.actions.type_text(self.PASSWORD_INPUT, password, description="Password field")

    @allure.step("Click Login")
    def click_login(self) -> None:
        self.actions.click(self.LOGIN_BUTTON, description="Login button")

    @allure.step("Login (email={email})")
    def login(self, email: str, password: str) -> None:
        """
        Submit the login form.

        Args:
            email: Super-admin email
            password: Super-admin password
        """
        self.enter_email(email)
        self.enter_password(password)
        self.click_login()

    def get_provider_groups_text(self) -> str:
        """Heading shown on the landing page after a successful login."""
        return self.actions.get_text(self.PROVIDER_GROUPS_HEADING, description="Provider Groups heading")

    def get_invalid_email_error(self) -> str:
        return self.actions.get_text(self.INVALID_EMAIL_ERROR, description="Invalid email error")

    def get_invalid_password_error(self) -> str:
        return self.actions.get_text(self.INVALID_PASSWORD_ERROR, description="Invalid password error")

    def is_logged_in(self, timeout: Optional[float] = None) -> bool:
        return self.actions.is_displayed(self.PROVIDER_GROUPS_HEADING, timeout, description="Provider Groups heading")

    @allure.step("Log out")
    def logout(self) -> None:
        """Profile menu, Logout, then confirm."""
        self.actions.click(self.PROFILE_ICON, description="Profile icon")
        self.actions.click(self.LOGOUT_MENU_ITEM, description="Logout menu item")
        self.actions.click(self.CONFIRM_LOGOUT_BUTTON, description="Confirm logout")
        logger.info("Logged out")

    def is_logged_out(self, timeout: Optional[float] = None) -> bool:
        return self.actions.is_displayed(self.LOGIN_BUTTON, timeout, description="Login button")


@allure.step("Log in as super admin")
def login_as_super_admin(actions: ElementActions) -> LoginPage:
    """
    Log in with the configured super-admin credentials.

    Raises:
        ValueError: Credentials are missing from configuration
    """
    credentials = actions.session.config.credentials
    if not credentials["email"] or not credentials["password"]:
        raise ValueError("Super-admin credentials are not configured (credentials.email / credentials.password)")

    logger.info("Logging in as Super Admin")
    page = LoginPage(actions)
    page.login(credentials["email"], credentials["password"])
    logger.info("Successfully logged in as Super Admin")
    return page


__all__ = ["LoginPage", "login_as_super_admin"]
