"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for provider portal pages.

Each page class holds:
    - Element locators as class attributes
    - Page-specific flows built on ElementActions
    - Getters for messages the tests verify

Author: Automation Team
License: MIT
================================================================================
"""

from .address_form import AddressForm
from .location_page import LocationPage
from .login_page import LoginPage, login_as_super_admin
from .messages import LocationMessages, LoginMessages, NurseMessages, ProviderGroupMessages, StaffMessages
from .nurse_page import NursePage
from .provider_group_page import ProviderGroupPage
from .staff_page import StaffPage

__all__ = [
    "AddressForm",
    "LocationMessages",
    "LocationPage",
    "LoginMessages",
    "LoginPage",
    "NurseMessages",
    "NursePage",
    "ProviderGroupMessages",
    "ProviderGroupPage",
    "StaffMessages",
    "StaffPage",
    "login_as_super_admin",
]
