"""
================================================================================
Portal Messages
================================================================================

Exact user-facing texts shown by the portal. Tests compare against these with
string equality.

================================================================================
"""


class ProviderGroupMessages:
    ADDED = "Provider group added successfully!"
    UPDATED = "Provider group updated successfully!"
    NAME_REQUIRED = "Name is required"
    EMAIL_INVALID = "Invalid email address"
    EMAIL_REQUIRED = "Email is required"
    PHONE_INVALID = "Invalid phone number. It must be 10 digits."
    PHONE_REQUIRED = "Phone is required"
    NPI_INVALID = "Must be 10 digits"
    NPI_REQUIRED = "NPI is required"
    ADDRESS_REQUIRED = "Line 1 is required"
    SUBDOMAIN_INVALID = (
        "Subdomain must only contain lowercase letters, numbers, and hyphens, "
        "and must not start or end with a hyphen."
    )
    SUBDOMAIN_REQUIRED = "Sub domain field is required"


class StaffMessages:
    FIRST_NAME_REQUIRED = "First Name is required"
    LAST_NAME_REQUIRED = "Last Name is required"
    EMAIL_REQUIRED = "Email is required"
    PHONE_INVALID = "Invalid phone number. It must be 10 digits."
    PHONE_REQUIRED = "Phone is required"


class LocationMessages:
    ADDED = "Location added successfully!"
    NAME_REQUIRED = "Name is mandatory"
    PHONE_INVALID = (
        "Invalid phone number. Please use +91, +1, or +61 followed by 10 to 11 digits, allowing hyphens."
    )
    EMAIL_REQUIRED = "Email id is mandatory"
    EMAIL_INVALID = "Invalid email format"
    ZIP_CODE_REQUIRED = "Zip code is required"


class LoginMessages:
    EMAIL_INVALID = "Invalid email address"
    PASSWORD_INVALID = (
        "Password must be 8+ characters, with at least one uppercase, one lowercase, "
        "one number, and one special character. No spaces."
    )
    PROVIDER_GROUPS_HEADING = "Provider Groups"


class NurseMessages:
    ADDED = "Nurse added successfully!"
    FIRST_NAME_REQUIRED = "First Name is required"
    LAST_NAME_REQUIRED = "Last Name is required"
    EMAIL_INVALID = "Invalid email format"
    PHONE_INVALID = "Invalid phone number. It must be 10 digits."
