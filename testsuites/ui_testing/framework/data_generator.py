"""
================================================================================
Test Data Generator
================================================================================

Random but valid-looking data for portal forms.

Features:
- Reproducible output with an optional seed
- Provider group payloads (name, email, phone, NPI, subdomain, address)
- Staff, location and nurse payloads, nurse license expiry included
- Values shaped to pass the portal's field validation

================================================================================
"""

import random
import string
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Optional
from uuid import uuid4


FIRST_NAMES = ["Ava", "Liam", "Maya", "Noah", "Priya", "Omar", "Elena", "Jonah", "Sofia", "Ravi"]
LAST_NAMES = ["Patel", "Nguyen", "Garcia", "Smith", "Khan", "Lopez", "Brown", "Chen", "Walker", "Reed"]
COMPANY_WORDS = ["Acme", "Summit", "Harbor", "Cedar", "Beacon", "Riverside", "Northstar", "Evergreen"]
COMPANY_SUFFIXES = ["Health", "Medical Group", "Care Partners", "Clinic", "Health Network"]
STREET_NAMES = ["Maple", "Oak", "Pine", "Elm", "Cactus", "Mesa", "Sunset", "Canyon"]
STREET_TYPES = ["St", "Ave", "Blvd", "Rd", "Dr"]
CITIES = ["Phoenix", "Tucson", "Mesa", "Chandler", "Scottsdale", "Tempe", "Flagstaff"]


@dataclass
class AddressData:
    """Postal address as entered in the address sub-form."""
    line1: str
    line2: str
    city: str
    state: str
    zip_code: str


@dataclass
class ProviderGroupData:
    """Form payload for a new provider group."""
    name: str
    email: str
    phone: str
    npi: str
    subdomain: str
    address: AddressData
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "npi": self.npi,
            "subdomain": self.subdomain,
            "address_line1": self.address.line1,
            "address_line2": self.address.line2,
            "city": self.address.city,
            "state": self.address.state,
            "zip_code": self.address.zip_code,
        }


@dataclass
class StaffData:
    """Form payload for a provider group staff member."""
    first_name: str
    last_name: str
    email: str
    phone: str
    role: str
    gender: str
    address: AddressData

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class LocationData:
    """Form payload for a provider group location."""
    name: str
    phone: str
    email: str
    address: AddressData


@dataclass
class NurseData:
    """Form payload for a nurse, license details included."""
    first_name: str
    last_name: str
    email: str
    phone: str
    npi: str
    gender: str
    license_number: str
    license_state: str
    license_expiry: date
    address: AddressData


class TestDataGenerator:
    """
    Generator for portal test data.

    Example:
        generator = TestDataGenerator(seed=42)
        group = generator.provider_group(state="Arizona")
    """

    __test__ = False

    # Prefix for generated names so leftovers are easy to find
    PREFIX = "autotest"

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize generator with optional random seed.

        Args:
            seed: Random seed for reproducible data generation
        """
        self._random = random.Random(seed)

    def _digits(self, length: int) -> str:
        return "".join(self._random.choice(string.digits) for _ in range(length))

    def _random_string(self, length: int = 8) -> str:
        chars = string.ascii_lowercase + string.digits
        return "".join(self._random.choice(chars) for _ in range(length))

    def first_name(self) -> str:
        return self._random.choice(FIRST_NAMES)

    def last_name(self) -> str:
        return self._random.choice(LAST_NAMES)

    def company_name(self) -> str:
        return (
            f"{self._random.choice(COMPANY_WORDS)} {self._random.choice(COMPANY_SUFFIXES)} "
            f"{self._random_string(4).upper()}"
        )

    def email(self, prefix: Optional[str] = None) -> str:
        local = prefix or f"{self.PREFIX}.{self._random_string(8)}"
        return f"{local}@test.example.com"

    def phone_number(self) -> str:
        """Ten digits, not starting with 0 or 1."""
        return self._random.choice("23456789") + self._digits(9)

    def npi(self) -> str:
        """Ten-digit NPI number."""
        return self._random.choice("12") + self._digits(9)

    def subdomain(self) -> str:
        """Lowercase letters, digits and inner hyphens only."""
        return f"{self.PREFIX}-{self._random_string(6)}"

    def zip_code(self) -> str:
        return self._digits(5)

    def address(self, state: str = "Arizona") -> AddressData:
        return AddressData(
            line1=f"{self._random.randint(100, 9999)} {self._random.choice(STREET_NAMES)} {self._random.choice(STREET_TYPES)}",
            line2=f"Suite {self._random.randint(1, 500)}",
            city=self._random.choice(CITIES),
            state=state,
            zip_code=self.zip_code(),
        )

    def provider_group(self, state: str = "Arizona") -> ProviderGroupData:
        return ProviderGroupData(
            name=self.company_name(),
            email=self.email(),
            phone=self.phone_number(),
            npi=self.npi(),
            subdomain=self.subdomain(),
            address=self.address(state),
        )

    def staff(self, role: str = "Admin", gender: str = "Male", state: str = "Arizona") -> StaffData:
        return StaffData(
            first_name=self.first_name(),
            last_name=self.last_name(),
            email=self.email(f"staff.{self._random_string(8)}"),
            phone=self.phone_number(),
            role=role,
            gender=gender,
            address=self.address(state),
        )

    def location(self, state: str = "Arizona") -> LocationData:
        return LocationData(
            name=self.company_name(),
            phone=self.phone_number(),
            email=self.email(),
            address=self.address(state),
        )

    def nurse(self, gender: str = "Male", state: str = "Arizona", license_valid_days: int = 30) -> NurseData:
        """Nurse whose license expires `license_valid_days` from today."""
        return NurseData(
            first_name=self.first_name(),
            last_name=self.last_name(),
            email=self.email(f"nurse.{self._random_string(8)}"),
            phone=self.phone_number(),
            npi=self.npi(),
            gender=gender,
            license_number=self._digits(10),
            license_state=state,
            license_expiry=date.today() + timedelta(days=license_valid_days),
            address=self.address(state),
        )

    @staticmethod
    def unique_suffix() -> str:
        return uuid4().hex[:8]


__all__ = [
    "AddressData",
    "LocationData",
    "NurseData",
    "ProviderGroupData",
    "StaffData",
    "TestDataGenerator",
]
