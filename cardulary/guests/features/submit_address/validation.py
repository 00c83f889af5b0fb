"""Address normalization for the public submission form.

Fields are checked in form order and the first failure wins, so the guest sees
one actionable message at a time.
"""

import re
from dataclasses import dataclass

from cardulary.errors import ValidationError
from cardulary.guests.dtos import AddressDTO

ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$", re.ASCII)
STATE_PATTERN = re.compile(r"^[A-Z]{2}$")
# C0 controls and DEL; spreadsheets and printer uploads reject them
CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]+")
REPEATED_SPACES = re.compile(r" {2,}")
DEFAULT_COUNTRY = "US"


@dataclass(frozen=True)
class RawAddress:
    """Address exactly as posted; every field may be missing."""

    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None


def _clean(value: str | None) -> str:
    if value is None:
        return ""
    value = CONTROL_CHARACTERS.sub(" ", value)
    return REPEATED_SPACES.sub(" ", value).strip()


def validate_address(raw: RawAddress) -> AddressDTO:
    line1 = _clean(raw.address_line1)
    if not line1:
        raise ValidationError("address_line1", "Street address is required")
    if len(line1) > 200:
        raise ValidationError(
            "address_line1", "Street address must be between 1 and 200 characters"
        )

    line2 = _clean(raw.address_line2) or None
    if line2 and len(line2) > 200:
        raise ValidationError("address_line2", "Address line 2 is too long")

    city = _clean(raw.city)
    if not city:
        raise ValidationError("city", "City is required")
    if len(city) > 100:
        raise ValidationError("city", "City must be between 1 and 100 characters")

    state = _clean(raw.state)
    if not state:
        raise ValidationError("state", "State is required")
    # "ß".upper() is "SS", so only ASCII input may be uppercased
    state = state.upper() if state.isascii() else state
    if not STATE_PATTERN.match(state):
        raise ValidationError("state", "State must be a valid 2-letter code")

    zip_code = _clean(raw.zip)
    if not zip_code:
        raise ValidationError("zip", "ZIP code is required")
    if not ZIP_PATTERN.match(zip_code):
        raise ValidationError("zip", "ZIP code must be in format 12345 or 12345-6789")

    country = _clean(raw.country) or DEFAULT_COUNTRY
    if len(country) > 50:
        raise ValidationError("country", "Country name is too long")

    return AddressDTO(
        address_line1=line1,
        address_line2=line2,
        city=city,
        state=state,
        zip=zip_code,
        country=country,
    )
