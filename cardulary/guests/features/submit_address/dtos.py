"""DTOs for the public address submission feature."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from cardulary.guests.dtos import AddressDTO, GuestStatus, SubmissionDTO


class SubmitAddressRequest(BaseModel):
    """Request body posted by the submission form.

    Fields are optional here so that missing values reach the validator and get
    its field-specific message instead of a generic 422.
    """

    token: str
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None


class AddressResponse(BaseModel):
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    zip: str
    country: str

    @classmethod
    def from_dto(cls, address: AddressDTO) -> "AddressResponse":
        return cls(
            address_line1=address.address_line1,
            address_line2=address.address_line2,
            city=address.city,
            state=address.state,
            zip=address.zip,
            country=address.country,
        )


class SubmissionResponse(AddressResponse):
    id: UUID
    submitted_at: datetime

    @classmethod
    def from_submission(cls, submission: SubmissionDTO) -> "SubmissionResponse":
        return cls(
            id=submission.id,
            submitted_at=submission.submitted_at,
            **AddressResponse.from_dto(submission.address).model_dump(),
        )


class SubmitAddressResponse(BaseModel):
    message: str
    submission: SubmissionResponse


class SubmissionInfoResponse(BaseModel):
    guest_first_name: str
    event_name: str
    status: GuestStatus
    custom_message: str | None = None
    current_address: AddressResponse | None = None
