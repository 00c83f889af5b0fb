"""DTOs for guest creation and listing."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr

from cardulary.guests.dtos import Channel, GuestDTO, GuestStatus


class CreateGuestRequest(BaseModel):
    """Request body for adding a guest. Email or phone is required."""

    first_name: str | None = None
    last_name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None


class GuestResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    status: GuestStatus
    submission_link: str
    request_method: Channel | None = None
    request_sent_at: datetime | None = None
    reminder_count: int = 0
    last_reminder_sent_at: datetime | None = None
    submitted_at: datetime | None = None

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "GuestResponse":
        return cls(
            id=guest.id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            email=guest.email,
            phone=guest.phone,
            status=guest.status,
            submission_link=guest.submission_link,
            request_method=guest.request_method,
            request_sent_at=guest.request_sent_at,
            reminder_count=guest.reminder_count,
            last_reminder_sent_at=guest.last_reminder_sent_at,
            submitted_at=guest.submitted_at,
        )
