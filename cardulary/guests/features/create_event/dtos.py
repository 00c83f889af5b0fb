"""DTOs for event creation and listing."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from cardulary.guests.dtos import EventCategory, EventDTO


class CreateEventRequest(BaseModel):
    """Request body for creating an event."""

    name: str = Field(min_length=1, max_length=200)
    category: EventCategory | None = None
    event_date: date | None = None
    custom_message: str | None = Field(default=None, max_length=1000)


class EventResponse(BaseModel):
    id: UUID
    name: str
    category: EventCategory | None = None
    event_date: date | None = None
    custom_message: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_dto(cls, event: EventDTO) -> "EventResponse":
        return cls(
            id=event.id,
            name=event.name,
            category=event.category,
            event_date=event.event_date,
            custom_message=event.custom_message,
            created_at=event.created_at,
        )
