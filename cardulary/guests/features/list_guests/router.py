from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from cardulary.auth import CurrentOrganizer, get_current_organizer
from cardulary.errors import EventNotFoundError
from cardulary.guests.features.create_guest.dtos import GuestResponse
from cardulary.guests.repository.read_models import EventReadModel, SqlEventReadModel
from cardulary.guests.urls import EVENT_GUESTS_URL

router = APIRouter()


def get_guest_list_read_model() -> EventReadModel:
    """Dependency to get event read model instance."""
    return SqlEventReadModel()


@router.get(EVENT_GUESTS_URL, response_model=list[GuestResponse])
async def list_guests(
    event_id: UUID,
    organizer: CurrentOrganizer = Depends(get_current_organizer),
    read_model: EventReadModel = Depends(get_guest_list_read_model),
) -> list[GuestResponse]:
    """List an event's guests, newest first, with their submission links."""
    guests = await read_model.list_guests(event_id, organizer.id)
    if guests is None:
        raise HTTPException(status_code=404, detail=EventNotFoundError.public_message)
    return [GuestResponse.from_dto(guest) for guest in guests]
