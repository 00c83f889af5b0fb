from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from cardulary.auth import CurrentOrganizer, get_current_organizer
from cardulary.errors import EventNotFoundError, ValidationError
from cardulary.guests.features.create_guest.dtos import CreateGuestRequest, GuestResponse
from cardulary.guests.features.create_guest.write_model import (
    GuestCreateWriteModel,
    SqlGuestCreateWriteModel,
)
from cardulary.guests.urls import EVENT_GUESTS_URL

router = APIRouter()


def get_guest_create_write_model() -> GuestCreateWriteModel:
    """Dependency to get guest creation write model instance."""
    return SqlGuestCreateWriteModel()


@router.post(EVENT_GUESTS_URL, response_model=GuestResponse, status_code=201)
async def create_guest(
    event_id: UUID,
    request: CreateGuestRequest,
    organizer: CurrentOrganizer = Depends(get_current_organizer),
    write_model: GuestCreateWriteModel = Depends(get_guest_create_write_model),
) -> GuestResponse:
    """
    Add a guest to an event.

    The guest starts as not_sent and gets a unique submission link.
    """
    try:
        guest = await write_model.create_guest(
            event_id=event_id,
            organizer_id=organizer.id,
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            phone=request.phone,
        )
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return GuestResponse.from_dto(guest)
