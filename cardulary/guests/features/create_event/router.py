from fastapi import APIRouter, Depends, HTTPException

from cardulary.auth import CurrentOrganizer, get_current_organizer
from cardulary.errors import UnauthorizedError, ValidationError
from cardulary.guests.features.create_event.dtos import CreateEventRequest, EventResponse
from cardulary.guests.features.create_event.write_model import (
    EventCreateWriteModel,
    SqlEventCreateWriteModel,
)
from cardulary.guests.urls import EVENTS_URL

router = APIRouter()


def get_event_create_write_model() -> EventCreateWriteModel:
    """Dependency to get event creation write model instance."""
    return SqlEventCreateWriteModel()


@router.post(EVENTS_URL, response_model=EventResponse, status_code=201)
async def create_event(
    request: CreateEventRequest,
    organizer: CurrentOrganizer = Depends(get_current_organizer),
    write_model: EventCreateWriteModel = Depends(get_event_create_write_model),
) -> EventResponse:
    """Create an event for the signed-in organizer."""
    try:
        event = await write_model.create_event(
            organizer_id=organizer.id,
            name=request.name,
            category=request.category,
            event_date=request.event_date,
            custom_message=request.custom_message,
            organizer_email=organizer.email,
            organizer_name=organizer.name,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except UnauthorizedError as e:
        raise HTTPException(status_code=401, detail=e.message)
    return EventResponse.from_dto(event)
