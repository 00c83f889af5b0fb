from fastapi import APIRouter, Depends

from cardulary.auth import CurrentOrganizer, get_current_organizer
from cardulary.guests.features.create_event.dtos import EventResponse
from cardulary.guests.repository.read_models import EventReadModel, SqlEventReadModel
from cardulary.guests.urls import EVENTS_URL

router = APIRouter()


def get_event_read_model() -> EventReadModel:
    """Dependency to get event read model instance."""
    return SqlEventReadModel()


@router.get(EVENTS_URL, response_model=list[EventResponse])
async def list_events(
    organizer: CurrentOrganizer = Depends(get_current_organizer),
    read_model: EventReadModel = Depends(get_event_read_model),
) -> list[EventResponse]:
    """List the organizer's events, newest first."""
    events = await read_model.list_events(organizer.id)
    return [EventResponse.from_dto(event) for event in events]
