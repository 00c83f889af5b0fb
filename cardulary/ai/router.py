from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from cardulary.ai.personalizer import MessagePersonalizer, get_message_personalizer
from cardulary.auth import CurrentOrganizer, get_current_organizer
from cardulary.guests.dtos import Tone
from cardulary.guests.urls import PERSONALIZE_MESSAGE_URL, PERSONALIZE_REMINDER_URL

router = APIRouter()


class PersonalizeRequest(BaseModel):
    event_name: str = Field(min_length=1)
    guest_first_name: str = Field(min_length=1)
    event_type: str = "event"
    organizer_name: str | None = None
    relationship: str = "acquaintance"
    tone: Tone = Tone.WARM_CASUAL
    context: str | None = Field(default=None, max_length=500)


class ReminderRequest(BaseModel):
    original_message: str = Field(min_length=1)
    guest_first_name: str = Field(min_length=1)
    reminder_number: int = Field(default=1, ge=1)
    days_since_last_contact: int = Field(default=7, ge=0)


class MessageResponse(BaseModel):
    message: str


@router.post(PERSONALIZE_MESSAGE_URL, response_model=MessageResponse)
async def personalize_message(
    request: PersonalizeRequest,
    organizer: CurrentOrganizer = Depends(get_current_organizer),
    personalizer: MessagePersonalizer = Depends(get_message_personalizer),
) -> MessageResponse:
    """
    Draft an address request for one guest.

    The message contains a [link] placeholder. When generation is unavailable a
    fixed template is returned instead.
    """
    message = await personalizer.personalize(
        event_name=request.event_name,
        event_type=request.event_type,
        guest_first_name=request.guest_first_name,
        organizer_name=request.organizer_name or organizer.display_name,
        relationship=request.relationship,
        tone=request.tone,
        context=request.context,
    )
    return MessageResponse(message=message)


@router.post(PERSONALIZE_REMINDER_URL, response_model=MessageResponse)
async def personalize_reminder(
    request: ReminderRequest,
    organizer: CurrentOrganizer = Depends(get_current_organizer),
    personalizer: MessagePersonalizer = Depends(get_message_personalizer),
) -> MessageResponse:
    """Draft a follow-up that reads differently from the original request."""
    message = await personalizer.reminder_message(
        original_message=request.original_message,
        reminder_number=request.reminder_number,
        days_since_last_contact=request.days_since_last_contact,
        guest_first_name=request.guest_first_name,
    )
    return MessageResponse(message=message)
