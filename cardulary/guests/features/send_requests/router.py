from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from cardulary.auth import CurrentOrganizer, get_current_organizer
from cardulary.email_service import get_email_service
from cardulary.errors import EventNotFoundError, NoValidGuestsError
from cardulary.guests.features.send_requests.dtos import SendRequestsRequest, SendRequestsResponse
from cardulary.guests.features.send_requests.write_model import (
    DeliveryDispatcher,
    SqlDeliveryDispatcher,
)
from cardulary.guests.urls import SEND_REMINDERS_URL, SEND_REQUESTS_URL
from cardulary.sms_service import get_sms_service

router = APIRouter()


def get_delivery_dispatcher() -> DeliveryDispatcher:
    """Dependency to get delivery dispatcher instance."""
    return SqlDeliveryDispatcher(
        email_service=get_email_service(),
        sms_service=get_sms_service(),
    )


async def _dispatch(
    event_id: UUID,
    request: SendRequestsRequest,
    organizer: CurrentOrganizer,
    dispatcher: DeliveryDispatcher,
    reminder: bool,
) -> SendRequestsResponse:
    try:
        batch = await dispatcher.dispatch(
            event_id=event_id,
            organizer_id=organizer.id,
            guest_ids=request.guest_ids,
            message_template=request.message,
            channel=request.channel,
            organizer_name=organizer.display_name,
            reminder=reminder,
        )
    except (EventNotFoundError, NoValidGuestsError) as e:
        raise HTTPException(status_code=404, detail=e.message)
    return SendRequestsResponse.from_batch(batch, noun="reminders" if reminder else "requests")


@router.post(SEND_REQUESTS_URL, response_model=SendRequestsResponse)
async def send_requests(
    event_id: UUID,
    request: SendRequestsRequest,
    organizer: CurrentOrganizer = Depends(get_current_organizer),
    dispatcher: DeliveryDispatcher = Depends(get_delivery_dispatcher),
) -> SendRequestsResponse:
    """
    Send address requests to the selected guests.

    Each guest succeeds or fails on its own; failures are listed in results.errors.
    """
    return await _dispatch(event_id, request, organizer, dispatcher, reminder=False)


@router.post(SEND_REMINDERS_URL, response_model=SendRequestsResponse)
async def send_reminders(
    event_id: UUID,
    request: SendRequestsRequest,
    organizer: CurrentOrganizer = Depends(get_current_organizer),
    dispatcher: DeliveryDispatcher = Depends(get_delivery_dispatcher),
) -> SendRequestsResponse:
    """
    Send reminders to guests who have not responded yet.

    Only pending guests are reminded; anyone else is reported as not awaiting a response.
    """
    return await _dispatch(event_id, request, organizer, dispatcher, reminder=True)
