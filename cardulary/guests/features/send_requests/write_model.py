"""Delivery dispatcher: sends address requests (and reminders) to a batch of guests.

Each guest is handled on its own. Missing contact details, a refused transport
call or an unexpected error become one line in ``BatchResultDTO.errors`` and the
batch moves on. Guest status only changes after the provider accepted the
message, and always under the guest row lock.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardulary.config.database import async_session_manager
from cardulary.email_service.base import EmailServiceBase, TransportResult
from cardulary.errors import EventNotFoundError, NoValidGuestsError, TransportFailure
from cardulary.guests.dtos import BatchResultDTO, Channel
from cardulary.guests.repository.orm_models import Event, Guest
from cardulary.guests.state_machine import GuestStateMachine
from cardulary.guests.tokens import get_submission_url
from cardulary.sms_service.base import SmsServiceBase

logger = logging.getLogger(__name__)

FIRST_NAME_PLACEHOLDER = "{firstName}"
LINK_PLACEHOLDER = "[link]"


def personalize_message(template: str, first_name: str, channel: Channel, link: str) -> str:
    """Fill in the guest's first name, and for SMS the submission link.

    Email bodies carry the link as a button, so ``[link]`` is left for the
    template renderer to drop. An SMS without a ``[link]`` gets the link appended.
    """
    message = template.replace(FIRST_NAME_PLACEHOLDER, first_name)
    if channel == Channel.SMS:
        if LINK_PLACEHOLDER in message:
            message = message.replace(LINK_PLACEHOLDER, link)
        else:
            message = f"{message} {link}"
    return message


class DeliveryDispatcher(ABC):
    @abstractmethod
    async def dispatch(
        self,
        event_id: UUID,
        organizer_id: UUID,
        guest_ids: list[UUID],
        message_template: str,
        channel: Channel,
        organizer_name: str,
        reminder: bool = False,
    ) -> BatchResultDTO:
        """Send to every listed guest of the organizer's event.

        Raises:
            EventNotFoundError: the event does not exist or is not the organizer's
            NoValidGuestsError: none of ``guest_ids`` belongs to the event
        """
        raise NotImplementedError


class SqlDeliveryDispatcher(DeliveryDispatcher):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        email_service: EmailServiceBase,
        sms_service: SmsServiceBase,
        session_overwrite: AsyncSession | None = None,
    ) -> None:
        self.email_service = email_service
        self.sms_service = sms_service
        self.session_overwrite = session_overwrite

    async def dispatch(
        self,
        event_id: UUID,
        organizer_id: UUID,
        guest_ids: list[UUID],
        message_template: str,
        channel: Channel,
        organizer_name: str,
        reminder: bool = False,
    ) -> BatchResultDTO:
        event_name, resolved_ids = await self._resolve_batch(event_id, organizer_id, guest_ids)

        result = BatchResultDTO()
        for guest_id in resolved_ids:
            error = await self._dispatch_one(
                guest_id=guest_id,
                event_name=event_name,
                message_template=message_template,
                channel=channel,
                organizer_name=organizer_name,
                reminder=reminder,
            )
            if error is None:
                result.record_success()
            else:
                result.record_failure(error)

        action = "reminders" if reminder else "requests"
        logger.info(
            f"Dispatched {action} for event {event_id} via {channel.value}: "
            f"{result.success_count} sent, {result.failure_count} failed"
        )
        return result

    async def _resolve_batch(
        self, event_id: UUID, organizer_id: UUID, guest_ids: list[UUID]
    ) -> tuple[str, list[UUID]]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event_result = await session.execute(
                select(Event.name).where(Event.uuid == event_id, Event.organizer_id == organizer_id)
            )
            event_name = event_result.scalar_one_or_none()
            if event_name is None:
                raise EventNotFoundError()

            guest_result = await session.execute(
                select(Guest.uuid).where(Guest.event_id == event_id, Guest.uuid.in_(guest_ids))
            )
            known = set(guest_result.scalars().all())

        # input order, first occurrence wins
        resolved = [guest_id for guest_id in dict.fromkeys(guest_ids) if guest_id in known]
        if not resolved:
            raise NoValidGuestsError()
        return event_name, resolved

    async def _dispatch_one(
        self,
        guest_id: UUID,
        event_name: str,
        message_template: str,
        channel: Channel,
        organizer_name: str,
        reminder: bool,
    ) -> str | None:
        """Returns the error line for this guest, or None when it was sent."""
        guest_label = str(guest_id)
        try:
            async with self.async_session_manager(
                session_overwrite=self.session_overwrite
            ) as session:
                guest = await self._get_guest_for_update(session, guest_id)
                guest_label = guest.full_name
                state_machine = GuestStateMachine(guest)

                if channel == Channel.EMAIL and not guest.email:
                    return f"{guest_label}: No email address"
                if channel == Channel.SMS and not guest.phone:
                    return f"{guest_label}: No phone number"
                if reminder and not state_machine.can_send_reminder():
                    return f"{guest_label}: Not awaiting a response"

                link = get_submission_url(guest.token)
                message = personalize_message(message_template, guest.first_name, channel, link)

                try:
                    transport_result = await self._send(
                        guest, channel, message, link, organizer_name, event_name, reminder
                    )
                except TransportFailure:
                    failed = "Email failed" if channel == Channel.EMAIL else "SMS failed"
                    return f"{guest_label}: {failed}"

                metadata = {"provider": self._provider_name(channel)}
                if reminder:
                    metadata["reminder_number"] = (guest.reminder_count or 0) + 1
                    delivery_event = state_machine.reminder_sent(
                        channel, transport_result.provider_message_id, metadata
                    )
                else:
                    delivery_event = state_machine.send_accepted(
                        channel, transport_result.provider_message_id, metadata
                    )
                session.add(delivery_event)
                await session.flush()
                return None
        except Exception:
            logger.exception(f"Unexpected error sending to guest {guest_id}")
            return f"{guest_label}: Unexpected error"

    async def _send(
        self,
        guest: Guest,
        channel: Channel,
        message: str,
        link: str,
        organizer_name: str,
        event_name: str,
        reminder: bool,
    ) -> TransportResult:
        if channel == Channel.EMAIL:
            result = await self.email_service.send_address_request(
                to_address=guest.email,
                guest_first_name=guest.first_name,
                organizer_name=organizer_name,
                event_name=event_name,
                submission_link=link,
                custom_message=message,
                reminder=reminder,
            )
        else:
            result = await self.sms_service.send(to=guest.phone, body=message)

        if not result.success:
            logger.warning(f"{channel.value} transport failed for guest {guest.uuid}: {result.error}")
            raise TransportFailure(result.error)
        return result

    def _provider_name(self, channel: Channel) -> str:
        service = self.email_service if channel == Channel.EMAIL else self.sms_service
        return service.provider_name

    async def _get_guest_for_update(self, session, guest_id: UUID) -> Guest:
        result = await session.execute(
            select(Guest).where(Guest.uuid == guest_id).with_for_update()
        )
        return result.scalar_one()
