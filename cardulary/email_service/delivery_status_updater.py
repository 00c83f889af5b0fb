import logging
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardulary.config.database import async_session_manager
from cardulary.guests.dtos import Channel, DeliveryEventType
from cardulary.guests.repository.orm_models import DeliveryEvent, Guest
from cardulary.guests.state_machine import FAILURE_EVENT_TYPES, GuestStateMachine

logger = logging.getLogger(__name__)

# email.sent and email.delivery_delayed carry nothing the send did not already record
RESEND_EVENT_TYPES = {
    "email.delivered": DeliveryEventType.DELIVERED,
    "email.opened": DeliveryEventType.OPENED,
    "email.clicked": DeliveryEventType.CLICKED,
    "email.bounced": DeliveryEventType.BOUNCED,
    "email.complained": DeliveryEventType.FAILED,
}


class DeliveryStatusUpdater(ABC):
    """Abstract base class for recording provider delivery reports."""

    @abstractmethod
    async def update_status(
        self,
        provider_message_id: str,
        event_type: str,
        event_data: dict,
    ) -> bool:
        """
        Record a provider webhook event against the guest it was sent to.

        Args:
            provider_message_id: Resend's email id from the original send
            event_type: Webhook event type (email.delivered, email.bounced, etc.)
            event_data: Full ``data`` payload of the event

        Returns:
            True if a delivery event was recorded, False if the event type is not
            tracked or no send with that id exists
        """
        pass


class SqlDeliveryStatusUpdater(DeliveryStatusUpdater):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def update_status(
        self,
        provider_message_id: str,
        event_type: str,
        event_data: dict,
    ) -> bool:
        delivery_event_type = RESEND_EVENT_TYPES.get(event_type)
        if delivery_event_type is None:
            return False

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(DeliveryEvent.guest_id)
                .where(DeliveryEvent.provider_message_id == provider_message_id)
                .limit(1)
            )
            guest_id = result.scalar_one_or_none()
            if guest_id is None:
                logger.info(f"No send found for provider message {provider_message_id}")
                return False

            guest_result = await session.execute(
                select(Guest).where(Guest.uuid == guest_id).with_for_update()
            )
            state_machine = GuestStateMachine(guest_result.scalar_one())

            metadata = {"provider": "resend", "webhook_event": event_type}
            if delivery_event_type in FAILURE_EVENT_TYPES:
                bounce = event_data.get("bounce") or {}
                reason = bounce.get("message") or event_data.get("reason")
                if reason:
                    metadata["reason"] = reason
                delivery_event = state_machine.delivery_failed(
                    Channel.EMAIL, delivery_event_type, provider_message_id, metadata
                )
            else:
                delivery_event = state_machine.delivery_reported(
                    Channel.EMAIL, delivery_event_type, provider_message_id, metadata
                )
            session.add(delivery_event)
            await session.flush()

        logger.info(f"Recorded {event_type} for guest {guest_id}")
        return True
