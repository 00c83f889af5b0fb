"""Guest status transitions.

- not_sent -> pending: request accepted by the transport
- pending -> pending: reminder sent, or request re-sent
- bounced -> pending: organizer re-sends after a bounce
- pending -> bounced: provider reports a delivery failure
- any -> completed: guest submits an address (completed -> completed on edits)

``bounced`` is only entered on a delivery failure reported by the provider
after it accepted the message. A send that the provider refuses outright
leaves the guest where it was; the dispatcher reports it in the batch result.

The machine mutates the ``Guest`` row it is given and returns the
``DeliveryEvent`` rows to persist. Callers hold the guest row lock
(``SELECT ... FOR UPDATE``) for the duration of a transition.
"""

from collections.abc import Callable
from datetime import UTC, datetime

from cardulary.errors import InvalidTransitionError
from cardulary.guests.dtos import Channel, DeliveryEventType, GuestStatus
from cardulary.guests.repository.orm_models import DeliveryEvent, Guest

SEND_FROM = {
    GuestStatus.NOT_SENT,
    GuestStatus.PENDING,
    GuestStatus.BOUNCED,
    GuestStatus.COMPLETED,
}
REMIND_FROM = {GuestStatus.PENDING}
FAILURE_EVENT_TYPES = {DeliveryEventType.BOUNCED, DeliveryEventType.FAILED}
TRACKING_EVENT_TYPES = {
    DeliveryEventType.DELIVERED,
    DeliveryEventType.OPENED,
    DeliveryEventType.CLICKED,
}


def utc_now() -> datetime:
    return datetime.now(UTC)


class GuestStateMachine:
    def __init__(self, guest: Guest, clock: Callable[[], datetime] = utc_now) -> None:
        self.guest = guest
        self._clock = clock

    @property
    def status(self) -> GuestStatus:
        return GuestStatus(self.guest.status)

    def can_send_reminder(self) -> bool:
        return self.status in REMIND_FROM

    def send_accepted(
        self,
        channel: Channel,
        provider_message_id: str | None = None,
        metadata: dict | None = None,
    ) -> DeliveryEvent:
        """The transport took the request. A completed guest keeps its status."""
        if self.status not in SEND_FROM:
            raise InvalidTransitionError(self.status.value, "send a request")

        now = self._clock()
        if self.status != GuestStatus.COMPLETED:
            self.guest.status = GuestStatus.PENDING
        self.guest.request_sent_at = now
        self.guest.request_method = channel
        return self._delivery_event(
            DeliveryEventType.SENT, channel, now, provider_message_id, metadata
        )

    def reminder_sent(
        self,
        channel: Channel,
        provider_message_id: str | None = None,
        metadata: dict | None = None,
    ) -> DeliveryEvent:
        if not self.can_send_reminder():
            raise InvalidTransitionError(self.status.value, "send a reminder")

        now = self._clock()
        self.guest.reminder_count = (self.guest.reminder_count or 0) + 1
        self.guest.last_reminder_sent_at = now
        return self._delivery_event(
            DeliveryEventType.SENT, channel, now, provider_message_id, metadata
        )

    def delivery_failed(
        self,
        channel: Channel,
        event_type: DeliveryEventType = DeliveryEventType.BOUNCED,
        provider_message_id: str | None = None,
        metadata: dict | None = None,
    ) -> DeliveryEvent:
        """Provider-reported failure after acceptance. Only pending guests bounce."""
        if event_type not in FAILURE_EVENT_TYPES:
            raise ValueError(f"{event_type.value} is not a delivery failure")

        if self.status == GuestStatus.PENDING:
            self.guest.status = GuestStatus.BOUNCED
        return self._delivery_event(
            event_type, channel, self._clock(), provider_message_id, metadata
        )

    def delivery_reported(
        self,
        channel: Channel,
        event_type: DeliveryEventType,
        provider_message_id: str | None = None,
        metadata: dict | None = None,
    ) -> DeliveryEvent:
        if event_type not in TRACKING_EVENT_TYPES:
            raise ValueError(f"{event_type.value} is not a tracking event")
        return self._delivery_event(
            event_type, channel, self._clock(), provider_message_id, metadata
        )

    def address_submitted(self) -> None:
        self.guest.status = GuestStatus.COMPLETED
        self.guest.submitted_at = self._clock()

    def _delivery_event(
        self,
        event_type: DeliveryEventType,
        channel: Channel,
        occurred_at: datetime,
        provider_message_id: str | None,
        metadata: dict | None,
    ) -> DeliveryEvent:
        return DeliveryEvent(
            guest_id=self.guest.uuid,
            event_type=event_type,
            channel=channel,
            provider_message_id=provider_message_id,
            provider_metadata=metadata,
            occurred_at=occurred_at,
        )
