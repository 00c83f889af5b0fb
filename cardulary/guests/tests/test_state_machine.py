from datetime import UTC, datetime
from uuid import uuid4

import pytest

from cardulary.errors import InvalidTransitionError
from cardulary.guests.dtos import Channel, DeliveryEventType, GuestStatus
from cardulary.guests.repository.orm_models import Guest
from cardulary.guests.state_machine import GuestStateMachine

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)


def make_guest(status: GuestStatus = GuestStatus.NOT_SENT) -> Guest:
    return Guest(
        uuid=uuid4(),
        event_id=uuid4(),
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        token="t" * 64,
        status=status,
        reminder_count=0,
    )


def machine(guest: Guest) -> GuestStateMachine:
    return GuestStateMachine(guest, clock=lambda: NOW)


@pytest.mark.parametrize(
    "initial",
    [GuestStatus.NOT_SENT, GuestStatus.PENDING, GuestStatus.BOUNCED],
)
def test_send_accepted_moves_to_pending(initial):
    guest = make_guest(initial)

    event = machine(guest).send_accepted(Channel.EMAIL, provider_message_id="re_123")

    assert guest.status == GuestStatus.PENDING
    assert guest.request_sent_at == NOW
    assert guest.request_method == Channel.EMAIL
    assert event.event_type == DeliveryEventType.SENT
    assert event.channel == Channel.EMAIL
    assert event.guest_id == guest.uuid
    assert event.provider_message_id == "re_123"
    assert event.occurred_at == NOW


def test_send_to_completed_guest_keeps_completed():
    guest = make_guest(GuestStatus.COMPLETED)

    machine(guest).send_accepted(Channel.SMS)

    assert guest.status == GuestStatus.COMPLETED
    assert guest.request_method == Channel.SMS


def test_reminder_increments_count_and_stays_pending():
    guest = make_guest(GuestStatus.PENDING)
    sm = machine(guest)

    sm.reminder_sent(Channel.EMAIL)
    event = sm.reminder_sent(Channel.EMAIL)

    assert guest.status == GuestStatus.PENDING
    assert guest.reminder_count == 2
    assert guest.last_reminder_sent_at == NOW
    assert event.event_type == DeliveryEventType.SENT


@pytest.mark.parametrize(
    "initial",
    [GuestStatus.NOT_SENT, GuestStatus.COMPLETED, GuestStatus.BOUNCED],
)
def test_reminder_requires_pending(initial):
    guest = make_guest(initial)

    with pytest.raises(InvalidTransitionError):
        machine(guest).reminder_sent(Channel.EMAIL)

    assert guest.status == initial
    assert guest.reminder_count == 0


def test_delivery_failure_bounces_pending_guest():
    guest = make_guest(GuestStatus.PENDING)

    event = machine(guest).delivery_failed(Channel.EMAIL, DeliveryEventType.BOUNCED)

    assert guest.status == GuestStatus.BOUNCED
    assert event.event_type == DeliveryEventType.BOUNCED


def test_delivery_failure_does_not_touch_completed_guest():
    guest = make_guest(GuestStatus.COMPLETED)

    event = machine(guest).delivery_failed(Channel.SMS, DeliveryEventType.FAILED)

    assert guest.status == GuestStatus.COMPLETED
    assert event.event_type == DeliveryEventType.FAILED


def test_delivery_failed_rejects_tracking_events():
    with pytest.raises(ValueError):
        machine(make_guest(GuestStatus.PENDING)).delivery_failed(
            Channel.EMAIL, DeliveryEventType.OPENED
        )


def test_delivery_reported_only_logs():
    guest = make_guest(GuestStatus.PENDING)

    event = machine(guest).delivery_reported(Channel.EMAIL, DeliveryEventType.OPENED)

    assert guest.status == GuestStatus.PENDING
    assert event.event_type == DeliveryEventType.OPENED


@pytest.mark.parametrize(
    "initial",
    [GuestStatus.NOT_SENT, GuestStatus.PENDING, GuestStatus.COMPLETED, GuestStatus.BOUNCED],
)
def test_address_submitted_completes_from_any_status(initial):
    guest = make_guest(initial)

    machine(guest).address_submitted()

    assert guest.status == GuestStatus.COMPLETED
    assert guest.submitted_at == NOW
