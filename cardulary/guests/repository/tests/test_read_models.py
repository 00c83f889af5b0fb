"""Tests for the SQL read models."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

from cardulary.guests.dtos import GuestStatus
from cardulary.guests.repository.orm_models import AddressSubmission
from cardulary.guests.repository.read_models import SqlEventReadModel, SqlSubmissionReadModel

SUBMITTED = datetime(2026, 3, 14, 9, 30, tzinfo=UTC)


async def add_submission(db_session, guest, zip_code="94107", is_current=True):
    submission = AddressSubmission(
        guest_id=guest.uuid,
        address_line1="1 Main St",
        city="San Francisco",
        state="CA",
        zip=zip_code,
        country="US",
        submitted_at=SUBMITTED,
        is_current=is_current,
    )
    db_session.add(submission)
    await db_session.flush()
    return submission


async def test_other_organizers_events_are_invisible(db_session, seed):
    owner = await seed.organizer()
    event = await seed.event(owner)
    await seed.guest(event)
    read_model = SqlEventReadModel(session_overwrite=db_session)
    stranger = uuid4()

    assert await read_model.get_event(event.uuid, stranger) is None
    assert await read_model.list_guests(event.uuid, stranger) is None
    assert await read_model.get_export_records(event.uuid, stranger) is None
    assert await read_model.list_events(stranger) == []
    assert [e.id for e in await read_model.list_events(owner.uuid)] == [event.uuid]


async def test_list_guests_newest_first(db_session, seed):
    organizer = await seed.organizer()
    event = await seed.event(organizer)
    older = await seed.guest(event, first_name="Ada")
    newer = await seed.guest(event, first_name="Grace", email="grace@example.com")
    older.created_at = datetime(2026, 1, 1, tzinfo=UTC)
    newer.created_at = older.created_at + timedelta(days=1)
    await db_session.flush()

    guests = await SqlEventReadModel(session_overwrite=db_session).list_guests(
        event.uuid, organizer.uuid
    )

    assert [guest.first_name for guest in guests] == ["Grace", "Ada"]
    assert guests[0].submission_link.endswith(f"/submit/{newer.token}")


async def test_export_records_use_current_submission_only(db_session, seed):
    organizer = await seed.organizer()
    event = await seed.event(organizer)
    completed = await seed.guest(event, last_name="Zuse", status=GuestStatus.COMPLETED)
    waiting = await seed.guest(
        event, first_name="Grace", last_name="Hopper", status=GuestStatus.PENDING
    )
    await add_submission(db_session, completed, zip_code="10001", is_current=False)
    await add_submission(db_session, completed, zip_code="94107")

    records = await SqlEventReadModel(session_overwrite=db_session).get_export_records(
        event.uuid, organizer.uuid
    )

    assert [record.last_name for record in records] == ["Hopper", "Zuse"]
    hopper, zuse = records
    assert hopper.zip is None
    assert hopper.submitted_at is None
    assert hopper.status == GuestStatus.PENDING
    assert zuse.zip == "94107"
    assert zuse.city == "San Francisco"
    assert zuse.submitted_at.replace(tzinfo=UTC) == SUBMITTED
    assert waiting.uuid != completed.uuid


async def test_submission_info_includes_current_address(db_session, seed):
    organizer = await seed.organizer()
    event = await seed.event(organizer, custom_message="Cards go out in December!")
    guest = await seed.guest(event, status=GuestStatus.COMPLETED)
    await add_submission(db_session, guest)
    read_model = SqlSubmissionReadModel(session_overwrite=db_session)

    info = await read_model.get_submission_info(guest.token)

    assert info.guest_first_name == "Ada"
    assert info.event_name == "Holiday Cards 2026"
    assert info.custom_message == "Cards go out in December!"
    assert info.status == GuestStatus.COMPLETED
    assert info.current_address.zip == "94107"
    assert await read_model.get_submission_info("no-such-token") is None


async def test_submission_info_without_address(db_session, seed):
    organizer = await seed.organizer()
    event = await seed.event(organizer)
    guest = await seed.guest(event, status=GuestStatus.PENDING)

    info = await SqlSubmissionReadModel(session_overwrite=db_session).get_submission_info(
        guest.token
    )

    assert info.current_address is None
    assert info.status == GuestStatus.PENDING
