"""Read models for events, guests and the public submission form.

Every organizer-facing query is scoped by ``organizer_id``; an event owned by
someone else reads exactly like one that does not exist.
"""

from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cardulary.config.database import async_session_manager
from cardulary.guests.dtos import (
    AddressDTO,
    EventDTO,
    GuestDTO,
    GuestExportRecord,
    SubmissionInfoDTO,
)
from cardulary.guests.repository.orm_models import AddressSubmission, Event, Guest
from cardulary.guests.tokens import get_submission_url


def event_to_dto(event: Event) -> EventDTO:
    return EventDTO(
        id=event.uuid,
        organizer_id=event.organizer_id,
        name=event.name,
        category=event.category,
        event_date=event.event_date,
        custom_message=event.custom_message,
        created_at=event.created_at,
    )


def guest_to_dto(guest: Guest) -> GuestDTO:
    return GuestDTO(
        id=guest.uuid,
        event_id=guest.event_id,
        first_name=guest.first_name,
        last_name=guest.last_name,
        token=guest.token,
        submission_link=get_submission_url(guest.token),
        status=guest.status,
        email=guest.email,
        phone=guest.phone,
        request_method=guest.request_method,
        request_sent_at=guest.request_sent_at,
        reminder_count=guest.reminder_count or 0,
        last_reminder_sent_at=guest.last_reminder_sent_at,
        submitted_at=guest.submitted_at,
    )


def _address_from_submission(submission: AddressSubmission | None) -> AddressDTO | None:
    if submission is None:
        return None
    return AddressDTO(
        address_line1=submission.address_line1,
        address_line2=submission.address_line2,
        city=submission.city,
        state=submission.state,
        zip=submission.zip,
        country=submission.country,
    )


class EventReadModel(ABC):
    @abstractmethod
    async def list_events(self, organizer_id: UUID) -> list[EventDTO]:
        raise NotImplementedError

    @abstractmethod
    async def get_event(self, event_id: UUID, organizer_id: UUID) -> EventDTO | None:
        raise NotImplementedError

    @abstractmethod
    async def list_guests(self, event_id: UUID, organizer_id: UUID) -> list[GuestDTO] | None:
        """Guests of the event newest first, or None if the event is not the organizer's."""
        raise NotImplementedError

    @abstractmethod
    async def get_export_records(
        self, event_id: UUID, organizer_id: UUID
    ) -> list[GuestExportRecord] | None:
        """Every guest joined with its current submission (if any)."""
        raise NotImplementedError


class SubmissionReadModel(ABC):
    @abstractmethod
    async def get_submission_info(self, token: str) -> SubmissionInfoDTO | None:
        raise NotImplementedError


class SqlEventReadModel(EventReadModel):
    async_session_manager = staticmethod(partial(async_session_manager, auto_commit=False))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def list_events(self, organizer_id: UUID) -> list[EventDTO]:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(Event)
                .where(Event.organizer_id == organizer_id)
                .order_by(Event.created_at.desc())
            )
            return [event_to_dto(event) for event in result.scalars().all()]

    async def get_event(self, event_id: UUID, organizer_id: UUID) -> EventDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await self._get_owned_event(session, event_id, organizer_id)
            return event_to_dto(event) if event else None

    async def list_guests(self, event_id: UUID, organizer_id: UUID) -> list[GuestDTO] | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await self._get_owned_event(session, event_id, organizer_id)
            if not event:
                return None
            result = await session.execute(
                select(Guest)
                .where(Guest.event_id == event_id)
                .order_by(Guest.created_at.desc())
            )
            return [guest_to_dto(guest) for guest in result.scalars().all()]

    async def get_export_records(
        self, event_id: UUID, organizer_id: UUID
    ) -> list[GuestExportRecord] | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await self._get_owned_event(session, event_id, organizer_id)
            if not event:
                return None

            result = await session.execute(
                select(Guest, AddressSubmission)
                .outerjoin(
                    AddressSubmission,
                    and_(
                        AddressSubmission.guest_id == Guest.uuid,
                        AddressSubmission.is_current.is_(True),
                    ),
                )
                .where(Guest.event_id == event_id)
                .order_by(Guest.last_name, Guest.first_name)
            )

            records = []
            for guest, submission in result.all():
                records.append(
                    GuestExportRecord(
                        first_name=guest.first_name,
                        last_name=guest.last_name,
                        status=guest.status,
                        email=guest.email,
                        phone=guest.phone,
                        address_line1=submission.address_line1 if submission else None,
                        address_line2=submission.address_line2 if submission else None,
                        city=submission.city if submission else None,
                        state=submission.state if submission else None,
                        zip=submission.zip if submission else None,
                        country=submission.country if submission else None,
                        submitted_at=submission.submitted_at if submission else None,
                    )
                )
            return records

    @staticmethod
    async def _get_owned_event(session, event_id: UUID, organizer_id: UUID) -> Event | None:
        result = await session.execute(
            select(Event).where(Event.uuid == event_id, Event.organizer_id == organizer_id)
        )
        return result.scalar_one_or_none()


class SqlSubmissionReadModel(SubmissionReadModel):
    async_session_manager = staticmethod(partial(async_session_manager, auto_commit=False))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_submission_info(self, token: str) -> SubmissionInfoDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(Guest, Event, AddressSubmission)
                .join(Event, Event.uuid == Guest.event_id)
                .outerjoin(
                    AddressSubmission,
                    and_(
                        AddressSubmission.guest_id == Guest.uuid,
                        AddressSubmission.is_current.is_(True),
                    ),
                )
                .where(Guest.token == token)
            )
            row = result.first()
            if row is None:
                return None

            guest, event, submission = row
            return SubmissionInfoDTO(
                guest_first_name=guest.first_name,
                event_name=event.name,
                status=guest.status,
                custom_message=event.custom_message,
                current_address=_address_from_submission(submission),
            )
