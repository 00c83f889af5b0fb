"""Write model for creating events.

The organizer row is provisioned from the token claims the first time an
organizer creates an event.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardulary.config.database import async_session_manager
from cardulary.errors import UnauthorizedError, ValidationError
from cardulary.guests.dtos import EventCategory, EventDTO
from cardulary.guests.repository.orm_models import Event
from cardulary.guests.repository.read_models import event_to_dto
from cardulary.models.organizer import Organizer

logger = logging.getLogger(__name__)

MAX_EVENT_NAME_LENGTH = 200
MAX_CUSTOM_MESSAGE_LENGTH = 1000


class EventCreateWriteModel(ABC):
    """Abstract base class for event creation."""

    @abstractmethod
    async def create_event(
        self,
        organizer_id: UUID,
        name: str,
        category: EventCategory | None = None,
        event_date: date | None = None,
        custom_message: str | None = None,
        organizer_email: str | None = None,
        organizer_name: str | None = None,
    ) -> EventDTO:
        """Create an event owned by ``organizer_id``.

        Raises:
            ValidationError: name is blank or too long, message is too long
            UnauthorizedError: the organizer is unknown and the token carried no email
        """
        raise NotImplementedError


class SqlEventCreateWriteModel(EventCreateWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_event(
        self,
        organizer_id: UUID,
        name: str,
        category: EventCategory | None = None,
        event_date: date | None = None,
        custom_message: str | None = None,
        organizer_email: str | None = None,
        organizer_name: str | None = None,
    ) -> EventDTO:
        name = (name or "").strip()
        if not name or len(name) > MAX_EVENT_NAME_LENGTH:
            raise ValidationError("name", "Event name must be between 1 and 200 characters")
        custom_message = (custom_message or "").strip() or None
        if custom_message and len(custom_message) > MAX_CUSTOM_MESSAGE_LENGTH:
            raise ValidationError("custom_message", "Custom message is too long")

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            await self._get_or_create_organizer(
                session, organizer_id, organizer_email, organizer_name
            )

            event = Event(
                organizer_id=organizer_id,
                name=name,
                category=category,
                event_date=event_date,
                custom_message=custom_message,
            )
            session.add(event)
            await session.flush()
            # created_at is set by the database
            await session.refresh(event)

            logger.info(f"Organizer {organizer_id} created event {event.uuid}")
            return event_to_dto(event)

    async def _get_or_create_organizer(
        self,
        session,
        organizer_id: UUID,
        email: str | None,
        name: str | None,
    ) -> Organizer:
        result = await session.execute(select(Organizer).where(Organizer.uuid == organizer_id))
        organizer = result.scalar_one_or_none()
        if organizer is not None:
            return organizer

        if not email:
            raise UnauthorizedError(f"organizer {organizer_id} is not provisioned")

        organizer = Organizer(uuid=organizer_id, email=email, name=name)
        session.add(organizer)
        await session.flush()
        return organizer
