"""Write model for creating guests.

Checks event ownership, then inserts the guest with a freshly generated
submission token and status ``not_sent``. Returns DTOs instead of ORM models.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cardulary.config.database import async_session_manager
from cardulary.errors import EventNotFoundError, ValidationError
from cardulary.guests.dtos import GuestDTO, GuestStatus
from cardulary.guests.repository.orm_models import Event, Guest
from cardulary.guests.repository.read_models import guest_to_dto
from cardulary.guests.tokens import generate_guest_token

logger = logging.getLogger(__name__)

TOKEN_ATTEMPTS = 3


class GuestCreateWriteModel(ABC):
    """Abstract base class for guest creation write operations."""

    @abstractmethod
    async def create_guest(
        self,
        event_id: UUID,
        organizer_id: UUID,
        first_name: str,
        last_name: str,
        email: str | None = None,
        phone: str | None = None,
    ) -> GuestDTO:
        """Add a guest to one of the organizer's events.

        Args:
            event_id: The event the guest belongs to
            organizer_id: Owner of the event
            first_name: Required first name
            last_name: Required last name
            email: Optional email address
            phone: Optional phone number (at least one of email/phone is required)

        Raises:
            EventNotFoundError: the event does not exist or is not the organizer's
            ValidationError: names missing or no contact method
        """
        raise NotImplementedError


class SqlGuestCreateWriteModel(GuestCreateWriteModel):
    """SQL implementation of guest creation write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_guest(
        self,
        event_id: UUID,
        organizer_id: UUID,
        first_name: str,
        last_name: str,
        email: str | None = None,
        phone: str | None = None,
    ) -> GuestDTO:
        first_name = (first_name or "").strip()
        last_name = (last_name or "").strip()
        email = (email or "").strip() or None
        phone = (phone or "").strip() or None

        if not first_name or not last_name:
            raise ValidationError("first_name", "First name and last name are required")
        if not email and not phone:
            raise ValidationError(
                "email", "At least one contact method (email or phone) is required"
            )

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            # 1. Verify event ownership
            result = await session.execute(
                select(Event.uuid).where(Event.uuid == event_id, Event.organizer_id == organizer_id)
            )
            if result.scalar_one_or_none() is None:
                raise EventNotFoundError()

            # 2. Insert with a fresh token; a collision gets a new one
            for attempt in range(1, TOKEN_ATTEMPTS + 1):
                guest = Guest(
                    event_id=event_id,
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    phone=phone,
                    token=generate_guest_token(),
                    status=GuestStatus.NOT_SENT,
                    reminder_count=0,
                )
                try:
                    async with session.begin_nested():
                        session.add(guest)
                        await session.flush()
                    break
                except IntegrityError:
                    if attempt == TOKEN_ATTEMPTS:
                        raise
                    logger.warning(f"Guest token collision on attempt {attempt}, retrying")

            logger.info(f"Added guest {guest.uuid} to event {event_id}")
            return guest_to_dto(guest)
