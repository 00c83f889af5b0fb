"""Write model for the public address submission.

The token is resolved before anything is validated or written. A successful
submission retires every earlier submission of the guest and inserts the new
current one in the same transaction, then completes the guest.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cardulary.config.database import async_session_manager
from cardulary.errors import InvalidSubmissionLinkError
from cardulary.guests.dtos import AddressDTO, SubmissionDTO
from cardulary.guests.features.submit_address.validation import RawAddress, validate_address
from cardulary.guests.repository.orm_models import AddressSubmission, Guest
from cardulary.guests.state_machine import GuestStateMachine

logger = logging.getLogger(__name__)


def submission_to_dto(submission: AddressSubmission) -> SubmissionDTO:
    return SubmissionDTO(
        id=submission.uuid,
        guest_id=submission.guest_id,
        address=AddressDTO(
            address_line1=submission.address_line1,
            address_line2=submission.address_line2,
            city=submission.city,
            state=submission.state,
            zip=submission.zip,
            country=submission.country,
        ),
        submitted_at=submission.submitted_at,
        is_current=submission.is_current,
        ip_address=submission.ip_address,
    )


class AddressSubmissionWriteModel(ABC):
    @abstractmethod
    async def submit_address(
        self,
        token: str,
        raw_address: RawAddress,
        ip_address: str | None = None,
    ) -> SubmissionDTO:
        """Store a guest's address and mark the guest completed.

        Raises:
            InvalidSubmissionLinkError: no guest holds ``token``
            ValidationError: the address failed validation
        """
        raise NotImplementedError


class SqlAddressSubmissionWriteModel(AddressSubmissionWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def submit_address(
        self,
        token: str,
        raw_address: RawAddress,
        ip_address: str | None = None,
    ) -> SubmissionDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            # 1. Lock the guest row so concurrent submissions queue up
            guest = await self._get_guest_by_token_for_update(session, token)
            if guest is None:
                raise InvalidSubmissionLinkError()

            # 2. Validate before touching anything
            address = validate_address(raw_address)

            # 3. Retire the previous current submission(s)
            await session.execute(
                update(AddressSubmission)
                .where(AddressSubmission.guest_id == guest.uuid)
                .where(AddressSubmission.is_current.is_(True))
                .values(is_current=False)
            )

            # 4. Complete the guest and insert the new current submission
            state_machine = GuestStateMachine(guest)
            state_machine.address_submitted()

            submission = AddressSubmission(
                guest_id=guest.uuid,
                address_line1=address.address_line1,
                address_line2=address.address_line2,
                city=address.city,
                state=address.state,
                zip=address.zip,
                country=address.country,
                submitted_at=guest.submitted_at,
                ip_address=ip_address,
                is_current=True,
            )
            session.add(submission)
            await session.flush()

            logger.info(f"Guest {guest.uuid} submitted an address")
            return submission_to_dto(submission)

    async def _get_guest_by_token_for_update(self, session, token: str) -> Guest | None:
        result = await session.execute(
            select(Guest).where(Guest.token == token).with_for_update()
        )
        return result.scalar_one_or_none()
