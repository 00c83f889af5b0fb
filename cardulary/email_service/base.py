from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class TransportResult:
    """Outcome of handing one message to an email/SMS provider."""

    success: bool
    provider_message_id: str | None = None
    error: str | None = None


class EmailServiceBase(ABC):
    provider_name: str = "email"

    @abstractmethod
    async def send_address_request(
        self,
        to_address: str,
        guest_first_name: str,
        organizer_name: str,
        event_name: str,
        submission_link: str,
        custom_message: str,
        reminder: bool = False,
    ) -> TransportResult:
        pass
