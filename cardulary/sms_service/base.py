from abc import ABC, abstractmethod

from cardulary.email_service.base import TransportResult


class SmsServiceBase(ABC):
    provider_name: str = "sms"

    @abstractmethod
    async def send(self, to: str, body: str) -> TransportResult:
        pass


class DisabledSmsService(SmsServiceBase):
    """Used when no Twilio credentials are configured."""

    provider_name = "disabled"

    async def send(self, to: str, body: str) -> TransportResult:
        return TransportResult(success=False, error="SMS is not configured")
