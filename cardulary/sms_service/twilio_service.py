import asyncio
import logging
from typing import Protocol

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from cardulary.email_service.base import TransportResult
from cardulary.sms_service.base import SmsServiceBase
from cardulary.sms_service.phone import normalize_phone_number

logger = logging.getLogger(__name__)


class TwilioConfig(Protocol):
    twilio_account_sid: str
    twilio_auth_token: str
    twilio_phone_number: str


class TwilioSmsService(SmsServiceBase):
    provider_name = "twilio"

    def __init__(self, config: TwilioConfig, client: Client | None = None):
        self._config = config
        self._client = client or Client(config.twilio_account_sid, config.twilio_auth_token)

    def _create_message(self, to: str, body: str):
        return self._client.messages.create(
            body=body,
            to=to,
            from_=self._config.twilio_phone_number,
        )

    async def send(self, to: str, body: str) -> TransportResult:
        to = normalize_phone_number(to)
        try:
            # twilio's client is blocking
            message = await asyncio.to_thread(self._create_message, to, body)
        except TwilioException as e:
            logger.warning(f"Twilio rejected SMS to {to}: {e}")
            return TransportResult(success=False, error=str(e))
        except OSError as e:
            # network failures from twilio's http client (requests errors are OSErrors)
            logger.warning(f"Could not reach Twilio for SMS to {to}: {e}")
            return TransportResult(success=False, error=str(e))
        return TransportResult(success=True, provider_message_id=message.sid)
