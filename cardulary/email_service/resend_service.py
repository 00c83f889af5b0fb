import logging
from typing import Protocol

import httpx

from cardulary.email_service.base import EmailServiceBase, TransportResult
from cardulary.email_service.templates import EmailTemplates

logger = logging.getLogger(__name__)

RESEND_EMAILS_URL = "https://api.resend.com/emails"


class ResendEmailConfig(Protocol):
    resend_api_key: str
    emails_from: str


class ResendEmailService(EmailServiceBase):
    provider_name = "resend"

    def __init__(
        self,
        config: ResendEmailConfig,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        timeout: float = 10.0,
    ):
        self._config = config
        self._http_client_class = http_client_class
        self._timeout = timeout

    async def _send(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> TransportResult:
        """Send email via Resend. Provider errors come back as a failed result."""
        try:
            async with self._http_client_class(timeout=self._timeout) as client:
                response = await client.post(
                    RESEND_EMAILS_URL,
                    headers={
                        "Authorization": f"Bearer {self._config.resend_api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": self._config.emails_from,
                        "to": [to_address],
                        "subject": subject,
                        "html": html_body,
                        "text": text_body,
                    },
                )
                response.raise_for_status()
                resend_email_id = response.json().get("id")
        except httpx.HTTPError as e:
            logger.warning(f"Resend rejected email to {to_address}: {e}")
            return TransportResult(success=False, error=str(e))

        return TransportResult(success=True, provider_message_id=resend_email_id)

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
        subject, html_body, text_body = EmailTemplates.render_address_request(
            guest_first_name=guest_first_name,
            organizer_name=organizer_name,
            event_name=event_name,
            submission_link=submission_link,
            custom_message=custom_message,
            reminder=reminder,
        )
        return await self._send(
            to_address=to_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
        )
