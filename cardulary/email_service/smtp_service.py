import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from cardulary.config.settings import settings
from cardulary.email_service.base import EmailServiceBase, TransportResult
from cardulary.email_service.templates import EmailTemplates

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 10


class SMTPEmailService(EmailServiceBase):
    provider_name = "smtp"

    def __init__(self):
        self.host = settings.smtp_host
        self.port = settings.smtp_port
        self.username = settings.smtp_user
        self.password = settings.smtp_password
        self.from_address = settings.emails_from

    def _create_message(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address

        part1 = MIMEText(text_body, "plain")
        part2 = MIMEText(html_body, "html")
        msg.attach(part1)
        msg.attach(part2)

        return msg

    def _send(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=SMTP_TIMEOUT_SECONDS) as server:
            # mailhog and similar local relays take mail without auth
            if self.username and self.password:
                server.starttls()
                server.login(self.username, self.password)
            server.send_message(msg)

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

        msg = self._create_message(
            to_address=to_address,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
        )

        try:
            await asyncio.to_thread(self._send, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"SMTP delivery to {to_address} failed: {e}")
            return TransportResult(success=False, error=str(e))
        return TransportResult(success=True)
