import smtplib
from unittest.mock import MagicMock, patch

from cardulary.email_service.smtp_service import SMTPEmailService

REQUEST = {
    "to_address": "ada@example.com",
    "guest_first_name": "Ada",
    "organizer_name": "Sam Rivera",
    "event_name": "Holiday Cards 2026",
    "submission_link": "http://localhost:3000/submit/abc",
    "custom_message": "Hi Ada! [link]",
}


async def test_send_address_request_delivers_multipart_message():
    server = MagicMock()
    with patch("cardulary.email_service.smtp_service.smtplib.SMTP") as smtp:
        smtp.return_value.__enter__.return_value = server
        result = await SMTPEmailService().send_address_request(**REQUEST)

    assert result.success is True
    [msg] = server.send_message.call_args.args
    assert msg["To"] == "ada@example.com"
    assert "Sam Rivera" in msg["Subject"]
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


async def test_smtp_error_is_a_failed_result():
    with patch("cardulary.email_service.smtp_service.smtplib.SMTP") as smtp:
        smtp.side_effect = smtplib.SMTPConnectError(421, "busy")
        result = await SMTPEmailService().send_address_request(**REQUEST)

    assert result.success is False
    assert "busy" in result.error
