from types import SimpleNamespace
from unittest.mock import MagicMock

from twilio.base.exceptions import TwilioException

from cardulary.sms_service.base import DisabledSmsService
from cardulary.sms_service.twilio_service import TwilioSmsService

CONFIG = SimpleNamespace(
    twilio_account_sid="AC123",
    twilio_auth_token="secret",
    twilio_phone_number="+15550000000",
)


async def test_send_normalizes_number_and_returns_sid():
    client = MagicMock()
    client.messages.create.return_value = SimpleNamespace(sid="SM123")
    service = TwilioSmsService(config=CONFIG, client=client)

    result = await service.send("555-123-4567", "Hi Ada! https://x/submit/t")

    assert result.success is True
    assert result.provider_message_id == "SM123"
    client.messages.create.assert_called_once_with(
        body="Hi Ada! https://x/submit/t",
        to="+15551234567",
        from_="+15550000000",
    )


async def test_send_converts_twilio_errors_into_failed_result():
    client = MagicMock()
    client.messages.create.side_effect = TwilioException("invalid number")
    service = TwilioSmsService(config=CONFIG, client=client)

    result = await service.send("5551234567", "Hi")

    assert result.success is False
    assert "invalid number" in result.error


async def test_send_converts_network_errors_into_failed_result():
    client = MagicMock()
    client.messages.create.side_effect = ConnectionResetError("connection reset by peer")
    service = TwilioSmsService(config=CONFIG, client=client)

    result = await service.send("5551234567", "Hi")

    assert result.success is False
    assert "connection reset" in result.error


async def test_disabled_service_always_fails():
    result = await DisabledSmsService().send("5551234567", "Hi")

    assert result.success is False
    assert result.error == "SMS is not configured"
