from cardulary.config.settings import settings
from cardulary.sms_service.base import DisabledSmsService, SmsServiceBase
from cardulary.sms_service.phone import normalize_phone_number


def get_sms_service() -> SmsServiceBase:
    if settings.twilio_account_sid and settings.twilio_auth_token:
        from cardulary.sms_service.twilio_service import TwilioSmsService

        return TwilioSmsService(config=settings)
    return DisabledSmsService()


__all__ = [
    "SmsServiceBase",
    "get_sms_service",
    "normalize_phone_number",
]
