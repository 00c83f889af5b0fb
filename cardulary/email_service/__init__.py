from cardulary.config.settings import settings
from cardulary.email_service.base import EmailServiceBase, TransportResult
from cardulary.email_service.resend_service import ResendEmailService
from cardulary.email_service.smtp_service import SMTPEmailService
from cardulary.email_service.templates import EmailTemplates


def get_email_service() -> EmailServiceBase:
    if settings.resend_api_key:
        return ResendEmailService(config=settings)
    return SMTPEmailService()


__all__ = [
    "EmailServiceBase",
    "EmailTemplates",
    "TransportResult",
    "get_email_service",
]
