import logging
from typing import Any, Protocol

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError as PydanticValidationError
from svix.webhooks import Webhook, WebhookVerificationError

from cardulary.config.settings import settings
from cardulary.email_service.delivery_status_updater import (
    DeliveryStatusUpdater,
    SqlDeliveryStatusUpdater,
)
from cardulary.guests.urls import RESEND_WEBHOOK_URL
from cardulary.webhooks.schema import ResendWebhookEvent

logger = logging.getLogger(__name__)

router = APIRouter()

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


class WebhookVerifier(Protocol):
    """Protocol for webhook signature verification."""

    def __call__(self, payload: str, headers: dict[str, str]) -> dict[str, Any]:
        """Verify webhook signature and return parsed payload."""
        ...


class SvixWebhookVerifier:
    """Default webhook verifier using Svix."""

    def __init__(self, secret: str | None = None):
        self._secret = secret if secret is not None else settings.resend_webhook_secret

    def __call__(self, payload: str, headers: dict[str, str]) -> dict[str, Any]:
        if not self._secret:
            raise HTTPException(status_code=503, detail="Webhook secret not configured")

        try:
            return Webhook(self._secret).verify(payload, headers)
        except WebhookVerificationError as e:
            raise HTTPException(status_code=401, detail=f"Invalid signature: {e}")


def get_webhook_verifier() -> WebhookVerifier:
    """Factory for webhook verifier. Override in tests."""
    return SvixWebhookVerifier()


def get_delivery_status_updater() -> DeliveryStatusUpdater:
    """Factory for the delivery status updater. Override in tests."""
    return SqlDeliveryStatusUpdater()


@router.post(RESEND_WEBHOOK_URL)
async def resend_delivery_webhook(
    request: Request,
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
    updater: DeliveryStatusUpdater = Depends(get_delivery_status_updater),
) -> dict[str, str]:
    """
    Record Resend delivery reports (delivered, opened, clicked, bounced, complained).

    A bounce or complaint moves a pending guest to bounced so the organizer can
    fix the address and send again.
    """
    body = await request.body()
    payload_str = body.decode("utf-8")
    headers = {name: value for name in SVIX_HEADERS if (value := request.headers.get(name))}

    try:
        payload = verifier(payload_str, headers)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Webhook verification error: {e}")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        event = ResendWebhookEvent.model_validate(payload)
    except PydanticValidationError as e:
        logger.warning(f"Malformed webhook payload: {e}")
        raise HTTPException(status_code=400, detail="Malformed payload")

    email_id = event.data.email_id
    if not email_id:
        logger.warning(f"Received {event.type} webhook without email_id")
        return {"status": "ignored"}

    recorded = await updater.update_status(
        provider_message_id=email_id,
        event_type=event.type,
        event_data=event.data.model_dump(mode="json", exclude_none=True),
    )
    if not recorded:
        logger.info(f"Ignored {event.type} for {email_id}")
        return {"status": "ignored"}

    return {"status": "received"}
