"""Domain errors shared by the write models and routers.

Each error carries the message that is safe to show to the caller. Routers turn
them into ``HTTPException`` with ``status_code``.
"""

from datetime import datetime


class CardularyError(Exception):
    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.public_message
        super().__init__(self.message)


class UnauthorizedError(CardularyError):
    status_code = 401
    public_message = "Unauthorized"

    def __init__(self, reason: str | None = None) -> None:
        # the reason is for server-side logs only
        self.reason = reason
        super().__init__(self.public_message)


class NotFoundError(CardularyError):
    status_code = 404
    public_message = "Not found"


class EventNotFoundError(NotFoundError):
    public_message = "Event not found"


class GuestNotFoundError(NotFoundError):
    public_message = "Guest not found"


class InvalidSubmissionLinkError(NotFoundError):
    """Unknown token. Deliberately says nothing about why."""

    public_message = "Invalid submission link"


class NoValidGuestsError(NotFoundError):
    public_message = "No valid guests found"


class ValidationError(CardularyError):
    status_code = 400
    public_message = "Invalid input"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class InvalidTransitionError(CardularyError):
    status_code = 409
    public_message = "Invalid status transition"

    def __init__(self, current: str, action: str) -> None:
        self.current = current
        self.action = action
        super().__init__(f"Cannot {action} while guest is {current}")


class RateLimitedError(CardularyError):
    status_code = 429
    public_message = "Too many requests. Please try again later."

    def __init__(self, retry_after: int, limit: int, reset_at: datetime) -> None:
        self.retry_after = retry_after
        self.limit = limit
        self.reset_at = reset_at
        super().__init__(self.public_message)


class TransportFailure(CardularyError):
    """A single guest's email/SMS could not be handed to the provider."""

    status_code = 502
    public_message = "Delivery failed"
