from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class EventCategory(str, Enum):
    WEDDING = "wedding"
    GRADUATION = "graduation"
    BIRTHDAY = "birthday"
    REUNION = "reunion"
    HOLIDAY_CARDS = "holiday_cards"
    OTHER = "other"
    NONE = "none"


class GuestStatus(str, Enum):
    NOT_SENT = "not_sent"
    PENDING = "pending"
    COMPLETED = "completed"
    BOUNCED = "bounced"


class Channel(str, Enum):
    EMAIL = "email"
    SMS = "sms"


class DeliveryEventType(str, Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    OPENED = "opened"
    CLICKED = "clicked"
    BOUNCED = "bounced"
    FAILED = "failed"


class Tone(str, Enum):
    WARM_CASUAL = "warm_casual"
    POLITE_FORMAL = "polite_formal"
    PLAYFUL = "playful"


@dataclass(frozen=True)
class EventDTO:
    """DTO for an organizer's event."""

    id: UUID
    organizer_id: UUID
    name: str
    category: EventCategory | None = None
    event_date: date | None = None
    custom_message: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class GuestDTO:
    """DTO for an event guest and its request bookkeeping."""

    id: UUID
    event_id: UUID
    first_name: str
    last_name: str
    token: str
    submission_link: str
    status: GuestStatus
    email: str | None = None
    phone: str | None = None
    request_method: Channel | None = None
    request_sent_at: datetime | None = None
    reminder_count: int = 0
    last_reminder_sent_at: datetime | None = None
    submitted_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class AddressDTO:
    """A normalized mailing address."""

    address_line1: str
    city: str
    state: str
    zip: str
    address_line2: str | None = None
    country: str = "US"


@dataclass(frozen=True)
class SubmissionDTO:
    """DTO for one address submission of a guest."""

    id: UUID
    guest_id: UUID
    address: AddressDTO
    submitted_at: datetime
    is_current: bool
    ip_address: str | None = None


@dataclass(frozen=True)
class SubmissionInfoDTO:
    """What the public submission form needs to render for a token."""

    guest_first_name: str
    event_name: str
    status: GuestStatus
    custom_message: str | None = None
    current_address: AddressDTO | None = None


@dataclass
class BatchResultDTO:
    """Aggregate outcome of a multi-guest dispatch."""

    success_count: int = 0
    failure_count: int = 0
    errors: list[str] = field(default_factory=list)

    def record_success(self) -> None:
        self.success_count += 1

    def record_failure(self, message: str) -> None:
        self.failure_count += 1
        self.errors.append(message)


@dataclass(frozen=True)
class GuestExportRecord:
    """Flat guest + current address snapshot consumed by the export engine."""

    first_name: str
    last_name: str
    status: GuestStatus
    email: str | None = None
    phone: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    submitted_at: datetime | None = None
