from datetime import date, datetime
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cardulary.config.table_names import TableNames
from cardulary.guests.dtos import Channel, DeliveryEventType, EventCategory, GuestStatus
from cardulary.models.base import Base, TimeStamp


def _enum_values(enum_cls):
    return [e.value for e in enum_cls]


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    organizer_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.ORGANIZERS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[EventCategory | None] = mapped_column(
        Enum(EventCategory, name="event_category_enum", values_callable=_enum_values),
        nullable=True,
    )
    event_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    custom_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    guests: Mapped[list["Guest"]] = relationship(
        "Guest",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Event {self.name}>"


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(254), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Capability for the public submission form, never reassigned
    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)

    status: Mapped[GuestStatus] = mapped_column(
        Enum(GuestStatus, name="guest_status_enum", values_callable=_enum_values),
        default=GuestStatus.NOT_SENT,
        nullable=False,
        index=True,
    )

    # Request bookkeeping
    request_method: Mapped[Channel | None] = mapped_column(
        Enum(Channel, name="channel_enum", values_callable=_enum_values),
        nullable=True,
    )
    request_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    reminder_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_reminder_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    event: Mapped["Event"] = relationship("Event", back_populates="guests")
    submissions: Mapped[list["AddressSubmission"]] = relationship(
        "AddressSubmission",
        back_populates="guest",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    delivery_events: Mapped[list["DeliveryEvent"]] = relationship(
        "DeliveryEvent",
        back_populates="guest",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Guest {self.full_name} - {self.status.value}>"


class AddressSubmission(Base, TimeStamp):
    __tablename__ = TableNames.ADDRESS_SUBMISSIONS.value
    __table_args__ = (
        # At most one current submission per guest
        Index(
            "uq_address_submissions_current_guest",
            "guest_id",
            unique=True,
            postgresql_where=text("is_current"),
            sqlite_where=text("is_current"),
        ),
    )

    guest_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    address_line1: Mapped[str] = mapped_column(String(200), nullable=False)
    address_line2: Mapped[str | None] = mapped_column(String(200), nullable=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(2), nullable=False)
    zip: Mapped[str] = mapped_column(String(10), nullable=False)
    country: Mapped[str] = mapped_column(String(50), default="US", nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_current: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=true(), nullable=False
    )

    guest: Mapped["Guest"] = relationship("Guest", back_populates="submissions")

    def __repr__(self) -> str:
        return f"<AddressSubmission {self.zip} for guest {self.guest_id} current={self.is_current}>"


class DeliveryEvent(Base, TimeStamp):
    __tablename__ = TableNames.DELIVERY_EVENTS.value

    guest_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_type: Mapped[DeliveryEventType] = mapped_column(
        Enum(DeliveryEventType, name="delivery_event_type_enum", values_callable=_enum_values),
        nullable=False,
    )
    channel: Mapped[Channel] = mapped_column(
        Enum(Channel, name="channel_enum", values_callable=_enum_values),
        nullable=False,
    )
    # Resend email id / Twilio message SID of the send this event belongs to
    provider_message_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )
    provider_metadata: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    guest: Mapped["Guest"] = relationship("Guest", back_populates="delivery_events")

    def __repr__(self) -> str:
        return f"<DeliveryEvent {self.event_type.value} via {self.channel.value} for guest {self.guest_id}>"


class ExportLog(Base, TimeStamp):
    __tablename__ = TableNames.EXPORTS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    organizer_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.ORGANIZERS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    format: Mapped[str] = mapped_column(String(20), nullable=False)
    filter_criteria: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    exported_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<ExportLog {self.format} for event {self.event_id}>"
