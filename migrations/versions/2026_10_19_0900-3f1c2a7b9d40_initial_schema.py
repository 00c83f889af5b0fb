"""initial_schema

Revision ID: 3f1c2a7b9d40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "3f1c2a7b9d40"
down_revision = None
branch_labels = None
depends_on = None

CHANNEL = sa.Enum("email", "sms", name="channel_enum")
# channel_enum already exists once the guests table is created
EXISTING_CHANNEL = postgresql.ENUM("email", "sms", name="channel_enum", create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "organizers",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_organizers_email", "organizers", ["email"], unique=True)

    op.create_table(
        "events",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("organizer_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column(
            "category",
            sa.Enum(
                "wedding",
                "graduation",
                "birthday",
                "reunion",
                "holiday_cards",
                "other",
                "none",
                name="event_category_enum",
            ),
            nullable=True,
        ),
        sa.Column("event_date", sa.Date(), nullable=True),
        sa.Column("custom_message", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["organizer_id"], ["organizers.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_events_organizer_id", "events", ["organizer_id"])

    op.create_table(
        "guests",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("event_id", sa.UUID(), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column(
            "status",
            sa.Enum("not_sent", "pending", "completed", "bounced", name="guest_status_enum"),
            nullable=False,
            server_default="not_sent",
        ),
        sa.Column("request_method", CHANNEL, nullable=True),
        sa.Column("request_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reminder_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_reminder_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_guests_event_id", "guests", ["event_id"])
    op.create_index("ix_guests_first_name", "guests", ["first_name"])
    op.create_index("ix_guests_last_name", "guests", ["last_name"])
    op.create_index("ix_guests_token", "guests", ["token"], unique=True)
    op.create_index("ix_guests_status", "guests", ["status"])

    op.create_table(
        "address_submissions",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("guest_id", sa.UUID(), nullable=False),
        sa.Column("address_line1", sa.String(length=200), nullable=False),
        sa.Column("address_line2", sa.String(length=200), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=False),
        sa.Column("state", sa.String(length=2), nullable=False),
        sa.Column("zip", sa.String(length=10), nullable=False),
        sa.Column("country", sa.String(length=50), nullable=False, server_default="US"),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("is_current", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_address_submissions_guest_id", "address_submissions", ["guest_id"])
    # At most one current submission per guest
    op.create_index(
        "uq_address_submissions_current_guest",
        "address_submissions",
        ["guest_id"],
        unique=True,
        postgresql_where=sa.text("is_current"),
    )

    op.create_table(
        "delivery_events",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("guest_id", sa.UUID(), nullable=False),
        sa.Column(
            "event_type",
            sa.Enum(
                "sent",
                "delivered",
                "opened",
                "clicked",
                "bounced",
                "failed",
                name="delivery_event_type_enum",
            ),
            nullable=False,
        ),
        sa.Column("channel", EXISTING_CHANNEL, nullable=False),
        sa.Column("provider_message_id", sa.String(length=255), nullable=True),
        sa.Column("provider_metadata", sa.JSON(), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_delivery_events_guest_id", "delivery_events", ["guest_id"])
    op.create_index(
        "ix_delivery_events_provider_message_id", "delivery_events", ["provider_message_id"]
    )

    op.create_table(
        "exports",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("event_id", sa.UUID(), nullable=False),
        sa.Column("organizer_id", sa.UUID(), nullable=False),
        sa.Column("format", sa.String(length=20), nullable=False),
        sa.Column("filter_criteria", sa.JSON(), nullable=True),
        sa.Column("exported_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["organizer_id"], ["organizers.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_exports_event_id", "exports", ["event_id"])
    op.create_index("ix_exports_organizer_id", "exports", ["organizer_id"])

    op.create_table(
        "rate_limit_counters",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("key", sa.String(length=255), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reset_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index("ix_rate_limit_counters_key", "rate_limit_counters", ["key"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_rate_limit_counters_key", table_name="rate_limit_counters")
    op.drop_table("rate_limit_counters")
    op.drop_index("ix_exports_organizer_id", table_name="exports")
    op.drop_index("ix_exports_event_id", table_name="exports")
    op.drop_table("exports")
    op.drop_index("ix_delivery_events_provider_message_id", table_name="delivery_events")
    op.drop_index("ix_delivery_events_guest_id", table_name="delivery_events")
    op.drop_table("delivery_events")
    op.drop_index("uq_address_submissions_current_guest", table_name="address_submissions")
    op.drop_index("ix_address_submissions_guest_id", table_name="address_submissions")
    op.drop_table("address_submissions")
    op.drop_index("ix_guests_status", table_name="guests")
    op.drop_index("ix_guests_token", table_name="guests")
    op.drop_index("ix_guests_last_name", table_name="guests")
    op.drop_index("ix_guests_first_name", table_name="guests")
    op.drop_index("ix_guests_event_id", table_name="guests")
    op.drop_table("guests")
    op.drop_index("ix_events_organizer_id", table_name="events")
    op.drop_table("events")
    op.drop_index("ix_organizers_email", table_name="organizers")
    op.drop_table("organizers")
    op.execute("DROP TYPE delivery_event_type_enum")
    op.execute("DROP TYPE channel_enum")
    op.execute("DROP TYPE guest_status_enum")
    op.execute("DROP TYPE event_category_enum")
