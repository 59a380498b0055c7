"""
Add bookings, invoices, reviews and notifications

Revision ID: 002_add_bookings
Revises: 001_initial
Create Date: 2025-01-15 00:00:00.000000
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# Revision identifiers
revision = "002_add_bookings"
down_revision = "001_initial"
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Add booking tables"""

    # Create bookings table
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("space_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("start_date_time", sa.DateTime(), nullable=False),
        sa.Column("end_date_time", sa.DateTime(), nullable=False),
        sa.Column("total_hours", sa.Float(), nullable=False),
        sa.Column("attendee_count", sa.Integer(), nullable=False),
        sa.Column("event_type", sa.String(255)),
        sa.Column("company_name", sa.String(255)),
        sa.Column("special_requests", sa.Text()),
        sa.Column("addons", postgresql.JSON(), default=[]),
        sa.Column(
            "pricing_type",
            postgresql.ENUM("HOURLY", "DAILY", "WEEKLY", "MONTHLY", name="pricingtype", create_type=False),
            nullable=False,
        ),
        sa.Column("hourly_rate", sa.Float(), nullable=False),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "APPROVED", "REJECTED", "CANCELLED", "COMPLETED", name="bookingstatus"),
            nullable=False,
        ),
        sa.Column(
            "payment_status",
            sa.Enum("PENDING", "PAID", "REFUNDED", "FAILED", name="paymentstatus"),
            nullable=False,
        ),
        sa.Column("rejection_reason", sa.Text()),
        sa.Column("cancellation_reason", sa.Text()),
        sa.Column("cancelled_at", sa.DateTime()),
        sa.Column("cancelled_by", sa.String(20)),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["space_id"], ["spaces.id"], ondelete="CASCADE"),
    )

    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_space_id", "bookings", ["space_id"])
    op.create_index("ix_bookings_start_date_time", "bookings", ["start_date_time"])
    op.create_index("ix_bookings_end_date_time", "bookings", ["end_date_time"])
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("ix_bookings_created_at", "bookings", ["created_at"])

    # Create invoices table
    op.create_table(
        "invoices",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("invoice_number", sa.String(50), nullable=False, unique=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), nullable=False, unique=True),
        sa.Column("billing_name", sa.String(255), nullable=False),
        sa.Column("billing_email", sa.String(255), nullable=False),
        sa.Column("subtotal", sa.Float(), nullable=False),
        sa.Column("taxes", sa.Float(), nullable=False),
        sa.Column("total", sa.Float(), nullable=False),
        sa.Column("issued_at", sa.DateTime(), nullable=False),
        sa.Column("due_date", sa.DateTime(), nullable=False),
        sa.Column("paid_at", sa.DateTime()),
        sa.Column("status", sa.Enum("DRAFT", "SENT", "PAID", "OVERDUE", name="invoicestatus"), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="CASCADE"),
    )

    op.create_index("ix_invoices_invoice_number", "invoices", ["invoice_number"])
    op.create_index("ix_invoices_booking_id", "invoices", ["booking_id"])
    op.create_index("ix_invoices_issued_at", "invoices", ["issued_at"])
    op.create_index("ix_invoices_status", "invoices", ["status"])

    # Create reviews table
    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("space_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), nullable=False, unique=True),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("cleanliness_rating", sa.Integer()),
        sa.Column("amenities_rating", sa.Integer()),
        sa.Column("location_rating", sa.Integer()),
        sa.Column("value_rating", sa.Integer()),
        sa.Column("comment", sa.Text()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["space_id"], ["spaces.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="CASCADE"),
    )

    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])
    op.create_index("ix_reviews_space_id", "reviews", ["space_id"])
    op.create_index("ix_reviews_created_at", "reviews", ["created_at"])

    # Create notifications table
    op.create_table(
        "notifications",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True)),
        sa.Column(
            "notification_type",
            sa.Enum(
                "BOOKING_REQUESTED",
                "BOOKING_APPROVED",
                "BOOKING_REJECTED",
                "BOOKING_CANCELLED",
                "INVOICE_PAID",
                name="notificationtype",
            ),
            nullable=False,
        ),
        sa.Column("channel", sa.Enum("SMS", name="notificationchannel"), nullable=False),
        sa.Column("status", sa.Enum("PENDING", "SENT", "FAILED", name="notificationstatus")),
        sa.Column("recipient_phone", sa.String(20)),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("provider", sa.String(50)),
        sa.Column("provider_message_id", sa.String(255)),
        sa.Column("sent_at", sa.DateTime()),
        sa.Column("error_message", sa.Text()),
        sa.Column("is_read", sa.Boolean(), nullable=False, default=False),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="CASCADE"),
    )

    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_booking_id", "notifications", ["booking_id"])
    op.create_index("ix_notifications_type", "notifications", ["notification_type"])
    op.create_index("ix_notifications_status", "notifications", ["status"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])


def downgrade() -> None:
    """Drop booking tables"""
    op.drop_table("notifications")
    op.drop_table("reviews")
    op.drop_table("invoices")
    op.drop_table("bookings")

    # Drop enums
    op.execute("DROP TYPE IF EXISTS notificationstatus")
    op.execute("DROP TYPE IF EXISTS notificationchannel")
    op.execute("DROP TYPE IF EXISTS notificationtype")
    op.execute("DROP TYPE IF EXISTS invoicestatus")
    op.execute("DROP TYPE IF EXISTS paymentstatus")
    op.execute("DROP TYPE IF EXISTS bookingstatus")
