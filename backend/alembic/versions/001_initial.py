"""
Initial migration - Create users and spaces

Revision ID: 001_initial
Create Date: 2025-01-01 00:00:00.000000
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# Revision identifiers
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None

DAYS = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")


def upgrade() -> None:
    """Create users, spaces, pricing tiers and business hours"""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("company_name", sa.String(255)),
        sa.Column("image", sa.String(500)),
        sa.Column("user_type", sa.Enum("GUEST", "PROVIDER", "ADMIN", name="usertype"), nullable=False),
        sa.Column("favorite_ids", postgresql.JSON(), default=[]),
        sa.Column("is_active", sa.Boolean(), nullable=False, default=True),
        sa.Column("last_login", sa.DateTime()),
        sa.Column("last_password_change", sa.DateTime()),
        sa.Column("failed_login_attempts", sa.Integer(), default=0),
        sa.Column("locked_until", sa.DateTime()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_user_type", "users", ["user_type"])
    op.create_index("ix_users_is_active", "users", ["is_active"])

    # Create spaces table
    op.create_table(
        "spaces",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("image_src", sa.String(500), nullable=False),
        sa.Column("images", postgresql.JSON(), default=[]),
        sa.Column("space_type", sa.Enum("WORKSPACE", "EVENT_VENUE", name="spacetype"), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("min_capacity", sa.Integer(), nullable=False, default=1),
        sa.Column("location_value", sa.String(20)),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100)),
        sa.Column("postal_code", sa.String(20)),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("latitude", sa.Float()),
        sa.Column("longitude", sa.Float()),
        sa.Column("square_footage", sa.Integer()),
        sa.Column("ceiling_height", sa.Float()),
        sa.Column("amenities", postgresql.JSON(), default=[]),
        sa.Column("equipment", postgresql.JSON(), default=[]),
        sa.Column("instant_booking", sa.Boolean(), nullable=False, default=False),
        sa.Column("requires_approval", sa.Boolean(), nullable=False, default=False),
        sa.Column("min_booking_hours", sa.Integer(), nullable=False, default=1),
        sa.Column("max_booking_hours", sa.Integer()),
        sa.Column(
            "cancellation_policy",
            sa.Enum("FLEXIBLE", "MODERATE", "STRICT", "SUPER_STRICT", name="cancellationpolicy"),
            nullable=False,
        ),
        sa.Column("rules", postgresql.JSON(), default=[]),
        sa.Column("is_active", sa.Boolean(), nullable=False, default=True),
        sa.Column("verified", sa.Boolean(), nullable=False, default=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )

    op.create_index("ix_spaces_user_id", "spaces", ["user_id"])
    op.create_index("ix_spaces_space_type", "spaces", ["space_type"])
    op.create_index("ix_spaces_category", "spaces", ["category"])
    op.create_index("ix_spaces_location_value", "spaces", ["location_value"])
    op.create_index("ix_spaces_city", "spaces", ["city"])
    op.create_index("ix_spaces_is_active", "spaces", ["is_active"])
    op.create_index("ix_spaces_created_at", "spaces", ["created_at"])

    # Create pricing tiers table
    op.create_table(
        "pricing_tiers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("space_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "pricing_type", sa.Enum("HOURLY", "DAILY", "WEEKLY", "MONTHLY", name="pricingtype"), nullable=False
        ),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(10), nullable=False, default="USD"),
        sa.Column("is_peak_price", sa.Boolean(), nullable=False, default=False),
        sa.Column("peak_days", postgresql.JSON(), default=[]),
        sa.Column("peak_hours", sa.String(50)),
        sa.Column("cleaning_fee", sa.Float()),
        sa.Column("service_fee", sa.Float()),
        sa.Column("overtime_fee", sa.Float()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["space_id"], ["spaces.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("space_id", "pricing_type", name="uq_pricing_tier_space_type"),
    )

    op.create_index("ix_pricing_tiers_space_id", "pricing_tiers", ["space_id"])

    # Create business hours table
    op.create_table(
        "business_hours",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("space_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("day_of_week", sa.Enum(*DAYS, name="dayofweek"), nullable=False),
        sa.Column("open_time", sa.String(5), nullable=False),
        sa.Column("close_time", sa.String(5), nullable=False),
        sa.Column("is_closed", sa.Boolean(), nullable=False, default=False),
        sa.ForeignKeyConstraint(["space_id"], ["spaces.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("space_id", "day_of_week", name="uq_business_hour_space_day"),
    )

    op.create_index("ix_business_hours_space_id", "business_hours", ["space_id"])


def downgrade() -> None:
    """Drop all tables"""
    op.drop_table("business_hours")
    op.drop_table("pricing_tiers")
    op.drop_table("spaces")
    op.drop_table("users")

    # Drop enums
    op.execute("DROP TYPE IF EXISTS dayofweek")
    op.execute("DROP TYPE IF EXISTS pricingtype")
    op.execute("DROP TYPE IF EXISTS cancellationpolicy")
    op.execute("DROP TYPE IF EXISTS spacetype")
    op.execute("DROP TYPE IF EXISTS usertype")
