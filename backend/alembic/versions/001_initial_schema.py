"""Initial schema: users, listings, rooms, beds, bookings.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(150), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'tenant'")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("role IN ('tenant', 'owner')", name="check_user_role"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "listings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("description", sa.String(2000), nullable=True),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("gender_preference", sa.String(10), nullable=False, server_default=sa.text("'any'")),
        sa.Column("amenities", sa.JSON(), nullable=False),
        sa.Column("availability", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("price >= 0", name="check_listing_price_non_negative"),
        sa.CheckConstraint(
            "gender_preference IN ('male', 'female', 'any')", name="check_listing_gender_preference"
        ),
    )
    op.create_index("ix_listings_id", "listings", ["id"])
    op.create_index("ix_listings_owner_id", "listings", ["owner_id"])
    # Every search starts with a price range
    op.create_index("ix_listings_price", "listings", ["price"])

    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("listing_id", sa.Integer(), sa.ForeignKey("listings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("room_number", sa.String(50), nullable=False),
        sa.Column("total_beds", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("capacity_per_bed", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("availability", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("listing_id", "room_number", name="uq_listing_room_number"),
        sa.CheckConstraint("total_beds > 0", name="check_room_total_beds_positive"),
        sa.CheckConstraint("capacity_per_bed > 0", name="check_room_capacity_per_bed_positive"),
    )
    op.create_index("ix_rooms_id", "rooms", ["id"])
    op.create_index("ix_rooms_listing_id", "rooms", ["listing_id"])

    op.create_table(
        "beds",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False),
        sa.Column("bed_number", sa.Integer(), nullable=False),
        sa.Column("is_occupied", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("tenant_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        sa.UniqueConstraint("room_id", "bed_number", name="uq_room_bed_number"),
        sa.CheckConstraint("bed_number > 0", name="check_bed_number_positive"),
        sa.CheckConstraint("is_occupied OR tenant_id IS NULL", name="check_vacant_bed_has_no_tenant"),
    )
    op.create_index("ix_beds_id", "beds", ["id"])
    op.create_index("ix_beds_room_id", "beds", ["room_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("tenant_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("listing_id", sa.Integer(), sa.ForeignKey("listings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("rooms.id", ondelete="CASCADE"), nullable=True),
        sa.Column("bed_id", sa.Integer(), sa.ForeignKey("beds.id", ondelete="CASCADE"), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("booking_date", sa.Date(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'rejected', 'completed')",
            name="check_booking_status",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_tenant_id", "bookings", ["tenant_id"])
    op.create_index("ix_bookings_listing_id", "bookings", ["listing_id"])
    op.create_index("ix_bookings_bed_id", "bookings", ["bed_id"])
    # Owner dashboard: "pending requests for my listing"
    op.create_index("ix_bookings_listing_status", "bookings", ["listing_id", "status"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("beds")
    op.drop_table("rooms")
    op.drop_table("listings")
    op.drop_table("users")
