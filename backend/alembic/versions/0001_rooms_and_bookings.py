"""rooms and bookings

Revision ID: 0001
Revises:
Create Date: 2025-01-06 09:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "rooms",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("is_active", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("display_order", sa.Integer()),
        sa.Column("notes", sa.Text()),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column(
            "room_id",
            sa.Integer(),
            sa.ForeignKey("rooms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("requester_id", sa.Text(), nullable=False),
        sa.Column("date", sa.Text(), nullable=False),
        sa.Column("start_time", sa.Text(), nullable=False),
        sa.Column("end_time", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("event_name", sa.Text(), nullable=False),
        sa.Column("purpose", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("attendees", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("visibility", sa.Text(), nullable=False, server_default=sa.text("'private'")),
        sa.Column("selected_items", sa.Text(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("admin_notes", sa.Text()),
        sa.Column("booking_group_id", sa.Text()),
        sa.Column("parent_booking_id", sa.Text()),
        sa.Column("cancel_reason", sa.Text()),
        sa.Column("created_at", sa.Text(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.Text(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )

    op.create_index("ix_bookings_booking_group_id", "bookings", ["booking_group_id"])
    op.create_index("ix_bookings_room_date", "bookings", ["room_id", "date"])
    op.create_index(
        "uq_bookings_active_slot",
        "bookings",
        ["room_id", "date", "start_time", "end_time"],
        unique=True,
        sqlite_where=sa.text("status != 'cancelled'"),
        postgresql_where=sa.text("status != 'cancelled'"),
    )


def downgrade():
    op.drop_index("uq_bookings_active_slot", table_name="bookings")
    op.drop_index("ix_bookings_room_date", table_name="bookings")
    op.drop_index("ix_bookings_booking_group_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("rooms")
