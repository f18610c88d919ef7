"""Create room, guest, reservation and service tables

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-19 09:12:31.402118

"""

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "3f2a9c1d7b40"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "room_type",
        sa.Column("room_type_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type_name", sa.String(length=100), nullable=False),
        sa.Column("base_rate", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.PrimaryKeyConstraint("room_type_id"),
        sa.UniqueConstraint("type_name"),
    )
    op.create_table(
        "guest",
        sa.Column("guest_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column(
            "is_account_created", sa.Boolean(), server_default=sa.text("FALSE"), nullable=False
        ),
        sa.PrimaryKeyConstraint("guest_id"),
    )
    op.create_index(op.f("ix_guest_email"), "guest", ["email"], unique=True)
    op.create_table(
        "staff",
        sa.Column("staff_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("staff_id"),
    )
    op.create_index(op.f("ix_staff_email"), "staff", ["email"], unique=True)
    op.create_table(
        "service",
        sa.Column("service_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("service_name", sa.String(length=100), nullable=False),
        sa.Column("base_price", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.PrimaryKeyConstraint("service_id"),
        sa.UniqueConstraint("service_name"),
    )
    op.create_table(
        "seasonal_rate",
        sa.Column("seasonal_rate_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("room_type_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column(
            "rate_multiplier",
            sa.Numeric(precision=5, scale=2),
            server_default=sa.text("1"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["room_type_id"], ["room_type.room_type_id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("seasonal_rate_id"),
    )
    op.create_index(
        op.f("ix_seasonal_rate_room_type_id"), "seasonal_rate", ["room_type_id"], unique=False
    )
    op.create_table(
        "room",
        sa.Column("room_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("room_type_id", sa.Integer(), nullable=False),
        sa.Column("room_number", sa.String(length=10), nullable=False),
        sa.Column("floor_number", sa.Integer(), nullable=False),
        sa.Column(
            "status", sa.String(length=20), server_default=sa.text("'Available'"), nullable=False
        ),
        sa.ForeignKeyConstraint(["room_type_id"], ["room_type.room_type_id"]),
        sa.PrimaryKeyConstraint("room_id"),
        sa.UniqueConstraint("room_number"),
    )
    op.create_index(op.f("ix_room_room_type_id"), "room", ["room_type_id"], unique=False)
    op.create_table(
        "guest_preference",
        sa.Column("guest_preference_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("guest_id", sa.Integer(), nullable=False),
        sa.Column("room_type_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["guest_id"], ["guest.guest_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["room_type_id"], ["room_type.room_type_id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("guest_preference_id"),
        sa.UniqueConstraint("guest_id", "room_type_id", name="uq_guest_preference"),
    )
    op.create_index(
        op.f("ix_guest_preference_guest_id"), "guest_preference", ["guest_id"], unique=False
    )
    op.create_table(
        "reservation",
        sa.Column("reservation_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("guest_id", sa.Integer(), nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=False),
        sa.Column("staff_id", sa.Integer(), nullable=True),
        sa.Column("check_in_date", sa.Date(), nullable=False),
        sa.Column("check_out_date", sa.Date(), nullable=False),
        sa.Column(
            "status", sa.String(length=20), server_default=sa.text("'Confirmed'"), nullable=False
        ),
        sa.Column("total_amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column(
            "payment_status",
            sa.String(length=20),
            server_default=sa.text("'Unpaid'"),
            nullable=False,
        ),
        sa.Column("payment_method", sa.String(length=50), nullable=True),
        sa.Column("confirmation_code", sa.String(length=16), nullable=False),
        sa.Column("booking_email", sa.String(length=255), nullable=False),
        sa.Column("is_claimed", sa.Boolean(), server_default=sa.text("FALSE"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("check_out_date > check_in_date", name="ck_reservation_dates"),
        sa.ForeignKeyConstraint(["guest_id"], ["guest.guest_id"]),
        sa.ForeignKeyConstraint(["room_id"], ["room.room_id"]),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.staff_id"]),
        sa.PrimaryKeyConstraint("reservation_id"),
    )
    op.create_index(
        op.f("ix_reservation_confirmation_code"), "reservation", ["confirmation_code"], unique=True
    )
    op.create_index(op.f("ix_reservation_guest_id"), "reservation", ["guest_id"], unique=False)
    op.create_index(op.f("ix_reservation_room_id"), "reservation", ["room_id"], unique=False)
    op.create_table(
        "reservation_change",
        sa.Column("reservation_change_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("reservation_id", sa.Integer(), nullable=False),
        sa.Column("staff_id", sa.Integer(), nullable=True),
        sa.Column("change_type", sa.String(length=20), nullable=False),
        sa.Column("old_check_in_date", sa.Date(), nullable=False),
        sa.Column("old_check_out_date", sa.Date(), nullable=False),
        sa.Column("new_check_in_date", sa.Date(), nullable=True),
        sa.Column("new_check_out_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "request_status",
            sa.String(length=20),
            server_default=sa.text("'Pending'"),
            nullable=False,
        ),
        sa.Column(
            "requested_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["reservation_id"], ["reservation.reservation_id"]),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.staff_id"]),
        sa.PrimaryKeyConstraint("reservation_change_id"),
    )
    op.create_index(
        op.f("ix_reservation_change_reservation_id"),
        "reservation_change",
        ["reservation_id"],
        unique=False,
    )
    op.create_table(
        "service_charge",
        sa.Column("service_charge_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("reservation_id", sa.Integer(), nullable=False),
        sa.Column("service_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("charged_amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column(
            "charge_date",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["reservation_id"], ["reservation.reservation_id"]),
        sa.ForeignKeyConstraint(["service_id"], ["service.service_id"]),
        sa.PrimaryKeyConstraint("service_charge_id"),
    )
    op.create_index(
        op.f("ix_service_charge_reservation_id"),
        "service_charge",
        ["reservation_id"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f("ix_service_charge_reservation_id"), table_name="service_charge")
    op.drop_table("service_charge")
    op.drop_index(op.f("ix_reservation_change_reservation_id"), table_name="reservation_change")
    op.drop_table("reservation_change")
    op.drop_index(op.f("ix_reservation_room_id"), table_name="reservation")
    op.drop_index(op.f("ix_reservation_guest_id"), table_name="reservation")
    op.drop_index(op.f("ix_reservation_confirmation_code"), table_name="reservation")
    op.drop_table("reservation")
    op.drop_index(op.f("ix_guest_preference_guest_id"), table_name="guest_preference")
    op.drop_table("guest_preference")
    op.drop_index(op.f("ix_room_room_type_id"), table_name="room")
    op.drop_table("room")
    op.drop_index(op.f("ix_seasonal_rate_room_type_id"), table_name="seasonal_rate")
    op.drop_table("seasonal_rate")
    op.drop_table("service")
    op.drop_index(op.f("ix_staff_email"), table_name="staff")
    op.drop_table("staff")
    op.drop_index(op.f("ix_guest_email"), table_name="guest")
    op.drop_table("guest")
    op.drop_table("room_type")
