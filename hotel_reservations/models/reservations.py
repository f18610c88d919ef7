# models/reservations.py

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.sql import func

from hotel_reservations.models.base import Base


class Reservation(Base):
    """
    ORM model for a guest's stay in one room.

    The date range is half-open: a stay from 06-01 to 06-03 occupies the
    nights of 06-01 and 06-02 and frees the room for a 06-03 check-in.
    confirmation_code plus booking_email is the only unauthenticated lookup
    key; booking_email stays put when the reservation is reassigned on claim.
    is_claimed marks a reservation bound to a guest account that can log in.
    """

    __tablename__ = "reservation"
    __table_args__ = (
        CheckConstraint("check_out_date > check_in_date", name="ck_reservation_dates"),
    )

    reservation_id = Column(Integer, primary_key=True, autoincrement=True)
    guest_id = Column(Integer, ForeignKey("guest.guest_id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("room.room_id"), nullable=False, index=True)
    staff_id = Column(Integer, ForeignKey("staff.staff_id"), nullable=True)
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, server_default=text("'Confirmed'"))
    total_amount = Column(Numeric(10, 2), nullable=False)
    payment_status = Column(String(20), nullable=False, server_default=text("'Unpaid'"))
    payment_method = Column(String(50), nullable=True)
    confirmation_code = Column(String(16), nullable=False, unique=True, index=True)
    # Email the booking was made with; code lookups and claims match against it
    booking_email = Column(String(255), nullable=False)
    is_claimed = Column(Boolean, nullable=False, server_default=text("FALSE"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ReservationChange(Base):
    """
    ORM model for a guest-submitted change request awaiting a staff decision.

    Rows are deleted when resolved, so a rejected request leaves no trace.
    Only the most recent Pending row per reservation is ever acted upon; the
    store does not forbid several Pending rows.
    """

    __tablename__ = "reservation_change"

    reservation_change_id = Column(Integer, primary_key=True, autoincrement=True)
    reservation_id = Column(
        Integer, ForeignKey("reservation.reservation_id"), nullable=False, index=True
    )
    staff_id = Column(Integer, ForeignKey("staff.staff_id"), nullable=True)
    change_type = Column(String(20), nullable=False)
    old_check_in_date = Column(Date, nullable=False)
    old_check_out_date = Column(Date, nullable=False)
    new_check_in_date = Column(Date, nullable=True)
    new_check_out_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    request_status = Column(String(20), nullable=False, server_default=text("'Pending'"))
    requested_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
