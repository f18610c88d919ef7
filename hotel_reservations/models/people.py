"""SQLAlchemy models for the two identity spaces: guests and staff."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint, text

from hotel_reservations.models.base import Base


class Guest(Base):
    """
    ORM model for a hotel guest.

    A guest row can exist without credentials (created during an anonymous
    booking) and is later upgraded in place when the same email registers.
    Emails are stored lower-cased.
    """

    __tablename__ = "guest"

    guest_id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(30), nullable=True)
    password_hash = Column(String(255), nullable=True)
    is_account_created = Column(Boolean, nullable=False, server_default=text("FALSE"))


class Staff(Base):
    """
    ORM model for a staff member.

    Staff live in their own table; an email shared with a guest row is not a
    conflict.
    """

    __tablename__ = "staff"

    staff_id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)


class GuestPreference(Base):
    """ORM model for a guest's favourite room type."""

    __tablename__ = "guest_preference"
    __table_args__ = (UniqueConstraint("guest_id", "room_type_id", name="uq_guest_preference"),)

    guest_preference_id = Column(Integer, primary_key=True, autoincrement=True)
    guest_id = Column(
        Integer, ForeignKey("guest.guest_id", ondelete="CASCADE"), nullable=False, index=True
    )
    room_type_id = Column(
        Integer, ForeignKey("room_type.room_type_id", ondelete="CASCADE"), nullable=False
    )
