"""SQLAlchemy models for room inventory and rate reference data."""

from sqlalchemy import Column, Date, ForeignKey, Integer, Numeric, String, text

from hotel_reservations.models.base import Base


class RoomType(Base):
    """
    ORM model for a category of room sharing one base nightly rate.

    Room types are reference data; they are seeded once and never mutated by
    the booking flow.
    """

    __tablename__ = "room_type"

    room_type_id = Column(Integer, primary_key=True, autoincrement=True)
    type_name = Column(String(100), nullable=False, unique=True)
    base_rate = Column(Numeric(10, 2), nullable=False)


class SeasonalRate(Base):
    """
    ORM model for a date-ranged multiplier applied to a room type's base rate.

    start_date and end_date are both inclusive. Overlapping ranges for the same
    room type are not rejected; pricing takes the first match by id.
    """

    __tablename__ = "seasonal_rate"

    seasonal_rate_id = Column(Integer, primary_key=True, autoincrement=True)
    room_type_id = Column(
        Integer,
        ForeignKey("room_type.room_type_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    rate_multiplier = Column(Numeric(5, 2), nullable=False, server_default=text("1"))


class Room(Base):
    """
    ORM model for a physical room.

    status is a coarse housekeeping indicator (Available, Occupied,
    Maintenance, Cleaning). Availability for a date window is computed from
    the reservation table, not from this flag.
    """

    __tablename__ = "room"

    room_id = Column(Integer, primary_key=True, autoincrement=True)
    room_type_id = Column(
        Integer,
        ForeignKey("room_type.room_type_id"),
        nullable=False,
        index=True,
    )
    room_number = Column(String(10), nullable=False, unique=True)
    floor_number = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, server_default=text("'Available'"))
