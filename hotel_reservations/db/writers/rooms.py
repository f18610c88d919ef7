from datetime import date

from sqlalchemy import exists, update
from sqlalchemy.engine import Connection

from hotel_reservations.models.enums import ACTIVE_RESERVATION_STATUSES, RoomStatus
from hotel_reservations.models.reservations import Reservation
from hotel_reservations.models.rooms import Room


def set_room_status(conn: Connection, room_id: int, status: RoomStatus) -> None:
    """
    Update the housekeeping status of a room.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        room_id (int): Room ID.
        status (RoomStatus): New status.
    """
    conn.execute(update(Room).where(Room.room_id == room_id).values(status=status.value))


def release_idle_rooms(conn: Connection, today: date) -> int:
    """
    Reset Occupied rooms to Available when no active stay remains on them.

    A room stays Occupied while any active reservation on it checks out after
    today.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        today (date): Reference date.

    Returns:
        int: Number of rooms released.
    """
    still_held = exists().where(
        Reservation.room_id == Room.room_id,
        Reservation.status.in_(ACTIVE_RESERVATION_STATUSES),
        Reservation.check_out_date > today,
    )
    result = conn.execute(
        update(Room)
        .where(Room.status == RoomStatus.OCCUPIED.value, ~still_held)
        .values(status=RoomStatus.AVAILABLE.value)
    )
    return result.rowcount or 0
