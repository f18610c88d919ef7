from datetime import date
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import and_, exists, select
from sqlalchemy.engine import Connection

from hotel_reservations.models.enums import ACTIVE_RESERVATION_STATUSES, RoomStatus
from hotel_reservations.models.reservations import Reservation
from hotel_reservations.models.rooms import Room, RoomType, SeasonalRate

_ROOM_COLUMNS = (
    Room.room_id,
    Room.room_type_id,
    Room.room_number,
    Room.floor_number,
    Room.status,
    RoomType.type_name,
    RoomType.base_rate,
)


def get_room(conn: Connection, room_id: int) -> Optional[dict[str, Any]]:
    """
    Fetch a room joined with its room type.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        room_id (int): Room ID.

    Returns:
        Optional[dict[str, Any]]: Room row with type_name and base_rate, or None.
    """
    row = (
        conn.execute(
            select(*_ROOM_COLUMNS)
            .join(RoomType, Room.room_type_id == RoomType.room_type_id)
            .where(Room.room_id == room_id)
        )
        .mappings()
        .first()
    )
    return dict(row) if row else None


def list_room_types(conn: Connection) -> list[dict[str, Any]]:
    """Return all room types ordered by base rate."""
    rows = conn.execute(
        select(RoomType.room_type_id, RoomType.type_name, RoomType.base_rate).order_by(
            RoomType.base_rate, RoomType.type_name
        )
    ).mappings()
    return [dict(r) for r in rows]


def room_type_exists(conn: Connection, room_type_id: int) -> bool:
    result = conn.execute(
        select(RoomType.room_type_id).where(RoomType.room_type_id == room_type_id)
    )
    return result.first() is not None


def get_seasonal_multiplier(
    conn: Connection, room_type_id: int, on_date: date
) -> Optional[Decimal]:
    """
    Get the multiplier of the first seasonal rate whose range contains on_date.

    Both range ends are inclusive. When several ranges overlap, the one with
    the lowest id wins.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        room_type_id (int): Room type to price.
        on_date (date): Day to test (the stay's check-in day).

    Returns:
        Optional[Decimal]: Multiplier, or None when no seasonal rate applies.
    """
    result = conn.execute(
        select(SeasonalRate.rate_multiplier)
        .where(
            SeasonalRate.room_type_id == room_type_id,
            SeasonalRate.start_date <= on_date,
            SeasonalRate.end_date >= on_date,
        )
        .order_by(SeasonalRate.seasonal_rate_id)
        .limit(1)
    )
    row = result.first()
    return row[0] if row else None


def overlapping_reservation_clause(
    check_in: date, check_out: date, exclude_reservation_id: Optional[int] = None
) -> Any:
    """
    Build the WHERE clause matching active reservations overlapping a window.

    Two half-open ranges [a, b) and [c, d) overlap iff a < d AND c < b.
    """
    clause = and_(
        Reservation.status.in_(ACTIVE_RESERVATION_STATUSES),
        Reservation.check_in_date < check_out,
        Reservation.check_out_date > check_in,
    )
    if exclude_reservation_id is not None:
        clause = and_(clause, Reservation.reservation_id != exclude_reservation_id)
    return clause


def list_unblocked_rooms(
    conn: Connection, check_in: date, check_out: date
) -> list[dict[str, Any]]:
    """
    List rooms with no active reservation overlapping [check_in, check_out).

    Rooms under maintenance are excluded; other housekeeping statuses are not
    considered.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        check_in (date): Requested check-in date.
        check_out (date): Requested check-out date.

    Returns:
        list[dict[str, Any]]: Room rows ordered by base rate, then room number.
    """
    conflict = exists().where(
        Reservation.room_id == Room.room_id,
        overlapping_reservation_clause(check_in, check_out),
    )
    rows = conn.execute(
        select(*_ROOM_COLUMNS)
        .join(RoomType, Room.room_type_id == RoomType.room_type_id)
        .where(Room.status != RoomStatus.MAINTENANCE.value, ~conflict)
        .order_by(RoomType.base_rate, Room.room_number)
    ).mappings()
    return [dict(r) for r in rows]


def count_overlapping_reservations(
    conn: Connection,
    room_id: int,
    check_in: date,
    check_out: date,
    exclude_reservation_id: Optional[int] = None,
) -> int:
    """Count active reservations on room_id overlapping the window."""
    rows = conn.execute(
        select(Reservation.reservation_id).where(
            Reservation.room_id == room_id,
            overlapping_reservation_clause(check_in, check_out, exclude_reservation_id),
        )
    ).all()
    return len(rows)
