"""
Room availability for a requested date window.

Availability is always computed against the reservation table for the
requested window. Room.status only removes rooms that are under maintenance;
a room flagged Occupied today can still be free for a later window.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional

import structlog
from sqlalchemy.engine import Connection

from hotel_reservations.db.readers.rooms import (
    count_overlapping_reservations,
    list_unblocked_rooms,
)
from hotel_reservations.errors import ValidationError
from hotel_reservations.metrics import availability_query_duration
from hotel_reservations.services.pricing import nightly_rate, seasonal_multiplier, to_money

logger = structlog.get_logger(__name__)


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """
    Half-open interval intersection of [a_start, a_end) and [b_start, b_end).

    A stay checking out on the day another checks in does not overlap it.

    Example:
        >>> ranges_overlap(date(2025, 6, 1), date(2025, 6, 3), date(2025, 6, 3), date(2025, 6, 5))
        False
    """
    return a_start < b_end and b_start < a_end


def list_available_rooms(
    conn: Connection, check_in: Optional[date], check_out: Optional[date]
) -> list[dict[str, Any]]:
    """
    List rooms free for the whole window, each with its adjusted nightly rate.

    A room is returned when it is not under maintenance and no Confirmed or
    CheckedIn reservation on it overlaps [check_in, check_out). The adjusted
    rate applies the seasonal multiplier in force on check_in.

    Args:
        conn: SQLAlchemy DB connection
        check_in: Requested check-in date
        check_out: Requested check-out date

    Returns:
        list[dict]: Room rows with rate_multiplier and adjusted_rate added

    Raises:
        ValidationError: If either date is missing or the window is empty
    """
    if check_in is None or check_out is None:
        raise ValidationError("Check-in and check-out dates are required")
    if check_out <= check_in:
        raise ValidationError("Check-out date must be after check-in date")

    with availability_query_duration.time():
        rooms = list_unblocked_rooms(conn, check_in, check_out)

        multipliers: dict[int, Decimal] = {}
        for room in rooms:
            room_type_id = room["room_type_id"]
            if room_type_id not in multipliers:
                multipliers[room_type_id] = seasonal_multiplier(conn, room_type_id, check_in)
            room["base_rate"] = to_money(room["base_rate"])
            room["rate_multiplier"] = multipliers[room_type_id]
            room["adjusted_rate"] = nightly_rate(room["base_rate"], multipliers[room_type_id])

    logger.debug(
        "availability_listed",
        check_in=check_in.isoformat(),
        check_out=check_out.isoformat(),
        rooms=len(rooms),
    )
    return rooms


def is_room_available(
    conn: Connection,
    room_id: int,
    check_in: date,
    check_out: date,
    exclude_reservation_id: Optional[int] = None,
) -> bool:
    """
    Check whether a single room has no conflicting active reservation.

    Args:
        conn: SQLAlchemy DB connection
        room_id: Room to check
        check_in: Window start
        check_out: Window end (exclusive)
        exclude_reservation_id: Reservation to ignore (the one being moved)

    Returns:
        bool: True if no active reservation overlaps the window
    """
    return (
        count_overlapping_reservations(conn, room_id, check_in, check_out, exclude_reservation_id)
        == 0
    )
