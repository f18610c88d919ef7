"""
Stay pricing: nightly rate and total charge for a room and date range.

The nightly rate is the room type's base rate times the seasonal multiplier in
force on the check-in day. Only the check-in day is tested, so a stay crossing
a season boundary is charged entirely at the check-in season's rate; there is
no per-night proration.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.engine import Connection

from hotel_reservations.db.readers.rooms import get_room, get_seasonal_multiplier
from hotel_reservations.errors import RoomNotFoundError, ValidationError
from hotel_reservations.utils.datetime import as_calendar_date

CENTS = Decimal("0.01")
NO_SEASON = Decimal("1")


@dataclass(frozen=True)
class StayQuote:
    room_id: int
    room_type_id: int
    base_rate: Decimal
    rate_multiplier: Decimal
    nightly_rate: Decimal
    nights: int
    total_amount: Decimal
    room_status: str


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Quantize an amount to cents."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_nights(check_in: date | datetime, check_out: date | datetime) -> int:
    """
    Number of nights between two calendar dates.

    Datetimes are truncated to their date first, so wall-clock time never
    changes the result.

    Raises:
        ValidationError: If check_out is not after check_in
    """
    check_in_day = as_calendar_date(check_in)
    check_out_day = as_calendar_date(check_out)
    if check_out_day <= check_in_day:
        raise ValidationError("Check-out date must be after check-in date")
    return math.ceil((check_out_day - check_in_day).days)


def seasonal_multiplier(conn: Connection, room_type_id: int, on_date: date) -> Decimal:
    multiplier = get_seasonal_multiplier(conn, room_type_id, on_date)
    return Decimal(str(multiplier)) if multiplier is not None else NO_SEASON


def nightly_rate(base_rate: Decimal, multiplier: Decimal) -> Decimal:
    return to_money(Decimal(str(base_rate)) * multiplier)


def quote_stay(
    conn: Connection, room_id: int, check_in: date | datetime, check_out: date | datetime
) -> StayQuote:
    """
    Price a stay in a given room.

    Args:
        conn: SQLAlchemy DB connection
        room_id: Room to price
        check_in: Check-in date
        check_out: Check-out date

    Returns:
        StayQuote: Base rate, multiplier, nightly rate, nights and total

    Raises:
        ValidationError: If check_out is not after check_in
        RoomNotFoundError: If the room does not exist
    """
    nights = calculate_nights(check_in, check_out)
    check_in_day = as_calendar_date(check_in)

    room = get_room(conn, room_id)
    if room is None:
        raise RoomNotFoundError(f"Room {room_id} not found")

    multiplier = seasonal_multiplier(conn, room["room_type_id"], check_in_day)
    rate = nightly_rate(room["base_rate"], multiplier)

    return StayQuote(
        room_id=room_id,
        room_type_id=room["room_type_id"],
        base_rate=to_money(room["base_rate"]),
        rate_multiplier=multiplier,
        nightly_rate=rate,
        nights=nights,
        total_amount=to_money(rate * nights),
        room_status=room["status"],
    )
