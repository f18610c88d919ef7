"""Aggregates behind the staff dashboard."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from sqlalchemy.engine import Connection

from hotel_reservations.config import ANALYTICS_LOOKBACK_DAYS
from hotel_reservations.db.readers.analytics import (
    count_occupied_rooms,
    count_rooms,
    room_type_bookings_since,
    service_usage_since,
)
from hotel_reservations.services.pricing import to_money


def occupancy(conn: Connection, today: date) -> dict[str, int]:
    total = count_rooms(conn)
    occupied = count_occupied_rooms(conn, today)
    rate = round(occupied * 100 / total) if total else 0
    return {"occupied_rooms": occupied, "total_rooms": total, "occupancy_rate": rate}


def dashboard(
    conn: Connection, today: date, lookback_days: int = ANALYTICS_LOOKBACK_DAYS
) -> dict[str, Any]:
    """
    Collect occupancy for today and popularity over the lookback window.

    Args:
        conn: SQLAlchemy DB connection
        today: Day for the occupancy figure; the window ends here
        lookback_days: Length of the popularity window in days

    Returns:
        dict: occupancy, room_type_popularity, service_popularity
    """
    since = today - timedelta(days=lookback_days)
    services = service_usage_since(
        conn, datetime.combine(since, time.min, tzinfo=timezone.utc)
    )
    for row in services:
        row["total_revenue"] = to_money(row["total_revenue"])

    return {
        "occupancy": occupancy(conn, today),
        "room_type_popularity": room_type_bookings_since(conn, since),
        "service_popularity": services,
    }
