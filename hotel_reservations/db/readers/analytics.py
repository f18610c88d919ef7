from datetime import date, datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from hotel_reservations.models.enums import ACTIVE_RESERVATION_STATUSES
from hotel_reservations.models.reservations import Reservation
from hotel_reservations.models.rooms import Room, RoomType
from hotel_reservations.models.services import Service, ServiceCharge


def count_rooms(conn: Connection) -> int:
    return int(conn.execute(select(func.count()).select_from(Room)).scalar_one())


def count_occupied_rooms(conn: Connection, on_date: date) -> int:
    """
    Count distinct rooms holding an active stay that covers on_date.

    A stay covers the nights in [check_in, check_out), so the check-out day
    itself does not count.
    """
    result = conn.execute(
        select(func.count(func.distinct(Reservation.room_id))).where(
            Reservation.status.in_(ACTIVE_RESERVATION_STATUSES),
            Reservation.check_in_date <= on_date,
            Reservation.check_out_date > on_date,
        )
    )
    return int(result.scalar_one())


def room_type_bookings_since(conn: Connection, since: date) -> list[dict[str, Any]]:
    """Bookings per room type for stays starting on or after since, most booked first."""
    bookings = func.count(Reservation.reservation_id).label("bookings")
    rows = conn.execute(
        select(RoomType.type_name, bookings)
        .select_from(Reservation)
        .join(Room, Reservation.room_id == Room.room_id)
        .join(RoomType, Room.room_type_id == RoomType.room_type_id)
        .where(Reservation.check_in_date >= since)
        .group_by(RoomType.type_name)
        .order_by(bookings.desc(), RoomType.type_name)
    ).mappings()
    return [dict(r) for r in rows]


def service_usage_since(conn: Connection, since: datetime) -> list[dict[str, Any]]:
    """
    Usage count and revenue per service for charges made since the cutoff.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        since (datetime): Lower bound on charge_date (inclusive).

    Returns:
        list[dict[str, Any]]: service_name, usage_count, total_revenue rows,
        most used first.
    """
    usage = func.count(ServiceCharge.service_charge_id).label("usage_count")
    rows = conn.execute(
        select(
            Service.service_name,
            usage,
            func.coalesce(func.sum(ServiceCharge.charged_amount), 0).label("total_revenue"),
        )
        .select_from(ServiceCharge)
        .join(Service, ServiceCharge.service_id == Service.service_id)
        .where(ServiceCharge.charge_date >= since)
        .group_by(Service.service_name)
        .order_by(usage.desc(), Service.service_name)
    ).mappings()
    return [dict(r) for r in rows]
