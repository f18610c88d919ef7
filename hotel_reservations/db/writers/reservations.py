from datetime import date
from decimal import Decimal
from typing import Any, Optional

import structlog
from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from hotel_reservations.models.reservations import Reservation, ReservationChange
from hotel_reservations.models.services import ServiceCharge

logger = structlog.get_logger(__name__)


def insert_reservation(conn: Connection, row: dict[str, Any]) -> int:
    """
    Insert a reservation row and return its generated id.

    Args:
        conn (Connection): SQLAlchemy DB connection (inside a transaction).
        row (dict[str, Any]): Column values; check-out must be after check-in.

    Returns:
        int: New reservation_id.
    """
    result = conn.execute(insert(Reservation).values(**row))
    reservation_id = int(result.inserted_primary_key[0])
    logger.debug("reservation_inserted", reservation_id=reservation_id, room_id=row["room_id"])
    return reservation_id


def update_reservation_dates(
    conn: Connection,
    reservation_id: int,
    check_in: date,
    check_out: date,
    staff_id: Optional[int] = None,
    total_amount: Optional[Decimal] = None,
) -> None:
    """
    Move a reservation to new dates, recording the approving staff member.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        reservation_id (int): Reservation ID.
        check_in (date): New check-in date.
        check_out (date): New check-out date.
        staff_id (Optional[int]): Staff member approving the change.
        total_amount (Optional[Decimal]): Repriced total for the new dates.
    """
    values: dict[str, Any] = {"check_in_date": check_in, "check_out_date": check_out}
    if staff_id is not None:
        values["staff_id"] = staff_id
    if total_amount is not None:
        values["total_amount"] = total_amount

    conn.execute(
        update(Reservation).where(Reservation.reservation_id == reservation_id).values(**values)
    )


def assign_reservation_guest(conn: Connection, reservation_id: int, guest_id: int) -> None:
    """Reassign a reservation to guest_id and mark it claimed."""
    conn.execute(
        update(Reservation)
        .where(Reservation.reservation_id == reservation_id)
        .values(guest_id=guest_id, is_claimed=True)
    )


def mark_reservation_claimed(conn: Connection, reservation_id: int) -> None:
    conn.execute(
        update(Reservation)
        .where(Reservation.reservation_id == reservation_id)
        .values(is_claimed=True)
    )


def claim_guest_reservations(conn: Connection, guest_id: int) -> int:
    """
    Mark every reservation already owned by guest_id as claimed.

    Called when an anonymous guest row is upgraded into an account.

    Returns:
        int: Number of reservations updated.
    """
    result = conn.execute(
        update(Reservation)
        .where(Reservation.guest_id == guest_id, Reservation.is_claimed.is_(False))
        .values(is_claimed=True)
    )
    return result.rowcount or 0


def add_to_total(conn: Connection, reservation_id: int, amount: Decimal) -> None:
    conn.execute(
        update(Reservation)
        .where(Reservation.reservation_id == reservation_id)
        .values(total_amount=Reservation.total_amount + amount)
    )


def delete_reservation(conn: Connection, reservation_id: int) -> None:
    """
    Delete a reservation together with its change requests and service charges.

    Dependent rows go first so foreign keys hold at every step.

    Args:
        conn (Connection): SQLAlchemy DB connection (inside a transaction).
        reservation_id (int): Reservation ID.
    """
    conn.execute(
        delete(ReservationChange).where(ReservationChange.reservation_id == reservation_id)
    )
    conn.execute(delete(ServiceCharge).where(ServiceCharge.reservation_id == reservation_id))
    conn.execute(delete(Reservation).where(Reservation.reservation_id == reservation_id))
