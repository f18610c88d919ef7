"""
Change-request workflow: guests ask, staff approve or reject.

A reservation moves NoRequest -> Pending -> resolved. Resolution deletes the
change row either way, so no rejection history is kept. Approve and reject
always act on the most recent Pending row (highest id). Nothing stops a second
Pending row from being stored; concurrent approvals are not serialized beyond
the store's default isolation.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

import structlog
from sqlalchemy.engine import Connection

from hotel_reservations.db.readers.reservations import (
    count_pending_changes,
    get_latest_pending_change,
    get_service_charge_total,
)
from hotel_reservations.db.readers.reservations import get_reservation as read_reservation
from hotel_reservations.db.writers.changes import delete_change_request, insert_change_request
from hotel_reservations.db.writers.reservations import update_reservation_dates
from hotel_reservations.errors import (
    ForbiddenError,
    NoPendingRequestError,
    NotFoundError,
    ValidationError,
)
from hotel_reservations.metrics import change_requests, reservations_cancelled
from hotel_reservations.models.enums import ChangeType, RequestStatus
from hotel_reservations.services.pricing import quote_stay, to_money
from hotel_reservations.services.reservations import cancel_reservation

logger = structlog.get_logger(__name__)


def _owned_reservation(conn: Connection, reservation_id: int, guest_id: int) -> dict:
    reservation = read_reservation(conn, reservation_id)
    if reservation is None:
        raise NotFoundError("Reservation not found")
    if reservation["guest_id"] != guest_id:
        raise ForbiddenError("You do not have permission to modify this reservation")
    return reservation


def submit_change_request(
    conn: Connection,
    reservation_id: int,
    guest_id: int,
    change_type: ChangeType,
    new_check_in: Optional[date] = None,
    new_check_out: Optional[date] = None,
    notes: Optional[str] = None,
) -> int:
    """
    Record a Pending date change or cancellation request.

    For a DateChange, omitted new dates fall back to the current ones. The
    resulting range must still end after it starts. A Cancellation stores the
    current dates only.

    Args:
        conn: SQLAlchemy DB connection (inside a transaction)
        reservation_id: Reservation to change
        guest_id: Authenticated guest making the request
        change_type: DateChange or Cancellation
        new_check_in: Requested check-in (DateChange only)
        new_check_out: Requested check-out (DateChange only)
        notes: Free-text note for staff

    Returns:
        int: Id of the stored change request

    Raises:
        NotFoundError: If the reservation does not exist
        ForbiddenError: If the reservation belongs to someone else
        ValidationError: If the requested range is empty or inverted
    """
    reservation = _owned_reservation(conn, reservation_id, guest_id)
    old_check_in = reservation["check_in_date"]
    old_check_out = reservation["check_out_date"]

    row = {
        "reservation_id": reservation_id,
        "staff_id": None,
        "change_type": change_type.value,
        "old_check_in_date": old_check_in,
        "old_check_out_date": old_check_out,
        "new_check_in_date": None,
        "new_check_out_date": None,
        "notes": notes or None,
        "request_status": RequestStatus.PENDING.value,
    }

    if change_type is ChangeType.DATE_CHANGE:
        check_in = new_check_in or old_check_in
        check_out = new_check_out or old_check_out
        if check_out <= check_in:
            raise ValidationError("Check-out date must be after check-in date")
        row["new_check_in_date"] = check_in
        row["new_check_out_date"] = check_out

    change_id = insert_change_request(conn, row)

    change_requests.labels(change_type=change_type.value, action="submitted").inc()
    logger.info(
        "change_request_submitted",
        reservation_id=reservation_id,
        reservation_change_id=change_id,
        change_type=change_type.value,
    )
    return change_id


def has_pending_request(conn: Connection, reservation_id: int, guest_id: int) -> bool:
    """
    Tell the owning guest whether a request is already awaiting staff.

    Raises:
        NotFoundError: If the reservation does not exist
        ForbiddenError: If the reservation belongs to someone else
    """
    _owned_reservation(conn, reservation_id, guest_id)
    return count_pending_changes(conn, reservation_id) > 0


def _latest_pending_or_raise(conn: Connection, reservation_id: int) -> dict:
    change = get_latest_pending_change(conn, reservation_id)
    if change is None:
        raise NoPendingRequestError("No pending request found")
    return change


def approve_change_request(conn: Connection, reservation_id: int, staff_id: int) -> str:
    """
    Apply the most recent Pending request of a reservation.

    Cancellation: the reservation is deleted and its room freed (its change
    rows go with it). DateChange: the reservation takes the stored new dates,
    without re-checking availability, its total is repriced for them (room
    stay plus existing service charges) and the change row is deleted.

    Args:
        conn: SQLAlchemy DB connection (inside a transaction)
        reservation_id: Reservation whose request is approved
        staff_id: Approving staff member

    Returns:
        str: Outcome message

    Raises:
        NoPendingRequestError: If the reservation has no Pending request
    """
    change = _latest_pending_or_raise(conn, reservation_id)
    change_type = ChangeType(change["change_type"])

    if change_type is ChangeType.CANCELLATION:
        room_id = cancel_reservation(conn, reservation_id)
        reservations_cancelled.inc()
        message = "Reservation cancelled successfully"
        logger.info(
            "cancellation_approved",
            reservation_id=reservation_id,
            room_id=room_id,
            staff_id=staff_id,
        )
    else:
        reservation = read_reservation(conn, reservation_id)
        quote = quote_stay(
            conn,
            reservation["room_id"],
            change["new_check_in_date"],
            change["new_check_out_date"],
        )
        total = to_money(quote.total_amount + get_service_charge_total(conn, reservation_id))
        update_reservation_dates(
            conn,
            reservation_id,
            change["new_check_in_date"],
            change["new_check_out_date"],
            staff_id=staff_id,
            total_amount=total,
        )
        delete_change_request(conn, change["reservation_change_id"])
        message = "Reservation updated successfully"
        logger.info(
            "date_change_approved",
            reservation_id=reservation_id,
            new_check_in=change["new_check_in_date"].isoformat(),
            new_check_out=change["new_check_out_date"].isoformat(),
            total_amount=str(total),
            staff_id=staff_id,
        )

    change_requests.labels(change_type=change_type.value, action="approved").inc()
    return message


def reject_change_request(conn: Connection, reservation_id: int) -> str:
    """
    Discard the most recent Pending request; the reservation is untouched.

    Raises:
        NoPendingRequestError: If the reservation has no Pending request
    """
    change = _latest_pending_or_raise(conn, reservation_id)
    delete_change_request(conn, change["reservation_change_id"])

    change_requests.labels(change_type=change["change_type"], action="rejected").inc()
    logger.info(
        "change_request_rejected",
        reservation_id=reservation_id,
        reservation_change_id=change["reservation_change_id"],
    )
    return "Request rejected successfully"
