"""
Reservation lifecycle: booking, claiming, cancellation and listings.

Persisted statuses stay minimal (Confirmed, CheckedIn, CheckedOut, Cancelled).
Upcoming, Active and Completed are display labels derived from the stay dates
and an explicit "today" by stay_label().

Every function takes a Connection and runs inside the caller's transaction
(``with engine.begin() as conn``); a failure at any step rolls back the whole
operation.
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import structlog
from sqlalchemy.engine import Connection

from hotel_reservations.config import CONFIRMATION_CODE_LENGTH, DEFAULT_PAYMENT_METHOD
from hotel_reservations.db.readers.people import get_guest_by_id
from hotel_reservations.db.readers.reservations import (
    get_pending_change_types,
    get_reservation_by_code,
)
from hotel_reservations.db.readers.reservations import get_reservation as read_reservation
from hotel_reservations.db.readers.reservations import (
    list_all_reservations as read_all_reservations,
)
from hotel_reservations.db.readers.reservations import (
    list_guest_reservations as read_guest_reservations,
)
from hotel_reservations.db.writers.reservations import (
    assign_reservation_guest,
    delete_reservation,
    insert_reservation,
    mark_reservation_claimed,
)
from hotel_reservations.db.writers.rooms import release_idle_rooms, set_room_status
from hotel_reservations.errors import (
    AlreadyLinkedError,
    ConflictError,
    EmailMismatchError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from hotel_reservations.metrics import reservation_claims, reservations_created
from hotel_reservations.models.enums import (
    ACTIVE_RESERVATION_STATUSES,
    PaymentStatus,
    ReservationStatus,
    RoomStatus,
    StayLabel,
)
from hotel_reservations.security import Principal
from hotel_reservations.services.availability import is_room_available
from hotel_reservations.services.identity import GuestDetails, normalize_email, resolve_guest
from hotel_reservations.services.pricing import quote_stay

logger = structlog.get_logger(__name__)

CONFIRMATION_ALPHABET = string.ascii_uppercase + string.digits


@dataclass
class BookingRequest:
    check_in: Optional[date]
    check_out: Optional[date]
    room_id: Optional[int]
    guest: Optional[GuestDetails]


@dataclass(frozen=True)
class BookingResult:
    reservation_id: int
    # None when the reservation is claimed by an account
    confirmation_code: Optional[str]
    total_amount: Decimal
    nights: int
    is_claimed: bool
    account_principal: Optional[Principal] = None


def generate_confirmation_code(length: int = CONFIRMATION_CODE_LENGTH) -> str:
    """
    Random upper-case alphanumeric code, not guessable in sequence.

    Collisions are not retried; the unique constraint on the column turns one
    into a failed insert.
    """
    return "".join(secrets.choice(CONFIRMATION_ALPHABET) for _ in range(length))


def stay_label(status: str, check_in: date, check_out: date, today: date) -> str:
    """
    Derive the display label of a reservation.

    Active reservations are labelled from the dates relative to today; any
    other status is returned unchanged.

    Example:
        >>> stay_label("Confirmed", date(2025, 6, 1), date(2025, 6, 3), date(2025, 6, 2))
        'Active'
    """
    if status not in ACTIVE_RESERVATION_STATUSES:
        return status
    if today < check_in:
        return StayLabel.UPCOMING.value
    if today < check_out:
        return StayLabel.ACTIVE.value
    return StayLabel.COMPLETED.value


def _with_label(row: dict[str, Any], today: date) -> dict[str, Any]:
    row["stay_label"] = stay_label(
        row["status"], row["check_in_date"], row["check_out_date"], today
    )
    row["guest_name"] = f"{row.pop('first_name')} {row.pop('last_name')}"
    return row


def create_reservation(
    conn: Connection, booking: BookingRequest, principal: Optional[Principal] = None
) -> BookingResult:
    """
    Book a room for a guest.

    An authenticated guest books as itself; anyone else is resolved (or
    created) from the guest details' email. The reservation is Confirmed and
    Paid, claimed when the booker is authenticated or creates an account in
    this booking, and the room is flagged Occupied.

    Args:
        conn: SQLAlchemy DB connection (inside a transaction)
        booking: Dates, room and guest details
        principal: Authenticated caller, if any

    Returns:
        BookingResult: id, confirmation code (None when claimed), total

    Raises:
        ValidationError: If dates, room or guest fields are missing/invalid
        RoomNotFoundError: If the room does not exist
        ConflictError: If the room is under maintenance or already booked for
            an overlapping window
        UnauthorizedError: If the authenticated guest account no longer exists
        AccountAlreadyExistsError: If an account is requested for a registered email
    """
    if not booking.check_in or not booking.check_out or not booking.room_id:
        raise ValidationError("Missing required reservation information")

    quote = quote_stay(conn, booking.room_id, booking.check_in, booking.check_out)
    if quote.room_status == RoomStatus.MAINTENANCE.value:
        raise ConflictError("Room is under maintenance")

    staff_id: Optional[int] = None
    account_principal: Optional[Principal] = None
    if principal is not None and principal.is_guest:
        guest_id = principal.principal_id
        account = get_guest_by_id(conn, guest_id)
        if account is None:
            raise UnauthorizedError("Account no longer exists")
        booking_email = account["email"]
        is_claimed = True
    else:
        if booking.guest is None:
            raise ValidationError("Guest details are required")
        resolution = resolve_guest(conn, booking.guest)
        guest_id = resolution.guest_id
        booking_email = normalize_email(booking.guest.email)
        account_principal = resolution.principal
        is_claimed = resolution.account_created
        if principal is not None and principal.is_staff:
            staff_id = principal.principal_id

    if not is_room_available(conn, booking.room_id, booking.check_in, booking.check_out):
        raise ConflictError("Room is no longer available for the selected dates")

    confirmation_code = generate_confirmation_code()
    reservation_id = insert_reservation(
        conn,
        {
            "guest_id": guest_id,
            "room_id": booking.room_id,
            "staff_id": staff_id,
            "check_in_date": booking.check_in,
            "check_out_date": booking.check_out,
            "status": ReservationStatus.CONFIRMED.value,
            "total_amount": quote.total_amount,
            "payment_status": PaymentStatus.PAID.value,
            "payment_method": DEFAULT_PAYMENT_METHOD,
            "confirmation_code": confirmation_code,
            "booking_email": booking_email,
            "is_claimed": is_claimed,
        },
    )
    set_room_status(conn, booking.room_id, RoomStatus.OCCUPIED)

    reservations_created.labels(claimed=str(is_claimed).lower()).inc()
    logger.info(
        "reservation_created",
        reservation_id=reservation_id,
        room_id=booking.room_id,
        guest_id=guest_id,
        nights=quote.nights,
        total_amount=str(quote.total_amount),
        is_claimed=is_claimed,
    )

    return BookingResult(
        reservation_id=reservation_id,
        confirmation_code=None if is_claimed else confirmation_code,
        total_amount=quote.total_amount,
        nights=quote.nights,
        is_claimed=is_claimed,
        account_principal=account_principal,
    )


def email_matches(row: dict[str, Any], email: Optional[str]) -> bool:
    """
    Accept the email the reservation was booked with, or its current owner's.

    A claim may move the reservation to an account registered under another
    email; both stay valid for code lookups.
    """
    candidate = normalize_email(email)
    return bool(candidate) and candidate in (row["booking_email"], row["guest_email"])


def get_reservation(conn: Connection, reservation_id: int, today: date) -> dict[str, Any]:
    """
    Fetch a reservation with room, room type and guest details.

    Raises:
        NotFoundError: If the reservation does not exist
    """
    row = read_reservation(conn, reservation_id)
    if row is None:
        raise NotFoundError("Reservation not found")
    return _with_label(row, today)


def lookup_by_code(
    conn: Connection, confirmation_code: str, email: str, today: date
) -> dict[str, Any]:
    """
    Retrieve a reservation with its confirmation code and the booking email.

    Raises:
        NotFoundError: If no reservation has this code
        EmailMismatchError: If the email is neither the booking email nor the
            current owner's
    """
    row = get_reservation_by_code(conn, (confirmation_code or "").strip().upper())
    if row is None:
        raise NotFoundError("Reservation not found")
    if not email_matches(row, email):
        raise EmailMismatchError("The email address does not match the reservation")
    return _with_label(row, today)


def claim_reservation(
    conn: Connection, confirmation_code: str, email: str, guest_id: int
) -> str:
    """
    Bind a confirmation-code reservation to the requesting guest account.

    - Already owned by the requester: mark claimed (no-op when already claimed).
    - Owned by a different guest who has an account: AlreadyLinked.
    - Otherwise: reassign to the requester and mark claimed.

    The reassignment is a single UPDATE inside the caller's transaction, so
    ownership and the claimed flag change together or not at all.

    Args:
        conn: SQLAlchemy DB connection (inside a transaction)
        confirmation_code: Code shown at booking time
        email: Email used for the booking
        guest_id: Authenticated guest requesting the claim

    Returns:
        str: Outcome message

    Raises:
        ValidationError: If code or email is missing
        NotFoundError: If no reservation has this code
        EmailMismatchError: If the email is neither the booking email nor the
            current owner's
        AlreadyLinkedError: If another registered guest owns the reservation
    """
    if not confirmation_code or not email:
        raise ValidationError("Confirmation code and email are required")

    row = get_reservation_by_code(conn, confirmation_code.strip().upper())
    if row is None:
        reservation_claims.labels(outcome="not_found").inc()
        raise NotFoundError("Reservation not found")

    reservation_id = row["reservation_id"]

    if row["guest_id"] == guest_id and row["is_claimed"]:
        reservation_claims.labels(outcome="already_claimed").inc()
        return "Reservation is already linked to your account"

    if not email_matches(row, email):
        reservation_claims.labels(outcome="email_mismatch").inc()
        raise EmailMismatchError("The email address does not match the reservation")

    if row["guest_id"] == guest_id:
        mark_reservation_claimed(conn, reservation_id)
    elif row["guest_has_account"]:
        reservation_claims.labels(outcome="already_linked").inc()
        raise AlreadyLinkedError("This reservation is already linked to another account")
    else:
        assign_reservation_guest(conn, reservation_id, guest_id)

    reservation_claims.labels(outcome="claimed").inc()
    logger.info(
        "reservation_claimed",
        reservation_id=reservation_id,
        guest_id=guest_id,
        previous_guest_id=row["guest_id"],
    )
    return "Reservation successfully linked to your account"


def cancel_reservation(conn: Connection, reservation_id: int) -> int:
    """
    Delete a reservation and free its room.

    Removes the reservation's change requests and service charges, the
    reservation row itself, and sets the room back to Available. All steps run
    in the caller's transaction.

    Returns:
        int: Room id that was freed

    Raises:
        NotFoundError: If the reservation does not exist
    """
    row = read_reservation(conn, reservation_id)
    if row is None:
        raise NotFoundError("Reservation not found")

    room_id = row["room_id"]
    delete_reservation(conn, reservation_id)
    set_room_status(conn, room_id, RoomStatus.AVAILABLE)

    logger.info("reservation_cancelled", reservation_id=reservation_id, room_id=room_id)
    return room_id


def list_guest_reservations(conn: Connection, guest_id: int, today: date) -> list[dict[str, Any]]:
    """List claimed reservations of a guest account with derived labels."""
    return [_with_label(r, today) for r in read_guest_reservations(conn, guest_id)]


def refresh_room_statuses(conn: Connection, today: date) -> int:
    """
    Free rooms still flagged Occupied whose stays have all ended.

    Invoked synchronously before the staff listing; there is no scheduler.

    Returns:
        int: Number of rooms reset to Available
    """
    released = release_idle_rooms(conn, today)
    if released:
        logger.info("rooms_released", count=released, today=today.isoformat())
    return released


def list_all_reservations(conn: Connection, today: date) -> list[dict[str, Any]]:
    """
    Staff listing: every reservation, pending change requests first.

    Each row carries its derived label and, when a request is pending, its
    change type.
    """
    refresh_room_statuses(conn, today)
    pending = get_pending_change_types(conn)

    rows = []
    for row in read_all_reservations(conn):
        row = _with_label(row, today)
        change_type = pending.get(row["reservation_id"])
        row["pending_change_type"] = change_type
        row["has_pending_request"] = change_type is not None
        rows.append(row)

    # Stable sort keeps the latest-check-in-first order within each group
    rows.sort(key=lambda r: 0 if r["has_pending_request"] else 1)
    return rows
