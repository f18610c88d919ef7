"""
Integration tests for the change-request workflow.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Callable

import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from hotel_reservations.db.readers.reservations import get_reservation as read_reservation
from hotel_reservations.db.readers.rooms import get_room
from hotel_reservations.errors import (
    ForbiddenError,
    NoPendingRequestError,
    NotFoundError,
    ValidationError,
)
from hotel_reservations.models.enums import ChangeType, UserType
from hotel_reservations.models.reservations import ReservationChange
from hotel_reservations.models.services import ServiceCharge
from hotel_reservations.security import Principal
from hotel_reservations.services.availability import is_room_available
from hotel_reservations.services.billing import add_service_charges, get_bill
from hotel_reservations.services.change_requests import (
    approve_change_request,
    has_pending_request,
    reject_change_request,
    submit_change_request,
)
from hotel_reservations.services.reservations import BookingRequest, create_reservation

JUNE_1 = date(2025, 6, 1)
JUNE_3 = date(2025, 6, 3)


@pytest.fixture
def booking(conn: Connection, hotel: Any, make_guest: Callable[..., int]) -> tuple[int, int]:
    """A claimed reservation of room 101 for June 1-3; returns (reservation_id, guest_id)."""
    guest_id = make_guest(conn, password="secret1")
    principal = Principal(guest_id, UserType.GUEST, "ada@example.com")
    result = create_reservation(conn, BookingRequest(JUNE_1, JUNE_3, hotel.room_101, None), principal)
    return result.reservation_id, guest_id


def _change_rows(conn: Connection, reservation_id: int) -> list[dict[str, Any]]:
    rows = conn.execute(
        select(ReservationChange).where(ReservationChange.reservation_id == reservation_id)
    ).mappings()
    return [dict(r) for r in rows]


@pytest.mark.integration
def test_submit_date_change_stores_old_and_new_dates(
    conn: Connection, booking: tuple[int, int]
) -> None:
    reservation_id, guest_id = booking

    change_id = submit_change_request(
        conn,
        reservation_id,
        guest_id,
        ChangeType.DATE_CHANGE,
        new_check_out=date(2025, 6, 5),
        notes="Staying longer",
    )

    [row] = _change_rows(conn, reservation_id)
    assert row["reservation_change_id"] == change_id
    assert row["request_status"] == "Pending"
    assert row["old_check_in_date"] == JUNE_1
    assert row["old_check_out_date"] == JUNE_3
    # Omitted check-in falls back to the current one
    assert row["new_check_in_date"] == JUNE_1
    assert row["new_check_out_date"] == date(2025, 6, 5)
    assert row["notes"] == "Staying longer"
    assert has_pending_request(conn, reservation_id, guest_id) is True


@pytest.mark.integration
def test_submit_inverted_range_is_rejected(conn: Connection, booking: tuple[int, int]) -> None:
    reservation_id, guest_id = booking

    with pytest.raises(ValidationError):
        submit_change_request(
            conn, reservation_id, guest_id, ChangeType.DATE_CHANGE, new_check_in=date(2025, 6, 4)
        )

    assert _change_rows(conn, reservation_id) == []


@pytest.mark.integration
def test_only_the_owner_may_submit_or_check(
    conn: Connection, booking: tuple[int, int], make_guest: Callable[..., int]
) -> None:
    reservation_id, _ = booking
    stranger_id = make_guest(conn, email="mallory@example.com", password="secret1")

    with pytest.raises(ForbiddenError):
        submit_change_request(conn, reservation_id, stranger_id, ChangeType.CANCELLATION)
    with pytest.raises(ForbiddenError):
        has_pending_request(conn, reservation_id, stranger_id)
    with pytest.raises(NotFoundError):
        submit_change_request(conn, 999, stranger_id, ChangeType.CANCELLATION)


@pytest.mark.integration
def test_approving_date_change_moves_dates_and_reprices_total(
    conn: Connection, booking: tuple[int, int], make_staff: Callable[..., int]
) -> None:
    reservation_id, guest_id = booking
    staff_id = make_staff(conn)
    submit_change_request(
        conn,
        reservation_id,
        guest_id,
        ChangeType.DATE_CHANGE,
        new_check_in=date(2025, 6, 10),
        new_check_out=date(2025, 6, 14),
    )

    message = approve_change_request(conn, reservation_id, staff_id)

    assert message == "Reservation updated successfully"
    row = read_reservation(conn, reservation_id)
    assert row["check_in_date"] == date(2025, 6, 10)
    assert row["check_out_date"] == date(2025, 6, 14)
    assert row["staff_id"] == staff_id
    # Four nights at the Standard rate
    assert Decimal(str(row["total_amount"])) == Decimal("400.00")
    assert _change_rows(conn, reservation_id) == []
    assert has_pending_request(conn, reservation_id, guest_id) is False


@pytest.mark.integration
def test_approved_date_change_keeps_total_in_line_with_bill(
    conn: Connection, hotel: Any, booking: tuple[int, int], make_staff: Callable[..., int]
) -> None:
    reservation_id, guest_id = booking
    guest = Principal(guest_id, UserType.GUEST, "ada@example.com")
    add_service_charges(conn, reservation_id, [(hotel.breakfast_id, 2)], guest)
    submit_change_request(
        conn,
        reservation_id,
        guest_id,
        ChangeType.DATE_CHANGE,
        new_check_out=date(2025, 6, 2),
    )

    approve_change_request(conn, reservation_id, make_staff(conn))

    row = read_reservation(conn, reservation_id)
    bill = get_bill(conn, reservation_id, guest)
    assert bill["room_total"] == Decimal("100.00")
    assert bill["bill_total"] == Decimal("130.00")
    assert Decimal(str(row["total_amount"])) == bill["bill_total"]


@pytest.mark.integration
def test_approving_cancellation_deletes_reservation_and_frees_room(
    conn: Connection, hotel: Any, booking: tuple[int, int], make_staff: Callable[..., int]
) -> None:
    reservation_id, guest_id = booking
    staff_id = make_staff(conn)
    add_service_charges(
        conn, reservation_id, [(hotel.breakfast_id, 2)], Principal(guest_id, UserType.GUEST, "")
    )
    submit_change_request(conn, reservation_id, guest_id, ChangeType.CANCELLATION)
    assert not is_room_available(conn, hotel.room_101, JUNE_1, JUNE_3)

    message = approve_change_request(conn, reservation_id, staff_id)

    assert message == "Reservation cancelled successfully"
    assert read_reservation(conn, reservation_id) is None
    assert _change_rows(conn, reservation_id) == []
    charges = conn.execute(
        select(func.count())
        .select_from(ServiceCharge)
        .where(ServiceCharge.reservation_id == reservation_id)
    ).scalar_one()
    assert charges == 0
    assert get_room(conn, hotel.room_101)["status"] == "Available"
    assert is_room_available(conn, hotel.room_101, JUNE_1, JUNE_3)


@pytest.mark.integration
def test_rejecting_leaves_reservation_untouched(
    conn: Connection, booking: tuple[int, int]
) -> None:
    reservation_id, guest_id = booking
    before = read_reservation(conn, reservation_id)
    submit_change_request(
        conn, reservation_id, guest_id, ChangeType.DATE_CHANGE, new_check_out=date(2025, 6, 9)
    )

    message = reject_change_request(conn, reservation_id)

    assert message == "Request rejected successfully"
    assert read_reservation(conn, reservation_id) == before
    assert _change_rows(conn, reservation_id) == []


@pytest.mark.integration
def test_approve_acts_on_most_recent_pending_request(
    conn: Connection, booking: tuple[int, int], make_staff: Callable[..., int]
) -> None:
    reservation_id, guest_id = booking
    first = submit_change_request(
        conn, reservation_id, guest_id, ChangeType.DATE_CHANGE, new_check_out=date(2025, 6, 4)
    )
    submit_change_request(
        conn, reservation_id, guest_id, ChangeType.DATE_CHANGE, new_check_out=date(2025, 6, 6)
    )

    approve_change_request(conn, reservation_id, make_staff(conn))

    assert read_reservation(conn, reservation_id)["check_out_date"] == date(2025, 6, 6)
    remaining = _change_rows(conn, reservation_id)
    assert [r["reservation_change_id"] for r in remaining] == [first]


@pytest.mark.integration
def test_resolving_without_pending_request_fails(
    conn: Connection, booking: tuple[int, int], make_staff: Callable[..., int]
) -> None:
    reservation_id, _ = booking
    staff_id = make_staff(conn)

    with pytest.raises(NoPendingRequestError, match="No pending request found"):
        approve_change_request(conn, reservation_id, staff_id)
    with pytest.raises(NoPendingRequestError):
        reject_change_request(conn, reservation_id)
