"""
Integration tests for service charges and bills.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Callable

import pytest
from sqlalchemy.engine import Connection

from hotel_reservations.db.readers.reservations import get_reservation as read_reservation
from hotel_reservations.db.writers.reference import insert_seasonal_rate
from hotel_reservations.errors import ForbiddenError, NotFoundError, ValidationError
from hotel_reservations.models.enums import UserType
from hotel_reservations.security import Principal
from hotel_reservations.services.billing import add_service_charges, get_bill
from hotel_reservations.services.identity import GuestDetails
from hotel_reservations.services.reservations import BookingRequest, create_reservation


@pytest.fixture
def guest_booking(
    conn: Connection, hotel: Any, make_guest: Callable[..., int]
) -> tuple[int, Principal]:
    guest_id = make_guest(conn, password="secret1")
    principal = Principal(guest_id, UserType.GUEST, "ada@example.com")
    result = create_reservation(
        conn, BookingRequest(date(2025, 6, 1), date(2025, 6, 4), hotel.room_201, None), principal
    )
    return result.reservation_id, principal


@pytest.mark.integration
def test_service_charges_raise_reservation_total(
    conn: Connection, hotel: Any, guest_booking: tuple[int, Principal]
) -> None:
    reservation_id, guest = guest_booking

    added = add_service_charges(
        conn, reservation_id, [(hotel.breakfast_id, 3), (hotel.spa_id, 1)], guest
    )

    assert added == Decimal("105.00")
    total = read_reservation(conn, reservation_id)["total_amount"]
    assert Decimal(str(total)) == Decimal("555.00")


@pytest.mark.integration
def test_bill_lists_room_and_service_lines(
    conn: Connection, hotel: Any, guest_booking: tuple[int, Principal]
) -> None:
    reservation_id, guest = guest_booking
    add_service_charges(conn, reservation_id, [(hotel.breakfast_id, 2)], guest)

    bill = get_bill(conn, reservation_id, guest)

    assert bill["nights"] == 3
    assert bill["nightly_rate"] == Decimal("150.00")
    assert bill["room_total"] == Decimal("450.00")
    assert [(c["service_name"], c["quantity"], c["charged_amount"]) for c in bill["service_charges"]] == [
        ("Breakfast", 2, Decimal("30.00"))
    ]
    assert bill["service_charge_total"] == Decimal("30.00")
    assert bill["bill_total"] == Decimal("480.00")
    assert bill["reservation"]["guest_name"] == "Ada Lovelace"
    assert bill["reservation"]["room_type"] == "Deluxe"


@pytest.mark.integration
def test_bill_uses_check_in_season(conn: Connection, hotel: Any) -> None:
    insert_seasonal_rate(
        conn, hotel.standard_type_id, date(2025, 12, 20), date(2025, 12, 31), Decimal("1.50")
    )
    result = create_reservation(
        conn,
        BookingRequest(
            date(2025, 12, 30),
            date(2026, 1, 2),
            hotel.room_101,
            GuestDetails("Ada", "Lovelace", "ada@example.com"),
        ),
    )
    staff = Principal(1, UserType.STAFF, "frontdesk@example.com")

    bill = get_bill(conn, result.reservation_id, staff)

    assert bill["nightly_rate"] == Decimal("150.00")
    assert bill["room_total"] == Decimal("450.00")
    assert bill["bill_total"] == result.total_amount


@pytest.mark.integration
def test_other_guests_cannot_see_or_charge(
    conn: Connection,
    hotel: Any,
    guest_booking: tuple[int, Principal],
    make_guest: Callable[..., int],
) -> None:
    reservation_id, _ = guest_booking
    stranger = Principal(
        make_guest(conn, email="mallory@example.com", password="secret1"),
        UserType.GUEST,
        "mallory@example.com",
    )

    with pytest.raises(ForbiddenError):
        get_bill(conn, reservation_id, stranger)
    with pytest.raises(ForbiddenError):
        add_service_charges(conn, reservation_id, [(hotel.spa_id, 1)], stranger)
    with pytest.raises(NotFoundError):
        get_bill(conn, 999, stranger)


@pytest.mark.integration
@pytest.mark.parametrize(
    "items,message",
    [
        ([], "At least one service must be selected"),
        ([(1, 0)], "Quantity must be at least 1"),
        ([(999, 1)], "Unknown service 999"),
    ],
)
def test_invalid_charge_lines_add_nothing(
    conn: Connection,
    guest_booking: tuple[int, Principal],
    items: list[tuple[int, int]],
    message: str,
) -> None:
    reservation_id, guest = guest_booking

    with pytest.raises(ValidationError, match=message):
        add_service_charges(conn, reservation_id, items, guest)

    assert get_bill(conn, reservation_id, guest)["service_charges"] == []
