"""
Integration tests for favourite room types and the staff dashboard.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Callable

import pytest
from sqlalchemy.engine import Connection

from hotel_reservations.errors import NotFoundError
from hotel_reservations.models.enums import UserType
from hotel_reservations.security import Principal
from hotel_reservations.services.analytics import dashboard, occupancy
from hotel_reservations.services.billing import add_service_charges
from hotel_reservations.services.identity import GuestDetails
from hotel_reservations.services.preferences import (
    add_favorite,
    is_favorite,
    list_favorites,
    remove_favorite,
)
from hotel_reservations.services.reservations import BookingRequest, create_reservation
from hotel_reservations.utils.datetime import utc_today

STAFF = Principal(1, UserType.STAFF, "frontdesk@example.com")


def _book(conn: Connection, room_id: int, check_in: date, nights: int) -> int:
    result = create_reservation(
        conn,
        BookingRequest(
            check_in,
            check_in + timedelta(days=nights),
            room_id,
            GuestDetails("Ada", "Lovelace", "ada@example.com"),
        ),
    )
    return result.reservation_id


@pytest.mark.integration
def test_favourites_add_list_and_remove(
    conn: Connection, hotel: Any, make_guest: Callable[..., int]
) -> None:
    guest_id = make_guest(conn, password="secret1")

    assert add_favorite(conn, guest_id, hotel.deluxe_type_id) == "Preference added"
    assert add_favorite(conn, guest_id, hotel.deluxe_type_id) == "Preference already saved"
    assert add_favorite(conn, guest_id, hotel.standard_type_id) == "Preference added"

    assert list_favorites(conn, guest_id) == sorted([hotel.standard_type_id, hotel.deluxe_type_id])
    assert is_favorite(conn, guest_id, hotel.deluxe_type_id)

    assert remove_favorite(conn, guest_id, hotel.deluxe_type_id) == "Preference removed"
    assert remove_favorite(conn, guest_id, hotel.deluxe_type_id) == "No preference found to delete"
    assert not is_favorite(conn, guest_id, hotel.deluxe_type_id)


@pytest.mark.integration
def test_favourite_of_unknown_room_type(
    conn: Connection, make_guest: Callable[..., int]
) -> None:
    guest_id = make_guest(conn, password="secret1")

    with pytest.raises(NotFoundError, match="Room type not found"):
        add_favorite(conn, guest_id, 999)


@pytest.mark.integration
def test_occupancy_counts_stays_covering_today(conn: Connection, hotel: Any) -> None:
    today = date(2025, 6, 10)
    _book(conn, hotel.room_101, date(2025, 6, 9), 2)
    # Checks out today, so it no longer counts
    _book(conn, hotel.room_102, date(2025, 6, 8), 2)
    _book(conn, hotel.room_201, date(2025, 6, 11), 1)

    assert occupancy(conn, today) == {
        "occupied_rooms": 1,
        "total_rooms": 3,
        "occupancy_rate": 33,
    }


@pytest.mark.integration
def test_occupancy_of_empty_hotel(db_engine: Any) -> None:
    with db_engine.begin() as conn:
        assert occupancy(conn, date(2025, 6, 1)) == {
            "occupied_rooms": 0,
            "total_rooms": 0,
            "occupancy_rate": 0,
        }


@pytest.mark.integration
def test_dashboard_popularity_within_lookback(conn: Connection, hotel: Any) -> None:
    today = utc_today()
    first = _book(conn, hotel.room_101, today, 2)
    _book(conn, hotel.room_102, today + timedelta(days=1), 1)
    _book(conn, hotel.room_201, today, 3)
    # Starts before the window
    _book(conn, hotel.room_201, today - timedelta(days=200), 2)
    add_service_charges(conn, first, [(hotel.breakfast_id, 2), (hotel.spa_id, 1)], STAFF)
    add_service_charges(conn, first, [(hotel.breakfast_id, 1)], STAFF)

    result = dashboard(conn, today)

    assert result["occupancy"]["occupied_rooms"] == 2
    assert result["room_type_popularity"] == [
        {"type_name": "Standard", "bookings": 2},
        {"type_name": "Deluxe", "bookings": 1},
    ]
    services = [
        (s["service_name"], s["usage_count"], s["total_revenue"])
        for s in result["service_popularity"]
    ]
    assert services == [
        ("Breakfast", 2, Decimal("45.00")),
        ("Spa Access", 1, Decimal("60.00")),
    ]
