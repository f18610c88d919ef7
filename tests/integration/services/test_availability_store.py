"""
Integration tests for availability and pricing against the in-memory store.
"""

from __future__ import annotations

import random
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

import pytest
from sqlalchemy import update
from sqlalchemy.engine import Connection

from hotel_reservations.db.writers.reference import insert_seasonal_rate
from hotel_reservations.db.writers.rooms import set_room_status
from hotel_reservations.errors import ConflictError, RoomNotFoundError, ValidationError
from hotel_reservations.models.enums import RoomStatus
from hotel_reservations.models.reservations import Reservation
from hotel_reservations.services.availability import (
    is_room_available,
    list_available_rooms,
    ranges_overlap,
)
from hotel_reservations.services.identity import GuestDetails
from hotel_reservations.services.pricing import quote_stay
from hotel_reservations.services.reservations import BookingRequest, create_reservation


def _book(conn: Connection, room_id: int, check_in: date, check_out: date) -> int:
    booking = BookingRequest(
        check_in=check_in,
        check_out=check_out,
        room_id=room_id,
        guest=GuestDetails(first_name="Ada", last_name="Lovelace", email="ada@example.com"),
    )
    return create_reservation(conn, booking).reservation_id


def _room_ids(rooms: list[dict[str, Any]]) -> set[int]:
    return {room["room_id"] for room in rooms}


@pytest.mark.integration
def test_all_rooms_available_in_empty_hotel(conn: Connection, hotel: Any) -> None:
    rooms = list_available_rooms(conn, date(2025, 6, 1), date(2025, 6, 3))

    assert _room_ids(rooms) == {hotel.room_101, hotel.room_102, hotel.room_201}
    # Cheapest room type first
    assert [r["room_number"] for r in rooms] == ["101", "102", "201"]
    assert rooms[0]["adjusted_rate"] == Decimal("100.00")
    assert rooms[0]["rate_multiplier"] == Decimal("1")


@pytest.mark.integration
def test_overlapping_window_excludes_room_and_back_to_back_does_not(
    conn: Connection, hotel: Any
) -> None:
    _book(conn, hotel.room_101, date(2025, 6, 1), date(2025, 6, 3))

    overlapping = list_available_rooms(conn, date(2025, 6, 2), date(2025, 6, 4))
    back_to_back = list_available_rooms(conn, date(2025, 6, 3), date(2025, 6, 5))
    before = list_available_rooms(conn, date(2025, 5, 30), date(2025, 6, 1))

    assert hotel.room_101 not in _room_ids(overlapping)
    assert hotel.room_101 in _room_ids(back_to_back)
    assert hotel.room_101 in _room_ids(before)


@pytest.mark.integration
def test_occupied_flag_does_not_hide_room_for_a_free_window(conn: Connection, hotel: Any) -> None:
    _book(conn, hotel.room_101, date(2025, 6, 1), date(2025, 6, 3))
    set_room_status(conn, hotel.room_102, RoomStatus.CLEANING)

    rooms = list_available_rooms(conn, date(2025, 7, 1), date(2025, 7, 3))

    assert {hotel.room_101, hotel.room_102} <= _room_ids(rooms)


@pytest.mark.integration
def test_room_under_maintenance_is_never_offered(conn: Connection, hotel: Any) -> None:
    set_room_status(conn, hotel.room_201, RoomStatus.MAINTENANCE)

    rooms = list_available_rooms(conn, date(2025, 7, 1), date(2025, 7, 3))

    assert hotel.room_201 not in _room_ids(rooms)


@pytest.mark.integration
def test_cancelled_and_checked_out_stays_do_not_block(conn: Connection, hotel: Any) -> None:
    first = _book(conn, hotel.room_101, date(2025, 6, 1), date(2025, 6, 3))
    second = _book(conn, hotel.room_102, date(2025, 6, 1), date(2025, 6, 3))
    conn.execute(
        update(Reservation).where(Reservation.reservation_id == first).values(status="Cancelled")
    )
    conn.execute(
        update(Reservation).where(Reservation.reservation_id == second).values(status="CheckedOut")
    )

    rooms = list_available_rooms(conn, date(2025, 6, 1), date(2025, 6, 3))

    assert {hotel.room_101, hotel.room_102} <= _room_ids(rooms)


@pytest.mark.integration
def test_is_room_available_can_ignore_the_reservation_being_moved(
    conn: Connection, hotel: Any
) -> None:
    reservation_id = _book(conn, hotel.room_101, date(2025, 6, 1), date(2025, 6, 3))

    assert not is_room_available(conn, hotel.room_101, date(2025, 6, 2), date(2025, 6, 4))
    assert is_room_available(
        conn,
        hotel.room_101,
        date(2025, 6, 2),
        date(2025, 6, 4),
        exclude_reservation_id=reservation_id,
    )


@pytest.mark.integration
@pytest.mark.parametrize(
    "check_in,check_out,message",
    [
        (None, date(2025, 6, 3), "Check-in and check-out dates are required"),
        (date(2025, 6, 3), None, "Check-in and check-out dates are required"),
        (date(2025, 6, 3), date(2025, 6, 3), "Check-out date must be after check-in date"),
    ],
)
def test_invalid_window_is_rejected(
    conn: Connection, check_in: date | None, check_out: date | None, message: str
) -> None:
    with pytest.raises(ValidationError, match=message):
        list_available_rooms(conn, check_in, check_out)


@pytest.mark.integration
def test_seasonal_multiplier_applies_from_check_in_day(conn: Connection, hotel: Any) -> None:
    insert_seasonal_rate(
        conn, hotel.standard_type_id, date(2025, 7, 1), date(2025, 7, 31), Decimal("1.50")
    )

    in_season = list_available_rooms(conn, date(2025, 7, 31), date(2025, 8, 2))
    off_season = list_available_rooms(conn, date(2025, 6, 29), date(2025, 7, 2))

    standard_in = next(r for r in in_season if r["room_id"] == hotel.room_101)
    standard_off = next(r for r in off_season if r["room_id"] == hotel.room_101)
    deluxe_in = next(r for r in in_season if r["room_id"] == hotel.room_201)
    assert standard_in["adjusted_rate"] == Decimal("150.00")
    assert standard_off["adjusted_rate"] == Decimal("100.00")
    assert deluxe_in["adjusted_rate"] == Decimal("150.00")


@pytest.mark.integration
def test_quote_is_not_prorated_across_seasons(conn: Connection, hotel: Any) -> None:
    """A stay starting the last season day is billed at that season's rate for every night."""
    insert_seasonal_rate(
        conn, hotel.standard_type_id, date(2025, 7, 1), date(2025, 7, 31), Decimal("1.50")
    )

    quote = quote_stay(conn, hotel.room_101, date(2025, 7, 31), date(2025, 8, 4))

    assert quote.nights == 4
    assert quote.nightly_rate == Decimal("150.00")
    assert quote.total_amount == Decimal("600.00")


@pytest.mark.integration
def test_first_matching_season_by_id_wins(conn: Connection, hotel: Any) -> None:
    insert_seasonal_rate(
        conn, hotel.standard_type_id, date(2025, 7, 1), date(2025, 7, 31), Decimal("1.20")
    )
    insert_seasonal_rate(
        conn, hotel.standard_type_id, date(2025, 7, 10), date(2025, 7, 20), Decimal("2.00")
    )

    quote = quote_stay(conn, hotel.room_101, date(2025, 7, 15), date(2025, 7, 16))

    assert quote.rate_multiplier == Decimal("1.20")
    assert quote.total_amount == Decimal("120.00")


@pytest.mark.integration
def test_quote_for_unknown_room(conn: Connection) -> None:
    with pytest.raises(RoomNotFoundError, match="Room 999 not found"):
        quote_stay(conn, 999, date(2025, 6, 1), date(2025, 6, 3))


@pytest.mark.integration
def test_quote_validates_dates_before_looking_up_room(conn: Connection) -> None:
    with pytest.raises(ValidationError):
        quote_stay(conn, 999, date(2025, 6, 3), date(2025, 6, 1))


@pytest.mark.integration
def test_random_bookings_never_overlap_and_availability_agrees(
    conn: Connection, hotel: Any
) -> None:
    """Book random windows, then compare availability with a brute-force check."""
    rng = random.Random(20250601)
    start = date(2025, 6, 1)
    rooms = [hotel.room_101, hotel.room_102, hotel.room_201]
    booked: dict[int, list[tuple[date, date]]] = {room_id: [] for room_id in rooms}

    for _ in range(60):
        room_id = rng.choice(rooms)
        check_in = start + timedelta(days=rng.randint(0, 40))
        check_out = check_in + timedelta(days=rng.randint(1, 6))
        clashes = any(ranges_overlap(check_in, check_out, a, b) for a, b in booked[room_id])
        if clashes:
            with pytest.raises(ConflictError):
                _book(conn, room_id, check_in, check_out)
        else:
            _book(conn, room_id, check_in, check_out)
            booked[room_id].append((check_in, check_out))

    for room_id, stays in booked.items():
        for i, (a_in, a_out) in enumerate(stays):
            for b_in, b_out in stays[i + 1 :]:
                assert not ranges_overlap(a_in, a_out, b_in, b_out)

    for _ in range(40):
        check_in = start + timedelta(days=rng.randint(0, 45))
        check_out = check_in + timedelta(days=rng.randint(1, 7))
        expected = {
            room_id
            for room_id, stays in booked.items()
            if not any(ranges_overlap(check_in, check_out, a, b) for a, b in stays)
        }

        assert _room_ids(list_available_rooms(conn, check_in, check_out)) == expected
