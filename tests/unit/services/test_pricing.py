"""
Unit tests for stay pricing arithmetic.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from hotel_reservations.errors import ValidationError
from hotel_reservations.services.pricing import calculate_nights, nightly_rate, to_money


@pytest.mark.unit
def test_calculate_nights_counts_calendar_days() -> None:
    assert calculate_nights(date(2025, 6, 1), date(2025, 6, 3)) == 2


@pytest.mark.unit
def test_calculate_nights_single_night() -> None:
    assert calculate_nights(date(2025, 12, 31), date(2026, 1, 1)) == 1


@pytest.mark.unit
def test_calculate_nights_ignores_wall_clock_time() -> None:
    """Late check-in and early check-out on the same dates still count whole nights."""
    nights = calculate_nights(datetime(2025, 6, 1, 23, 30), datetime(2025, 6, 3, 0, 15))

    assert nights == 2


@pytest.mark.unit
@pytest.mark.parametrize(
    "check_in,check_out",
    [
        (date(2025, 6, 3), date(2025, 6, 3)),
        (date(2025, 6, 3), date(2025, 6, 1)),
    ],
)
def test_calculate_nights_rejects_empty_or_inverted_range(check_in: date, check_out: date) -> None:
    with pytest.raises(ValidationError) as exc_info:
        calculate_nights(check_in, check_out)

    assert exc_info.value.message == "Check-out date must be after check-in date"
    assert exc_info.value.status_code == 400


@pytest.mark.unit
def test_nightly_rate_applies_multiplier_and_rounds_to_cents() -> None:
    assert nightly_rate(Decimal("100.00"), Decimal("1.25")) == Decimal("125.00")
    assert nightly_rate(Decimal("99.99"), Decimal("1.15")) == Decimal("114.99")


@pytest.mark.unit
def test_to_money_rounds_half_up() -> None:
    assert to_money("10.005") == Decimal("10.01")
    assert to_money(3) == Decimal("3.00")
