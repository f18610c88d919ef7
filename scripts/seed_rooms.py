import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
from datetime import date
from decimal import Decimal

import structlog

from hotel_reservations.db.engine import engine
from hotel_reservations.db.writers.reference import (
    insert_room,
    insert_room_type,
    insert_seasonal_rate,
    insert_service,
)
from hotel_reservations.logging_config import setup_logging
from hotel_reservations.models import people, reservations  # noqa: F401
from hotel_reservations.models.base import Base

setup_logging()
logger = structlog.get_logger(__name__)

# (type name, base rate, room numbers)
ROOM_TYPES = [
    ("Standard", Decimal("100.00"), ["101", "102", "103", "104"]),
    ("Deluxe", Decimal("150.00"), ["201", "202", "203"]),
    ("Suite", Decimal("250.00"), ["301", "302"]),
]

SERVICES = [
    ("Breakfast", Decimal("15.00")),
    ("Airport Transfer", Decimal("45.00")),
    ("Spa Access", Decimal("60.00")),
    ("Parking", Decimal("20.00")),
]


def seed(year: int) -> None:
    """Load demo room types, rooms, a summer and a holiday season, and services."""
    with engine.begin() as conn:
        for type_name, base_rate, room_numbers in ROOM_TYPES:
            room_type_id = insert_room_type(conn, type_name, base_rate)
            for room_number in room_numbers:
                insert_room(conn, room_type_id, room_number, floor_number=int(room_number[0]))

            insert_seasonal_rate(
                conn, room_type_id, date(year, 6, 15), date(year, 8, 31), Decimal("1.25")
            )
            insert_seasonal_rate(
                conn, room_type_id, date(year, 12, 20), date(year, 12, 31), Decimal("1.50")
            )

        for service_name, base_price in SERVICES:
            insert_service(conn, service_name, base_price)

    logger.info("reference_data_seeded", room_types=len(ROOM_TYPES), services=len(SERVICES))


# === CLI ===

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo hotel reference data.")
    parser.add_argument("--year", type=int, default=date.today().year, help="Season year")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables from the models first (local use only; prefer alembic)",
    )
    args = parser.parse_args()

    if args.create_tables:
        Base.metadata.create_all(engine)
    seed(args.year)
