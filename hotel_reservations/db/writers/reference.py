from datetime import date
from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy import insert
from sqlalchemy.engine import Connection

from hotel_reservations.models.enums import RoomStatus
from hotel_reservations.models.rooms import Room, RoomType, SeasonalRate
from hotel_reservations.models.services import Service

logger = structlog.get_logger(__name__)


def insert_room_type(conn: Connection, type_name: str, base_rate: Decimal) -> int:
    result = conn.execute(insert(RoomType).values(type_name=type_name, base_rate=base_rate))
    return int(result.inserted_primary_key[0])


def insert_room(
    conn: Connection,
    room_type_id: int,
    room_number: str,
    floor_number: int,
    status: RoomStatus = RoomStatus.AVAILABLE,
) -> int:
    result = conn.execute(
        insert(Room).values(
            room_type_id=room_type_id,
            room_number=room_number,
            floor_number=floor_number,
            status=status.value,
        )
    )
    return int(result.inserted_primary_key[0])


def insert_seasonal_rate(
    conn: Connection,
    room_type_id: int,
    start_date: date,
    end_date: date,
    rate_multiplier: Decimal,
) -> int:
    """
    Insert a seasonal multiplier for a room type.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        room_type_id (int): Room type the season applies to.
        start_date (date): First day of the season (inclusive).
        end_date (date): Last day of the season (inclusive).
        rate_multiplier (Decimal): Factor applied to the base rate.

    Returns:
        int: New seasonal_rate_id.
    """
    result = conn.execute(
        insert(SeasonalRate).values(
            room_type_id=room_type_id,
            start_date=start_date,
            end_date=end_date,
            rate_multiplier=rate_multiplier,
        )
    )
    return int(result.inserted_primary_key[0])


def insert_service(
    conn: Connection, service_name: str, base_price: Decimal, service_id: Optional[int] = None
) -> int:
    values = {"service_name": service_name, "base_price": base_price}
    if service_id is not None:
        values["service_id"] = service_id
    result = conn.execute(insert(Service).values(**values))
    return int(result.inserted_primary_key[0])
