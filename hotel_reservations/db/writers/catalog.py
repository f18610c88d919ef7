from typing import Any

from sqlalchemy import delete, insert
from sqlalchemy.engine import Connection

from hotel_reservations.models.people import GuestPreference
from hotel_reservations.models.services import ServiceCharge


def insert_service_charges(conn: Connection, rows: list[dict[str, Any]]) -> None:
    """
    Insert service charge lines.

    Args:
        conn (Connection): SQLAlchemy DB connection (inside a transaction).
        rows (list[dict[str, Any]]): reservation_id, service_id, quantity and
            charged_amount per line.
    """
    if not rows:
        return
    conn.execute(insert(ServiceCharge), rows)


def insert_preference(conn: Connection, guest_id: int, room_type_id: int) -> None:
    conn.execute(insert(GuestPreference).values(guest_id=guest_id, room_type_id=room_type_id))


def delete_preference(conn: Connection, guest_id: int, room_type_id: int) -> int:
    """
    Remove a favourite room type.

    Returns:
        int: Number of rows deleted (0 when there was nothing to remove).
    """
    result = conn.execute(
        delete(GuestPreference).where(
            GuestPreference.guest_id == guest_id,
            GuestPreference.room_type_id == room_type_id,
        )
    )
    return result.rowcount or 0
