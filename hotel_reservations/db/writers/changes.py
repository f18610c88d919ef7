from typing import Any

from sqlalchemy import delete, insert
from sqlalchemy.engine import Connection

from hotel_reservations.models.reservations import ReservationChange


def insert_change_request(conn: Connection, row: dict[str, Any]) -> int:
    """
    Insert a change request row and return its id.

    No uniqueness is enforced on Pending rows; a second request for the same
    reservation is stored alongside the first.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        row (dict[str, Any]): Column values for reservation_change.

    Returns:
        int: New reservation_change_id.
    """
    result = conn.execute(insert(ReservationChange).values(**row))
    return int(result.inserted_primary_key[0])


def delete_change_request(conn: Connection, reservation_change_id: int) -> None:
    conn.execute(
        delete(ReservationChange).where(
            ReservationChange.reservation_change_id == reservation_change_id
        )
    )
