from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_reservations.models.people import GuestPreference
from hotel_reservations.models.services import Service


def list_services(conn: Connection) -> list[dict[str, Any]]:
    """Return the service catalogue ordered by name."""
    rows = conn.execute(
        select(Service.service_id, Service.service_name, Service.base_price).order_by(
            Service.service_name
        )
    ).mappings()
    return [dict(r) for r in rows]


def get_services_by_id(conn: Connection, service_ids: list[int]) -> dict[int, dict[str, Any]]:
    """
    Fetch services keyed by id.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        service_ids (list[int]): Service IDs to look up.

    Returns:
        dict[int, dict[str, Any]]: Found services; unknown ids are absent.
    """
    if not service_ids:
        return {}
    rows = conn.execute(select(Service).where(Service.service_id.in_(service_ids))).mappings()
    return {r["service_id"]: dict(r) for r in rows}


def get_preference(
    conn: Connection, guest_id: int, room_type_id: int
) -> Optional[dict[str, Any]]:
    row = (
        conn.execute(
            select(GuestPreference).where(
                GuestPreference.guest_id == guest_id,
                GuestPreference.room_type_id == room_type_id,
            )
        )
        .mappings()
        .first()
    )
    return dict(row) if row else None


def list_preferred_room_types(conn: Connection, guest_id: int) -> list[int]:
    rows = conn.execute(
        select(GuestPreference.room_type_id)
        .where(GuestPreference.guest_id == guest_id)
        .order_by(GuestPreference.room_type_id)
    )
    return list(rows.scalars().all())
