"""Favourite room types of guest accounts."""

from sqlalchemy.engine import Connection

from hotel_reservations.db.readers.catalog import get_preference, list_preferred_room_types
from hotel_reservations.db.readers.rooms import room_type_exists
from hotel_reservations.db.writers.catalog import delete_preference, insert_preference
from hotel_reservations.errors import NotFoundError


def is_favorite(conn: Connection, guest_id: int, room_type_id: int) -> bool:
    return get_preference(conn, guest_id, room_type_id) is not None


def list_favorites(conn: Connection, guest_id: int) -> list[int]:
    return list_preferred_room_types(conn, guest_id)


def add_favorite(conn: Connection, guest_id: int, room_type_id: int) -> str:
    """
    Add a favourite room type; adding an existing favourite is a no-op.

    Raises:
        NotFoundError: If the room type does not exist
    """
    if not room_type_exists(conn, room_type_id):
        raise NotFoundError("Room type not found")
    if get_preference(conn, guest_id, room_type_id) is not None:
        return "Preference already saved"
    insert_preference(conn, guest_id, room_type_id)
    return "Preference added"


def remove_favorite(conn: Connection, guest_id: int, room_type_id: int) -> str:
    if delete_preference(conn, guest_id, room_type_id) == 0:
        return "No preference found to delete"
    return "Preference removed"
