from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from hotel_reservations.models.people import Guest, Staff


def get_guest_by_email(conn: Connection, email: str) -> Optional[dict[str, Any]]:
    """
    Fetch a guest row by (lower-cased) email.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        email (str): Guest email; callers normalize it first.

    Returns:
        Optional[dict[str, Any]]: Guest row or None if not found.
    """
    row = conn.execute(select(Guest).where(Guest.email == email)).mappings().first()
    return dict(row) if row else None


def get_guest_by_id(conn: Connection, guest_id: int) -> Optional[dict[str, Any]]:
    row = conn.execute(select(Guest).where(Guest.guest_id == guest_id)).mappings().first()
    return dict(row) if row else None


def get_staff_by_email(conn: Connection, email: str) -> Optional[dict[str, Any]]:
    """
    Fetch a staff row by (lower-cased) email.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        email (str): Staff email.

    Returns:
        Optional[dict[str, Any]]: Staff row or None if not found.
    """
    row = conn.execute(select(Staff).where(Staff.email == email)).mappings().first()
    return dict(row) if row else None


def get_staff_by_id(conn: Connection, staff_id: int) -> Optional[dict[str, Any]]:
    row = conn.execute(select(Staff).where(Staff.staff_id == staff_id)).mappings().first()
    return dict(row) if row else None
