from typing import Any, Optional

import structlog
from sqlalchemy import insert, update
from sqlalchemy.engine import Connection

from hotel_reservations.models.people import Guest, Staff

logger = structlog.get_logger(__name__)


def insert_guest(conn: Connection, data: dict[str, Any]) -> int:
    """
    Insert a guest row.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        data (dict[str, Any]): first_name, last_name, email, phone and, for
            registered accounts, password_hash with is_account_created=True.

    Returns:
        int: New guest_id.
    """
    result = conn.execute(insert(Guest).values(**data))
    guest_id = int(result.inserted_primary_key[0])
    logger.info(
        "guest_created",
        guest_id=guest_id,
        is_account_created=bool(data.get("is_account_created")),
    )
    return guest_id


def upgrade_guest_account(
    conn: Connection,
    guest_id: int,
    first_name: str,
    last_name: str,
    phone: Optional[str],
    password_hash: str,
) -> None:
    """
    Turn an anonymous guest row into an account, in place.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        guest_id (int): Existing guest without an account.
        first_name (str): Name supplied at registration.
        last_name (str): Name supplied at registration.
        phone (Optional[str]): Phone supplied at registration.
        password_hash (str): bcrypt hash of the new password.
    """
    conn.execute(
        update(Guest)
        .where(Guest.guest_id == guest_id)
        .values(
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            password_hash=password_hash,
            is_account_created=True,
        )
    )
    logger.info("guest_account_upgraded", guest_id=guest_id)


def insert_staff(conn: Connection, data: dict[str, Any]) -> int:
    result = conn.execute(insert(Staff).values(**data))
    return int(result.inserted_primary_key[0])
