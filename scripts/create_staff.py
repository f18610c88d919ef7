import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import getpass

import structlog

from hotel_reservations.db.engine import engine
from hotel_reservations.db.readers.people import get_staff_by_email
from hotel_reservations.db.writers.people import insert_staff
from hotel_reservations.logging_config import setup_logging
from hotel_reservations.security import hash_password
from hotel_reservations.services.identity import MIN_PASSWORD_LENGTH, normalize_email

setup_logging()
logger = structlog.get_logger(__name__)


def create_staff(first_name: str, last_name: str, email: str, password: str) -> int:
    """
    Provision a staff account. Staff cannot self-register through the API.

    Raises:
        ValueError: If the password is too short or the email is taken
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    email = normalize_email(email)
    with engine.begin() as conn:
        if get_staff_by_email(conn, email) is not None:
            raise ValueError(f"Staff member {email} already exists")
        staff_id = insert_staff(
            conn,
            {
                "first_name": first_name,
                "last_name": last_name,
                "email": email,
                "password_hash": hash_password(password),
            },
        )

    logger.info("staff_created", staff_id=staff_id, email=email)
    return staff_id


# === CLI ===

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a hotel staff account.")
    parser.add_argument("--email", required=True, help="Login email of the staff member")
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    parser.add_argument("--password", help="Password (prompted for when omitted)")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    create_staff(args.first_name, args.last_name, args.email, password)
