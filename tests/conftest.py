"""
Shared fixtures: an in-memory reservation store and an API client bound to it.

Required settings are given test values before the package is imported, so
importing hotel_reservations never needs a real .env.
"""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./hotel_reservations_test.db")
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:3000")
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Generator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from hotel_reservations.db.writers.people import insert_guest, insert_staff
from hotel_reservations.db.writers.reference import (
    insert_room,
    insert_room_type,
    insert_service,
)
from hotel_reservations.dependencies import get_db_engine
from hotel_reservations.main import app
from hotel_reservations.models import people, reservations, rooms, services  # noqa: F401
from hotel_reservations.models.base import Base
from hotel_reservations.models.enums import UserType
from hotel_reservations.security import Principal, create_access_token, hash_password


@dataclass(frozen=True)
class Hotel:
    """Ids of the reference rows loaded by the hotel fixture."""

    standard_type_id: int
    deluxe_type_id: int
    room_101: int
    room_102: int
    room_201: int
    breakfast_id: int
    spa_id: int


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Fresh in-memory SQLite store with the full schema."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def hotel(db_engine: Engine) -> Hotel:
    """Two room types (base 100 and 150), three rooms and two services."""
    with db_engine.begin() as conn:
        standard = insert_room_type(conn, "Standard", Decimal("100.00"))
        deluxe = insert_room_type(conn, "Deluxe", Decimal("150.00"))
        return Hotel(
            standard_type_id=standard,
            deluxe_type_id=deluxe,
            room_101=insert_room(conn, standard, "101", 1),
            room_102=insert_room(conn, standard, "102", 1),
            room_201=insert_room(conn, deluxe, "201", 2),
            breakfast_id=insert_service(conn, "Breakfast", Decimal("15.00")),
            spa_id=insert_service(conn, "Spa Access", Decimal("60.00")),
        )


@pytest.fixture
def conn(db_engine: Engine, hotel: Hotel) -> Generator[Connection, None, None]:
    """A transaction on the seeded store, committed at the end of the test."""
    with db_engine.begin() as connection:
        yield connection


@pytest.fixture
def client(db_engine: Engine) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_db_engine] = lambda: db_engine
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_guest() -> Callable[..., int]:
    """Factory inserting a guest; with a password the guest has an account."""

    def _make(
        conn: Connection,
        email: str = "ada@example.com",
        password: Optional[str] = None,
        first_name: str = "Ada",
        last_name: str = "Lovelace",
    ) -> int:
        data: dict[str, Any] = {
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "is_account_created": password is not None,
        }
        if password is not None:
            data["password_hash"] = hash_password(password)
        return insert_guest(conn, data)

    return _make


@pytest.fixture
def make_staff() -> Callable[..., int]:
    def _make(
        conn: Connection, email: str = "frontdesk@example.com", password: str = "secret1"
    ) -> int:
        return insert_staff(
            conn,
            {
                "first_name": "Front",
                "last_name": "Desk",
                "email": email,
                "password_hash": hash_password(password),
            },
        )

    return _make


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    """Factory building a Bearer header for a guest or staff id."""

    def _headers(principal_id: int, user_type: UserType = UserType.GUEST) -> dict[str, str]:
        token = create_access_token(
            Principal(principal_id=principal_id, user_type=user_type, email="someone@example.com")
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
