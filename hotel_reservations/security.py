"""
Password hashing and access-token handling.

Passwords are hashed with bcrypt; access tokens are HS256 JWTs carrying the
principal's id, user type and email. Both are thin wrappers: the credential
scheme itself is delegated to the libraries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import bcrypt
import jwt

from hotel_reservations.config import (
    ACCESS_TOKEN_TTL_SECONDS,
    BCRYPT_ROUNDS,
    JWT_ALGORITHM,
    JWT_SECRET,
)
from hotel_reservations.errors import UnauthorizedError
from hotel_reservations.models.enums import UserType
from hotel_reservations.utils.datetime import utc_now


@dataclass(frozen=True)
class Principal:
    """
    An authenticated actor.

    user_type tells which identity space principal_id belongs to: a guest_id
    for UserType.GUEST, a staff_id for UserType.STAFF.
    """

    principal_id: int
    user_type: UserType
    email: str
    first_name: str = ""
    last_name: str = ""

    @property
    def is_staff(self) -> bool:
        return self.user_type is UserType.STAFF

    @property
    def is_guest(self) -> bool:
        return self.user_type is UserType.GUEST


def hash_password(password: str) -> str:
    """
    Hash a plaintext password with bcrypt.

    Args:
        password: Plaintext password

    Returns:
        str: bcrypt hash (utf-8 decoded)
    """
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Return True when password matches the stored bcrypt hash."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the store
        return False


def create_access_token(principal: Principal) -> str:
    """
    Issue a signed access token for a principal.

    Args:
        principal: Authenticated guest or staff member

    Returns:
        str: Encoded JWT
    """
    now = utc_now()
    claims: dict[str, Any] = {
        "sub": str(principal.principal_id),
        "user_type": principal.user_type.value,
        "email": principal.email,
        "first_name": principal.first_name,
        "last_name": principal.last_name,
        "iat": now,
        "exp": now + timedelta(seconds=ACCESS_TOKEN_TTL_SECONDS),
    }
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Principal:
    """
    Validate a token and rebuild the principal it was issued for.

    Raises:
        UnauthorizedError: If the token is expired, tampered with or malformed
    """
    try:
        claims = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        return Principal(
            principal_id=int(claims["sub"]),
            user_type=UserType(claims["user_type"]),
            email=claims["email"],
            first_name=claims.get("first_name", ""),
            last_name=claims.get("last_name", ""),
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Session expired, please log in again")
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedError("Invalid authentication token")
