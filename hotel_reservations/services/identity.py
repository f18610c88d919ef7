"""
Guest identity resolution and credential checks.

Guests and staff are separate identity spaces. Each one is served by its own
repository behind the IdentityRepository protocol, and lookups dispatch on the
closed UserType enum instead of building table or column names from a tag.

Guest rows are created on first sight of an email (anonymous bookings
included) and upgraded in place when that email registers. Guest rows are
never deleted or merged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

import structlog
from sqlalchemy.engine import Connection

from hotel_reservations.db.readers.people import (
    get_guest_by_email,
    get_guest_by_id,
    get_staff_by_email,
    get_staff_by_id,
)
from hotel_reservations.db.writers.people import insert_guest, upgrade_guest_account
from hotel_reservations.db.writers.reservations import claim_guest_reservations
from hotel_reservations.errors import (
    AccountAlreadyExistsError,
    UnauthorizedError,
    ValidationError,
)
from hotel_reservations.models.enums import UserType
from hotel_reservations.security import Principal, hash_password, verify_password

logger = structlog.get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


@dataclass
class GuestDetails:
    """Guest fields supplied with a booking or a registration."""

    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    create_account: bool = False
    password: Optional[str] = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.create_account and self.password)


@dataclass(frozen=True)
class GuestResolution:
    guest_id: int
    # True when this call created or upgraded an account
    account_created: bool
    principal: Optional[Principal] = None


@dataclass(frozen=True)
class Identity:
    principal_id: int
    email: str
    first_name: str
    last_name: str
    password_hash: Optional[str]

    def to_principal(self, user_type: UserType) -> Principal:
        return Principal(
            principal_id=self.principal_id,
            user_type=user_type,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
        )


class IdentityRepository(Protocol):
    user_type: UserType

    def find_by_email(self, conn: Connection, email: str) -> Optional[Identity]: ...

    def find_by_id(self, conn: Connection, principal_id: int) -> Optional[Identity]: ...


class GuestRepository:
    """Guest identities. Only guests with a created account can authenticate."""

    user_type = UserType.GUEST

    @staticmethod
    def _to_identity(row: Optional[dict[str, Any]]) -> Optional[Identity]:
        if row is None or not row["is_account_created"]:
            return None
        return Identity(
            principal_id=row["guest_id"],
            email=row["email"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            password_hash=row["password_hash"],
        )

    def find_by_email(self, conn: Connection, email: str) -> Optional[Identity]:
        return self._to_identity(get_guest_by_email(conn, normalize_email(email)))

    def find_by_id(self, conn: Connection, principal_id: int) -> Optional[Identity]:
        return self._to_identity(get_guest_by_id(conn, principal_id))


class StaffRepository:
    user_type = UserType.STAFF

    @staticmethod
    def _to_identity(row: Optional[dict[str, Any]]) -> Optional[Identity]:
        if row is None:
            return None
        return Identity(
            principal_id=row["staff_id"],
            email=row["email"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            password_hash=row["password_hash"],
        )

    def find_by_email(self, conn: Connection, email: str) -> Optional[Identity]:
        return self._to_identity(get_staff_by_email(conn, normalize_email(email)))

    def find_by_id(self, conn: Connection, principal_id: int) -> Optional[Identity]:
        return self._to_identity(get_staff_by_id(conn, principal_id))


REPOSITORIES: dict[UserType, IdentityRepository] = {
    UserType.GUEST: GuestRepository(),
    UserType.STAFF: StaffRepository(),
}


def get_repository(user_type: UserType) -> IdentityRepository:
    return REPOSITORIES[user_type]


def _validate_details(details: GuestDetails) -> None:
    if not details.first_name or not details.last_name or not normalize_email(details.email):
        raise ValidationError("First name, last name and email are required")
    if details.create_account:
        if not details.password:
            raise ValidationError("A password is required to create an account")
        if len(details.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )


def resolve_guest(conn: Connection, details: GuestDetails) -> GuestResolution:
    """
    Map an email to a guest row, creating or upgrading it as needed.

    - Unknown email: create the guest; it is an account only when credentials
      are supplied.
    - Known guest without account, credentials supplied: upgrade in place and
      mark the guest's existing reservations claimed.
    - Known guest with account, credentials supplied: AccountAlreadyExists.
    - Otherwise: return the existing guest unchanged.

    Args:
        conn: SQLAlchemy DB connection (inside the caller's transaction)
        details: Guest fields from the booking or registration form

    Returns:
        GuestResolution: guest id, whether an account was created by this call,
        and the principal for that new account

    Raises:
        ValidationError: If required fields are missing
        AccountAlreadyExistsError: If the email already has an account
    """
    _validate_details(details)
    email = normalize_email(details.email)
    existing = get_guest_by_email(conn, email)

    if existing is None:
        data: dict[str, Any] = {
            "first_name": details.first_name,
            "last_name": details.last_name,
            "email": email,
            "phone": details.phone or None,
            "is_account_created": details.has_credentials,
        }
        if details.has_credentials:
            data["password_hash"] = hash_password(details.password or "")
        guest_id = insert_guest(conn, data)
        return _resolution(guest_id, details, email, details.has_credentials)

    guest_id = existing["guest_id"]
    if not details.has_credentials:
        return GuestResolution(guest_id=guest_id, account_created=False)

    if existing["is_account_created"]:
        raise AccountAlreadyExistsError("An account with this email already exists")

    upgrade_guest_account(
        conn,
        guest_id,
        first_name=details.first_name,
        last_name=details.last_name,
        phone=details.phone or existing["phone"],
        password_hash=hash_password(details.password or ""),
    )
    claimed = claim_guest_reservations(conn, guest_id)
    logger.info("guest_reservations_claimed", guest_id=guest_id, count=claimed)
    return _resolution(guest_id, details, email, True)


def _resolution(
    guest_id: int, details: GuestDetails, email: str, account_created: bool
) -> GuestResolution:
    principal = None
    if account_created:
        principal = Principal(
            principal_id=guest_id,
            user_type=UserType.GUEST,
            email=email,
            first_name=details.first_name,
            last_name=details.last_name,
        )
    return GuestResolution(guest_id=guest_id, account_created=account_created, principal=principal)


def register_guest(conn: Connection, details: GuestDetails) -> Principal:
    """
    Register a guest account, upgrading an anonymous guest row if one exists.

    Raises:
        ValidationError: If required fields or the password are missing
        AccountAlreadyExistsError: If the email already has an account
    """
    details.create_account = True
    resolution = resolve_guest(conn, details)
    if resolution.principal is None:
        raise ValidationError("A password is required to create an account")
    return resolution.principal


def authenticate(
    conn: Connection, email: str, password: str, user_type: UserType
) -> Principal:
    """
    Check credentials against the identity space named by user_type.

    Raises:
        UnauthorizedError: If no such identity exists or the password is wrong
    """
    identity = get_repository(user_type).find_by_email(conn, email)
    if identity is None or not verify_password(password, identity.password_hash):
        logger.info("login_failed", user_type=user_type.value)
        raise UnauthorizedError("Invalid email or password")
    return identity.to_principal(user_type)


def load_principal(conn: Connection, principal: Principal) -> Optional[Identity]:
    """Fetch the current stored identity behind a token's principal."""
    return get_repository(principal.user_type).find_by_id(conn, principal.principal_id)
