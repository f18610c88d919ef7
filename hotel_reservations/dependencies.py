"""
FastAPI dependency injection providers.

This module contains dependency providers for FastAPI routes: the database
engine and the authenticated principal behind a Bearer token.

Dependencies can be overridden in tests using app.dependency_overrides, making
it easy to inject an in-memory engine or a fixed principal.
"""

from __future__ import annotations

from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.engine import Engine

from hotel_reservations.db.engine import engine
from hotel_reservations.errors import ForbiddenError, UnauthorizedError
from hotel_reservations.security import Principal, decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine

    Testing Example:
        >>> from sqlalchemy import create_engine
        >>> from sqlalchemy.pool import StaticPool
        >>>
        >>> test_engine = create_engine("sqlite://", poolclass=StaticPool)
        >>> app.dependency_overrides[get_db_engine] = lambda: test_engine
    """
    yield engine


def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Principal]:
    """
    Resolve the caller from a Bearer token, or None for anonymous requests.

    A token that is present but invalid is rejected rather than treated as
    anonymous.

    Raises:
        UnauthorizedError: If the supplied token is invalid or expired
    """
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


def get_current_principal(
    principal: Optional[Principal] = Depends(get_optional_principal),
) -> Principal:
    if principal is None:
        raise UnauthorizedError("Authentication required")
    return principal


def require_guest(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_guest:
        raise ForbiddenError("Guest account required")
    return principal


def require_staff(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_staff:
        raise ForbiddenError("Staff authentication required")
    return principal
