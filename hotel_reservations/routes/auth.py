from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.engine import Engine

from hotel_reservations.dependencies import get_current_principal, get_db_engine
from hotel_reservations.errors import ReservationError, UnauthorizedError
from hotel_reservations.schemas.auth import LoginPayload, MeOut, RegisterPayload, TokenOut
from hotel_reservations.security import Principal, create_access_token
from hotel_reservations.services.identity import (
    GuestDetails,
    authenticate,
    load_principal,
    register_guest,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/auth/register", status_code=status.HTTP_201_CREATED, response_model=TokenOut)
def register(payload: RegisterPayload, db_engine: Engine = Depends(get_db_engine)) -> Any:
    """
    Register a guest account.

    An email that already booked anonymously is upgraded in place, and its
    reservations become visible in the new account.
    """
    try:
        details = GuestDetails(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            phone=payload.phone,
            create_account=True,
            password=payload.password,
        )
        with db_engine.begin() as conn:
            principal = register_guest(conn, details)

        logger.info("guest_registered", guest_id=principal.principal_id)
        return TokenOut(access_token=create_access_token(principal), user_type=principal.user_type)

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("registration_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/auth/login", response_model=TokenOut)
def login(payload: LoginPayload, db_engine: Engine = Depends(get_db_engine)) -> Any:
    try:
        with db_engine.connect() as conn:
            principal = authenticate(conn, payload.email, payload.password, payload.user_type)

        logger.info(
            "login_succeeded",
            principal_id=principal.principal_id,
            user_type=principal.user_type.value,
        )
        return TokenOut(access_token=create_access_token(principal), user_type=principal.user_type)

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("login_failed_unexpectedly", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/auth/me", response_model=MeOut)
def me(
    principal: Principal = Depends(get_current_principal),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    """Return the stored profile behind the caller's token."""
    try:
        with db_engine.connect() as conn:
            identity = load_principal(conn, principal)
        if identity is None:
            raise UnauthorizedError("Account no longer exists")

        return MeOut(
            id=identity.principal_id,
            user_type=principal.user_type,
            email=identity.email,
            first_name=identity.first_name,
            last_name=identity.last_name,
        )

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("profile_fetch_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
