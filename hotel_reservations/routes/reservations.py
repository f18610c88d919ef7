from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.engine import Engine

from hotel_reservations.dependencies import (
    get_db_engine,
    get_optional_principal,
    require_guest,
    require_staff,
)
from hotel_reservations.errors import ReservationError
from hotel_reservations.schemas.reservations import (
    LinkReservationPayload,
    MessageOut,
    ReservationCreated,
    ReservationCreatePayload,
    ReservationOut,
    StaffReservationOut,
)
from hotel_reservations.security import Principal, create_access_token
from hotel_reservations.services.identity import GuestDetails
from hotel_reservations.services.reservations import (
    BookingRequest,
    claim_reservation,
    create_reservation,
    get_reservation,
    list_all_reservations,
    list_guest_reservations,
    lookup_by_code,
)
from hotel_reservations.utils.datetime import utc_today

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "/reservations", status_code=status.HTTP_201_CREATED, response_model=ReservationCreated
)
def book_room(
    payload: ReservationCreatePayload,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    """
    Book a room for the given dates.

    Anonymous callers get a confirmation code back. Authenticated guests, and
    callers who create an account with the booking, get a claimed reservation
    instead; the latter also receive an access token for the new account.

    Args:
        payload: Room, dates and guest details
        principal: Authenticated caller, if any
        db_engine: Injected SQLAlchemy engine

    Returns:
        ReservationCreated: Reservation id, total, nights and code or token
    """
    try:
        guest = None
        if payload.guest is not None:
            guest = GuestDetails(**payload.guest.model_dump())
        booking = BookingRequest(
            check_in=payload.check_in,
            check_out=payload.check_out,
            room_id=payload.room_id,
            guest=guest,
        )

        with db_engine.begin() as conn:
            result = create_reservation(conn, booking, principal)

        access_token = None
        if result.account_principal is not None:
            access_token = create_access_token(result.account_principal)

        return ReservationCreated(
            reservation_id=result.reservation_id,
            confirmation_code=result.confirmation_code,
            total_amount=result.total_amount,
            nights=result.nights,
            is_claimed=result.is_claimed,
            access_token=access_token,
        )

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("reservation_creation_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reservations", response_model=list[StaffReservationOut])
def all_reservations(
    staff: Principal = Depends(require_staff),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    """
    Staff listing of every reservation, pending change requests first.

    Rooms whose stays have all ended are reset to Available before listing.
    """
    try:
        with db_engine.begin() as conn:
            return list_all_reservations(conn, utc_today())

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("reservation_listing_failed", staff_id=staff.principal_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reservations/lookup", response_model=ReservationOut)
def lookup_reservation(
    code: str = Query(..., description="Confirmation code"),
    email: str = Query(..., description="Email used for the booking"),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    try:
        with db_engine.connect() as conn:
            return lookup_by_code(conn, code, email, utc_today())

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("reservation_lookup_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reservations/mine", response_model=list[ReservationOut])
def my_reservations(
    guest: Principal = Depends(require_guest),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    """List the reservations claimed by the authenticated guest, latest first."""
    try:
        with db_engine.connect() as conn:
            return list_guest_reservations(conn, guest.principal_id, utc_today())

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("guest_reservations_failed", guest_id=guest.principal_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/reservations/link", response_model=MessageOut)
def link_reservation(
    payload: LinkReservationPayload,
    guest: Principal = Depends(require_guest),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    """
    Attach a confirmation-code reservation to the authenticated guest.

    Linking a reservation the guest already owns is a success with no change.
    """
    try:
        with db_engine.begin() as conn:
            message = claim_reservation(
                conn, payload.confirmation_code, payload.email, guest.principal_id
            )
        return {"message": message}

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("reservation_link_failed", guest_id=guest.principal_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reservations/{reservation_id}", response_model=ReservationOut)
def reservation_detail(reservation_id: int, db_engine: Engine = Depends(get_db_engine)) -> Any:
    try:
        with db_engine.connect() as conn:
            return get_reservation(conn, reservation_id, utc_today())

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("reservation_fetch_failed", reservation_id=reservation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
