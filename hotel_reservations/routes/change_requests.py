from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.engine import Engine

from hotel_reservations.dependencies import get_db_engine, require_guest, require_staff
from hotel_reservations.errors import ReservationError
from hotel_reservations.schemas.reservations import ChangeRequestPayload, MessageOut
from hotel_reservations.security import Principal
from hotel_reservations.services.change_requests import (
    approve_change_request,
    has_pending_request,
    reject_change_request,
    submit_change_request,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "/reservations/{reservation_id}/change-requests",
    status_code=status.HTTP_201_CREATED,
)
def submit_request(
    reservation_id: int,
    payload: ChangeRequestPayload,
    guest: Principal = Depends(require_guest),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Ask staff to move or cancel a reservation.

    Args:
        reservation_id: Reservation owned by the authenticated guest
        payload: Change type, requested dates and notes
        guest: Authenticated guest
        db_engine: Injected SQLAlchemy engine

    Returns:
        dict: Confirmation message and the new request id
    """
    try:
        with db_engine.begin() as conn:
            change_id = submit_change_request(
                conn,
                reservation_id,
                guest.principal_id,
                payload.change_type,
                new_check_in=payload.new_check_in,
                new_check_out=payload.new_check_out,
                notes=payload.notes,
            )
        return {
            "message": "Request submitted successfully",
            "reservation_change_id": change_id,
        }

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception(
            "change_request_submission_failed", reservation_id=reservation_id, error=str(e)
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reservations/{reservation_id}/change-requests/pending")
def pending_request(
    reservation_id: int,
    guest: Principal = Depends(require_guest),
    db_engine: Engine = Depends(get_db_engine),
) -> dict[str, bool]:
    try:
        with db_engine.connect() as conn:
            pending = has_pending_request(conn, reservation_id, guest.principal_id)
        return {"has_pending_request": pending}

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("pending_check_failed", reservation_id=reservation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post(
    "/reservations/{reservation_id}/change-requests/approve", response_model=MessageOut
)
def approve_request(
    reservation_id: int,
    staff: Principal = Depends(require_staff),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    """Apply the most recent pending request: cancel, or move the dates."""
    try:
        with db_engine.begin() as conn:
            message = approve_change_request(conn, reservation_id, staff.principal_id)
        return {"message": message}

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("change_request_approval_failed", reservation_id=reservation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post(
    "/reservations/{reservation_id}/change-requests/reject", response_model=MessageOut
)
def reject_request(
    reservation_id: int,
    staff: Principal = Depends(require_staff),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    try:
        with db_engine.begin() as conn:
            message = reject_change_request(conn, reservation_id)
        return {"message": message}

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception(
            "change_request_rejection_failed",
            reservation_id=reservation_id,
            staff_id=staff.principal_id,
            error=str(e),
        )
        raise HTTPException(status_code=500, detail="Internal server error")
