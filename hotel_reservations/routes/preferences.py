from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.engine import Engine

from hotel_reservations.dependencies import get_db_engine, require_guest
from hotel_reservations.errors import ReservationError
from hotel_reservations.schemas.preferences import FavoriteOut, PreferencePayload, PreferencesOut
from hotel_reservations.schemas.reservations import MessageOut
from hotel_reservations.security import Principal
from hotel_reservations.services.preferences import (
    add_favorite,
    is_favorite,
    list_favorites,
    remove_favorite,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/preferences", response_model=PreferencesOut | FavoriteOut)
def get_preferences(
    room_type_id: Optional[int] = Query(None, description="Check a single room type"),
    guest: Principal = Depends(require_guest),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    """
    List the guest's favourite room types, or check one when room_type_id is given.
    """
    try:
        with db_engine.connect() as conn:
            if room_type_id is not None:
                return FavoriteOut(
                    room_type_id=room_type_id,
                    is_favorite=is_favorite(conn, guest.principal_id, room_type_id),
                )
            return PreferencesOut(room_type_ids=list_favorites(conn, guest.principal_id))

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("preferences_fetch_failed", guest_id=guest.principal_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/preferences", response_model=MessageOut)
def add_preference(
    payload: PreferencePayload,
    guest: Principal = Depends(require_guest),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    try:
        with db_engine.begin() as conn:
            message = add_favorite(conn, guest.principal_id, payload.room_type_id)
        return {"message": message}

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("preference_save_failed", guest_id=guest.principal_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/preferences", response_model=MessageOut)
def delete_preference(
    room_type_id: int = Query(..., description="Room type to remove"),
    guest: Principal = Depends(require_guest),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    try:
        with db_engine.begin() as conn:
            message = remove_favorite(conn, guest.principal_id, room_type_id)
        return {"message": message}

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("preference_delete_failed", guest_id=guest.principal_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
