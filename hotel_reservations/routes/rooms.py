from datetime import date
from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.engine import Engine

from hotel_reservations.db.readers.rooms import get_room, list_room_types
from hotel_reservations.dependencies import get_db_engine
from hotel_reservations.errors import ReservationError, RoomNotFoundError
from hotel_reservations.schemas.rooms import AvailableRoomOut, RoomOut, RoomTypeOut
from hotel_reservations.services.availability import list_available_rooms
from hotel_reservations.services.pricing import to_money

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/rooms/available", response_model=list[AvailableRoomOut])
def available_rooms(
    check_in: Optional[date] = Query(None, description="Check-in date"),
    check_out: Optional[date] = Query(None, description="Check-out date (exclusive)"),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    """
    List rooms free for the whole window with their adjusted nightly rate.

    Args:
        check_in: Requested check-in date
        check_out: Requested check-out date
        db_engine: Injected SQLAlchemy engine

    Returns:
        list: Available rooms, cheapest room type first
    """
    try:
        with db_engine.connect() as conn:
            return list_available_rooms(conn, check_in, check_out)

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("availability_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/rooms/types", response_model=list[RoomTypeOut])
def room_types(db_engine: Engine = Depends(get_db_engine)) -> Any:
    try:
        with db_engine.connect() as conn:
            return list_room_types(conn)

    except Exception as e:
        logger.exception("room_types_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/rooms/{room_id}", response_model=RoomOut)
def room_detail(room_id: int, db_engine: Engine = Depends(get_db_engine)) -> Any:
    try:
        with db_engine.connect() as conn:
            room = get_room(conn, room_id)
        if room is None:
            raise RoomNotFoundError(f"Room {room_id} not found")
        room["base_rate"] = to_money(room["base_rate"])
        return room

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("room_fetch_failed", room_id=room_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
