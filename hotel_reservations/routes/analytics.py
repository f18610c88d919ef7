from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.engine import Engine

from hotel_reservations.dependencies import get_db_engine, require_staff
from hotel_reservations.errors import ReservationError
from hotel_reservations.schemas.analytics import DashboardOut
from hotel_reservations.security import Principal
from hotel_reservations.services.analytics import dashboard
from hotel_reservations.utils.datetime import utc_today

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/analytics/dashboard", response_model=DashboardOut)
def analytics_dashboard(
    staff: Principal = Depends(require_staff),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    """
    Occupancy today plus room-type and service popularity over the last 90 days.
    """
    try:
        with db_engine.connect() as conn:
            return dashboard(conn, utc_today())

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("dashboard_failed", staff_id=staff.principal_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
