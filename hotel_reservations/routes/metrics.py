"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP hotel_reservations_created_total Total number of reservations booked
        # TYPE hotel_reservations_created_total counter
        hotel_reservations_created_total{claimed="false"} 3.0
        # HELP hotel_rooms_occupied Rooms holding an active stay today
        # TYPE hotel_rooms_occupied gauge
        hotel_rooms_occupied 7.0
        ...
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from hotel_reservations.dependencies import get_db_engine
from hotel_reservations.metrics import rooms_occupied, rooms_total
from hotel_reservations.services.analytics import occupancy
from hotel_reservations.utils.datetime import utc_today

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/metrics", response_class=Response)
def metrics(db_engine: Engine = Depends(get_db_engine)) -> Any:
    """
    Expose the default registry in Prometheus text format.

    The occupancy gauges are refreshed from the store first. When the store
    cannot be read they keep their previous values and the scrape still
    succeeds.
    """
    try:
        with db_engine.connect() as conn:
            figures = occupancy(conn, utc_today())
        rooms_occupied.set(figures["occupied_rooms"])
        rooms_total.set(figures["total_rooms"])
    except SQLAlchemyError as e:
        logger.warning("occupancy_gauges_stale", error=str(e))

    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
