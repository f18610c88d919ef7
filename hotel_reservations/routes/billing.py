from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.engine import Engine

from hotel_reservations.db.readers.catalog import list_services
from hotel_reservations.dependencies import get_current_principal, get_db_engine
from hotel_reservations.errors import ReservationError
from hotel_reservations.schemas.billing import (
    BillOut,
    ServiceChargePayload,
    ServiceChargesAdded,
    ServiceOut,
)
from hotel_reservations.security import Principal
from hotel_reservations.services.billing import add_service_charges, get_bill

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/services", response_model=list[ServiceOut])
def service_catalog(db_engine: Engine = Depends(get_db_engine)) -> Any:
    try:
        with db_engine.connect() as conn:
            return list_services(conn)

    except Exception as e:
        logger.exception("service_listing_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post(
    "/reservations/{reservation_id}/service-charges",
    status_code=status.HTTP_201_CREATED,
    response_model=ServiceChargesAdded,
)
def charge_services(
    reservation_id: int,
    payload: ServiceChargePayload,
    principal: Principal = Depends(get_current_principal),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    """
    Add service lines to a reservation; its total grows by their sum.

    Args:
        reservation_id: Reservation to charge
        payload: Service ids and quantities
        principal: Reservation owner or staff
        db_engine: Injected SQLAlchemy engine

    Returns:
        ServiceChargesAdded: Message and amount added
    """
    try:
        items = [(item.service_id, item.quantity) for item in payload.items]
        with db_engine.begin() as conn:
            added = add_service_charges(conn, reservation_id, items, principal)
        return {"message": "Services added successfully", "amount_added": added}

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("service_charge_failed", reservation_id=reservation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/bills/{reservation_id}", response_model=BillOut)
def reservation_bill(
    reservation_id: int,
    principal: Principal = Depends(get_current_principal),
    db_engine: Engine = Depends(get_db_engine),
) -> Any:
    try:
        with db_engine.connect() as conn:
            return get_bill(conn, reservation_id, principal)

    except (HTTPException, ReservationError):
        raise
    except Exception as e:
        logger.exception("bill_failed", reservation_id=reservation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
