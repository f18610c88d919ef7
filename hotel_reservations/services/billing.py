"""Bills and service charges for a reservation."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy.engine import Connection

from hotel_reservations.db.readers.catalog import get_services_by_id
from hotel_reservations.db.readers.reservations import get_reservation, list_service_charges
from hotel_reservations.db.writers.catalog import insert_service_charges
from hotel_reservations.db.writers.reservations import add_to_total
from hotel_reservations.errors import ForbiddenError, NotFoundError, ValidationError
from hotel_reservations.security import Principal
from hotel_reservations.services.pricing import (
    calculate_nights,
    nightly_rate,
    seasonal_multiplier,
    to_money,
)

logger = structlog.get_logger(__name__)


def _reservation_for(conn: Connection, reservation_id: int, principal: Principal) -> dict[str, Any]:
    reservation = get_reservation(conn, reservation_id)
    if reservation is None:
        raise NotFoundError("Reservation not found")
    if not principal.is_staff and reservation["guest_id"] != principal.principal_id:
        raise ForbiddenError("You do not have permission to view this bill")
    return reservation


def get_bill(conn: Connection, reservation_id: int, principal: Principal) -> dict[str, Any]:
    """
    Build the bill of a reservation: room total, service lines, grand total.

    The room part is re-derived from the stored dates with the check-in day's
    seasonal multiplier, so it reflects approved date changes.

    Args:
        conn: SQLAlchemy DB connection
        reservation_id: Reservation to bill
        principal: Caller; must be staff or the reservation's guest

    Returns:
        dict: reservation summary, nights, nightly_rate, room_total,
        service_charges, service_charge_total, bill_total

    Raises:
        NotFoundError: If the reservation does not exist
        ForbiddenError: If a guest asks for someone else's bill
    """
    reservation = _reservation_for(conn, reservation_id, principal)

    nights = calculate_nights(reservation["check_in_date"], reservation["check_out_date"])
    multiplier = seasonal_multiplier(
        conn, reservation["room_type_id"], reservation["check_in_date"]
    )
    rate = nightly_rate(reservation["base_rate"], multiplier)
    room_total = to_money(rate * nights)

    charges = list_service_charges(conn, reservation_id)
    for charge in charges:
        charge["charged_amount"] = to_money(charge["charged_amount"])
    service_total = to_money(sum((c["charged_amount"] for c in charges), Decimal("0")))

    return {
        "reservation": {
            "reservation_id": reservation["reservation_id"],
            "check_in_date": reservation["check_in_date"],
            "check_out_date": reservation["check_out_date"],
            "payment_status": reservation["payment_status"],
            "confirmation_code": reservation["confirmation_code"],
            "room_number": reservation["room_number"],
            "room_type": reservation["room_type"],
            "guest_name": f"{reservation['first_name']} {reservation['last_name']}",
        },
        "nights": nights,
        "base_rate": to_money(reservation["base_rate"]),
        "rate_multiplier": multiplier,
        "nightly_rate": rate,
        "room_total": room_total,
        "service_charges": charges,
        "service_charge_total": service_total,
        "bill_total": room_total + service_total,
    }


def add_service_charges(
    conn: Connection,
    reservation_id: int,
    items: list[tuple[int, int]],
    principal: Principal,
) -> Decimal:
    """
    Charge services to a reservation and raise its total accordingly.

    Each line is priced server-side as base_price * quantity. Inserting the
    lines and updating the total happen in the caller's transaction.

    Args:
        conn: SQLAlchemy DB connection (inside a transaction)
        reservation_id: Reservation to charge
        items: (service_id, quantity) pairs
        principal: Caller; must be staff or the reservation's guest

    Returns:
        Decimal: Amount added to the reservation total

    Raises:
        ValidationError: If no items, a non-positive quantity, or unknown service
        NotFoundError: If the reservation does not exist
        ForbiddenError: If a guest charges someone else's reservation
    """
    if not items:
        raise ValidationError("At least one service must be selected")
    _reservation_for(conn, reservation_id, principal)

    services = get_services_by_id(conn, sorted({service_id for service_id, _ in items}))
    rows = []
    for service_id, quantity in items:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        service = services.get(service_id)
        if service is None:
            raise ValidationError(f"Unknown service {service_id}")
        rows.append(
            {
                "reservation_id": reservation_id,
                "service_id": service_id,
                "quantity": quantity,
                "charged_amount": to_money(Decimal(str(service["base_price"])) * quantity),
            }
        )

    added = to_money(sum((r["charged_amount"] for r in rows), Decimal("0")))
    insert_service_charges(conn, rows)
    add_to_total(conn, reservation_id, added)

    logger.info(
        "service_charges_added",
        reservation_id=reservation_id,
        lines=len(rows),
        amount=str(added),
    )
    return added
