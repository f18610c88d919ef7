from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from hotel_reservations.models.enums import RequestStatus
from hotel_reservations.models.people import Guest
from hotel_reservations.models.reservations import Reservation, ReservationChange
from hotel_reservations.models.rooms import Room, RoomType
from hotel_reservations.models.services import Service, ServiceCharge

_DETAIL_COLUMNS = (
    Reservation.reservation_id,
    Reservation.guest_id,
    Reservation.room_id,
    Reservation.staff_id,
    Reservation.check_in_date,
    Reservation.check_out_date,
    Reservation.status,
    Reservation.total_amount,
    Reservation.payment_status,
    Reservation.payment_method,
    Reservation.confirmation_code,
    Reservation.booking_email,
    Reservation.is_claimed,
    Guest.first_name,
    Guest.last_name,
    Guest.email.label("guest_email"),
    Guest.is_account_created.label("guest_has_account"),
    Room.room_number,
    Room.room_type_id,
    RoomType.type_name.label("room_type"),
    RoomType.base_rate,
)


def _detail_query() -> Any:
    return (
        select(*_DETAIL_COLUMNS)
        .join(Guest, Reservation.guest_id == Guest.guest_id)
        .join(Room, Reservation.room_id == Room.room_id)
        .join(RoomType, Room.room_type_id == RoomType.room_type_id)
    )


def get_reservation(conn: Connection, reservation_id: int) -> Optional[dict[str, Any]]:
    """
    Fetch a reservation joined with its guest, room and room type.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        reservation_id (int): Reservation ID.

    Returns:
        Optional[dict[str, Any]]: Joined reservation row, or None if not found.
    """
    row = (
        conn.execute(_detail_query().where(Reservation.reservation_id == reservation_id))
        .mappings()
        .first()
    )
    return dict(row) if row else None


def get_reservation_by_code(conn: Connection, confirmation_code: str) -> Optional[dict[str, Any]]:
    """
    Fetch a reservation by its confirmation code, joined like get_reservation().

    Args:
        conn (Connection): SQLAlchemy DB connection.
        confirmation_code (str): 8-character confirmation code (upper-case).

    Returns:
        Optional[dict[str, Any]]: Joined reservation row, or None if not found.
    """
    row = (
        conn.execute(
            _detail_query().where(Reservation.confirmation_code == confirmation_code)
        )
        .mappings()
        .first()
    )
    return dict(row) if row else None


def list_guest_reservations(conn: Connection, guest_id: int) -> list[dict[str, Any]]:
    """
    List the claimed reservations of a guest account, latest check-in first.

    Unclaimed reservations stay reachable only through their confirmation code.
    """
    rows = conn.execute(
        _detail_query()
        .where(Reservation.guest_id == guest_id, Reservation.is_claimed.is_(True))
        .order_by(Reservation.check_in_date.desc(), Reservation.reservation_id.desc())
    ).mappings()
    return [dict(r) for r in rows]


def list_all_reservations(conn: Connection) -> list[dict[str, Any]]:
    """Return every reservation with guest/room details, latest check-in first."""
    rows = conn.execute(
        _detail_query().order_by(
            Reservation.check_in_date.desc(), Reservation.reservation_id.desc()
        )
    ).mappings()
    return [dict(r) for r in rows]


def get_latest_pending_change(
    conn: Connection, reservation_id: int
) -> Optional[dict[str, Any]]:
    """
    Fetch the most recently created Pending change request of a reservation.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        reservation_id (int): Reservation ID.

    Returns:
        Optional[dict[str, Any]]: Change request row (highest id), or None.
    """
    row = (
        conn.execute(
            select(ReservationChange)
            .where(
                ReservationChange.reservation_id == reservation_id,
                ReservationChange.request_status == RequestStatus.PENDING.value,
            )
            .order_by(ReservationChange.reservation_change_id.desc())
            .limit(1)
        )
        .mappings()
        .first()
    )
    return dict(row) if row else None


def count_pending_changes(conn: Connection, reservation_id: int) -> int:
    result = conn.execute(
        select(func.count())
        .select_from(ReservationChange)
        .where(
            ReservationChange.reservation_id == reservation_id,
            ReservationChange.request_status == RequestStatus.PENDING.value,
        )
    )
    return int(result.scalar_one())


def get_pending_change_types(conn: Connection) -> dict[int, str]:
    """
    Map reservation_id to the change_type of its most recent Pending request.

    Returns:
        dict[int, str]: Only reservations that have a pending request appear.
    """
    rows = conn.execute(
        select(ReservationChange.reservation_id, ReservationChange.change_type)
        .where(ReservationChange.request_status == RequestStatus.PENDING.value)
        .order_by(ReservationChange.reservation_change_id)
    ).all()
    # Later rows overwrite earlier ones, leaving the most recent per reservation
    return {reservation_id: change_type for reservation_id, change_type in rows}


def list_service_charges(conn: Connection, reservation_id: int) -> list[dict[str, Any]]:
    """List service charge lines of a reservation, oldest first."""
    rows = conn.execute(
        select(
            ServiceCharge.service_charge_id,
            ServiceCharge.service_id,
            ServiceCharge.reservation_id,
            ServiceCharge.quantity,
            ServiceCharge.charged_amount,
            ServiceCharge.charge_date,
            Service.service_name,
        )
        .join(Service, ServiceCharge.service_id == Service.service_id)
        .where(ServiceCharge.reservation_id == reservation_id)
        .order_by(ServiceCharge.charge_date, ServiceCharge.service_charge_id)
    ).mappings()
    return [dict(r) for r in rows]


def get_service_charge_total(conn: Connection, reservation_id: int) -> Decimal:
    result = conn.execute(
        select(func.coalesce(func.sum(ServiceCharge.charged_amount), 0)).where(
            ServiceCharge.reservation_id == reservation_id
        )
    )
    return Decimal(str(result.scalar_one()))
