from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from hotel_reservations.models.enums import ChangeType


class GuestDetailsPayload(BaseModel):
    """
    Guest fields sent with a booking.

    Set create_account and password to register an account in the same step;
    the reservation is then claimed by that account.
    """

    first_name: str = Field(..., description="Guest first name")
    last_name: str = Field(..., description="Guest last name")
    email: str = Field(..., description="Guest email, used to find an existing guest")
    phone: Optional[str] = Field(None, description="Contact phone number")
    create_account: bool = Field(False, description="Register an account with this booking")
    password: Optional[str] = Field(None, description="Password for the new account")


class ReservationCreatePayload(BaseModel):
    """
    Schema for booking a room. Guest details may be omitted only when the
    caller is an authenticated guest.
    """

    room_id: Optional[int] = Field(None, description="Room to book")
    check_in: Optional[date] = Field(None, description="Check-in date")
    check_out: Optional[date] = Field(None, description="Check-out date (exclusive)")
    guest: Optional[GuestDetailsPayload] = Field(None, description="Guest details")


class ReservationCreated(BaseModel):
    reservation_id: int
    confirmation_code: Optional[str] = Field(
        None, description="Only returned for reservations not bound to an account"
    )
    total_amount: Decimal
    nights: int
    is_claimed: bool
    access_token: Optional[str] = Field(
        None, description="Issued when an account was created with the booking"
    )


class ReservationOut(BaseModel):
    reservation_id: int
    guest_id: int
    room_id: int
    staff_id: Optional[int] = None
    check_in_date: date
    check_out_date: date
    status: str
    stay_label: str
    total_amount: Decimal
    payment_status: str
    payment_method: Optional[str] = None
    is_claimed: bool
    guest_name: str
    guest_email: str
    room_number: str
    room_type_id: int
    room_type: str
    base_rate: Decimal


class StaffReservationOut(ReservationOut):
    confirmation_code: str
    has_pending_request: bool
    pending_change_type: Optional[ChangeType] = None


class LinkReservationPayload(BaseModel):
    confirmation_code: str = Field(..., description="Code shown at booking time")
    email: str = Field(..., description="Email used for the booking")


class ChangeRequestPayload(BaseModel):
    """
    Schema for a guest's change request.

    For a DateChange, omitted dates keep their current value.
    """

    change_type: ChangeType
    new_check_in: Optional[date] = None
    new_check_out: Optional[date] = None
    notes: Optional[str] = Field(None, description="Free-text note for staff")


class MessageOut(BaseModel):
    message: str
