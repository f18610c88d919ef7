from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class ServiceOut(BaseModel):
    service_id: int
    service_name: str
    base_price: Decimal


class ServiceChargeItem(BaseModel):
    service_id: int
    quantity: int = Field(1, description="Number of units, at least 1")


class ServiceChargePayload(BaseModel):
    items: list[ServiceChargeItem]


class ServiceChargesAdded(BaseModel):
    message: str
    amount_added: Decimal


class ServiceChargeLine(BaseModel):
    service_charge_id: int
    service_id: int
    service_name: str
    quantity: int
    charged_amount: Decimal
    charge_date: datetime


class BillReservation(BaseModel):
    reservation_id: int
    check_in_date: date
    check_out_date: date
    payment_status: str
    confirmation_code: str
    room_number: str
    room_type: str
    guest_name: str


class BillOut(BaseModel):
    """Room part is recomputed from the stored dates; services are summed."""

    reservation: BillReservation
    nights: int
    base_rate: Decimal
    rate_multiplier: Decimal
    nightly_rate: Decimal
    room_total: Decimal
    service_charges: list[ServiceChargeLine]
    service_charge_total: Decimal
    bill_total: Decimal
