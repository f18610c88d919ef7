from decimal import Decimal

from pydantic import BaseModel, Field


class RoomTypeOut(BaseModel):
    room_type_id: int
    type_name: str
    base_rate: Decimal


class RoomOut(BaseModel):
    """A room with its type and the housekeeping status flag."""

    room_id: int
    room_type_id: int
    room_number: str
    floor_number: int
    status: str
    type_name: str
    base_rate: Decimal


class AvailableRoomOut(RoomOut):
    """A room free for the requested window, priced for its check-in day."""

    rate_multiplier: Decimal = Field(..., description="Seasonal multiplier on check-in day")
    adjusted_rate: Decimal = Field(..., description="Nightly rate after the multiplier")
