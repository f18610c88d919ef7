from decimal import Decimal

from pydantic import BaseModel


class OccupancyOut(BaseModel):
    occupied_rooms: int
    total_rooms: int
    occupancy_rate: int


class RoomTypePopularity(BaseModel):
    type_name: str
    bookings: int


class ServicePopularity(BaseModel):
    service_name: str
    usage_count: int
    total_revenue: Decimal


class DashboardOut(BaseModel):
    occupancy: OccupancyOut
    room_type_popularity: list[RoomTypePopularity]
    service_popularity: list[ServicePopularity]
