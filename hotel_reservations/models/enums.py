"""Closed vocabularies stored as strings in the reservation tables."""

from enum import Enum


class RoomStatus(str, Enum):
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"
    MAINTENANCE = "Maintenance"
    CLEANING = "Cleaning"


class ReservationStatus(str, Enum):
    CONFIRMED = "Confirmed"
    CHECKED_IN = "CheckedIn"
    CHECKED_OUT = "CheckedOut"
    CANCELLED = "Cancelled"


# Statuses that hold a room for their date range
ACTIVE_RESERVATION_STATUSES: tuple[str, ...] = (
    ReservationStatus.CONFIRMED.value,
    ReservationStatus.CHECKED_IN.value,
)


class StayLabel(str, Enum):
    """Display labels derived from the stay dates, never persisted."""

    UPCOMING = "Upcoming"
    ACTIVE = "Active"
    COMPLETED = "Completed"


class PaymentStatus(str, Enum):
    PAID = "Paid"
    UNPAID = "Unpaid"


class ChangeType(str, Enum):
    DATE_CHANGE = "DateChange"
    CANCELLATION = "Cancellation"


class RequestStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"


class UserType(str, Enum):
    GUEST = "guest"
    STAFF = "staff"
