from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.sql import func

from hotel_reservations.models.base import Base


class Service(Base):
    """ORM model for an extra service (spa, breakfast, parking) sold to guests."""

    __tablename__ = "service"

    service_id = Column(Integer, primary_key=True, autoincrement=True)
    service_name = Column(String(100), nullable=False, unique=True)
    base_price = Column(Numeric(10, 2), nullable=False)


class ServiceCharge(Base):
    """
    ORM model for a service line item billed against a reservation.

    Each charge also increases the reservation's total_amount in the same
    transaction.
    """

    __tablename__ = "service_charge"

    service_charge_id = Column(Integer, primary_key=True, autoincrement=True)
    reservation_id = Column(
        Integer, ForeignKey("reservation.reservation_id"), nullable=False, index=True
    )
    service_id = Column(Integer, ForeignKey("service.service_id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    charged_amount = Column(Numeric(10, 2), nullable=False)
    charge_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
