from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every table of the reservation store (rooms, guests, reservations, change
    requests and service charges) is declared against this metadata so that
    Alembic and the test fixtures see the full schema.
    """

    pass
