"""UTC datetime and calendar-date utilities."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """
    Return today's calendar date in UTC.

    Services take "today" as an explicit argument; routes call this once per
    request and pass the value down.
    """
    return utc_now().date()


def as_calendar_date(value: date | datetime) -> date:
    """
    Normalize a date or datetime to a calendar date (midnight-truncated).

    Example:
        >>> as_calendar_date(datetime(2025, 6, 1, 23, 59))
        datetime.date(2025, 6, 1)
    """
    if isinstance(value, datetime):
        return value.date()
    return value
