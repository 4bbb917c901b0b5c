"""
Date helpers bound to the clinic's local timezone.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from ..config import settings
from ..exceptions import ValidationFailedException

DATE_FORMAT_ERROR = "Invalid date format. Use YYYY-MM-DD"


def clinic_tz() -> ZoneInfo:
    return ZoneInfo(settings.clinic_timezone)


def clinic_today() -> date:
    """Current calendar date at the clinic."""
    return datetime.now(timezone.utc).astimezone(clinic_tz()).date()


def parse_date(value: Union[str, date, None], required: bool = True) -> Optional[date]:
    """
    Parse a ``YYYY-MM-DD`` string.

    Args:
        value: Date string or date instance
        required: Whether a missing value is an error

    Returns:
        The parsed date, or None when the value is blank and not required

    Raises:
        ValidationFailedException: If the value is malformed, or missing when required
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None or not str(value).strip():
        if required:
            raise ValidationFailedException(DATE_FORMAT_ERROR)
        return None
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationFailedException(DATE_FORMAT_ERROR)


def day_bounds_utc(day: date) -> Tuple[datetime, datetime]:
    """
    UTC instants bounding a clinic-local calendar day.

    Returns:
        Tuple of (start inclusive, end exclusive)
    """
    tz = clinic_tz()
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def days_in_range(start: date, end: date) -> List[date]:
    """Every calendar day from ``start`` to ``end`` inclusive."""
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def to_local_date(value: Union[date, datetime, None]) -> Optional[date]:
    """
    Calendar date of a stored value at the clinic.

    Naive datetimes are treated as UTC since timestamps are written in UTC.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(clinic_tz()).date()
    return value
