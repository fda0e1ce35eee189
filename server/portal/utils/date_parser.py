"""
Date Utilities for Portal Records

Stored dates are ISO strings ("YYYY-MM-DD" or full ISO timestamps). Leave
expiry is evaluated against the operational clock, a fixed UTC offset
(UTC-3 by default), never the server's local time zone.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

from portal.config import portal_settings


def operational_timezone(offset_hours: Optional[int] = None) -> timezone:
    if offset_hours is None:
        offset_hours = portal_settings.PORTAL_UTC_OFFSET_HOURS
    return timezone(timedelta(hours=offset_hours))


def operational_now(offset_hours: Optional[int] = None) -> datetime:
    """Current instant expressed at the operational UTC offset."""
    return datetime.now(operational_timezone(offset_hours))


def as_operational(moment: datetime, offset_hours: Optional[int] = None) -> datetime:
    """Attach the operational offset to naive datetimes; convert aware ones."""
    tz = operational_timezone(offset_hours)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def parse_iso_date(value: Any) -> Optional[date]:
    """
    Parse the calendar date part of a stored value.

    Accepts date/datetime objects and strings whose first 10 characters are
    "YYYY-MM-DD". Returns None for empty or unparseable values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if len(text) < 10:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def iso_date_prefix(value: Any) -> Optional[str]:
    """First 10 characters of a stored date value, used for range comparisons."""
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    text = str(value).strip()
    return text[:10] if text else None


def end_of_day(day: date, offset_hours: Optional[int] = None) -> datetime:
    """Last representable instant of a calendar day at the operational offset."""
    return datetime.combine(day, time(23, 59, 59, 999999), tzinfo=operational_timezone(offset_hours))


def format_br_date(value: Any) -> str:
    """Render a stored date as dd/MM/yyyy ("" when missing)."""
    parsed = parse_iso_date(value)
    if parsed is None:
        return ""
    return parsed.strftime("%d/%m/%Y")


def utc_now_iso() -> str:
    """Timestamp for createdAt/updatedAt, e.g. 2024-03-01T12:30:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
