"""
DateTime utilities for front-desk operations.

This module provides the clock helpers, weekday classification and the
date/time wire conversions used by appointments, consultations and invoices.
"""

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import List, Optional, Union
from zoneinfo import ZoneInfo

WIRE_DATE_FORMAT = "%Y-%m-%d"
WIRE_TIME_FORMAT = "%H:%M"
DISPLAY_DATE_FORMAT = "%d/%m/%Y"


class DayOfWeek(Enum):
    """Enumeration for days of the week."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def is_weekend(self) -> bool:
        return self in (DayOfWeek.SATURDAY, DayOfWeek.SUNDAY)


def get_current_utc() -> datetime:
    """Get the current UTC datetime."""
    return datetime.now(ZoneInfo("UTC"))


def get_current_local(timezone: str = "UTC") -> datetime:
    """Get the current datetime in a specific timezone."""
    return datetime.now(ZoneInfo(timezone))


def today(timezone: str = "UTC") -> date:
    """Get today's calendar date in a specific timezone."""
    return get_current_local(timezone).date()


def is_weekend(day: date) -> bool:
    """Check whether a date falls on Saturday or Sunday."""
    return DayOfWeek(day.weekday()).is_weekend


def week_dates(day: date) -> List[date]:
    """
    Get the seven dates of the week containing ``day``.

    Weeks run Monday to Sunday, so a Sunday belongs to the week that started
    six days earlier.

    Args:
        day: Any date inside the wanted week

    Returns:
        Dates from Monday through Sunday, in order
    """
    monday = day - timedelta(days=day.weekday())
    return [monday + timedelta(days=offset) for offset in range(7)]


def parse_wire_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """
    Parse a date coming from the backend.

    Accepts ``YYYY-MM-DD`` strings, full ISO datetimes (the date part is
    kept) and date/datetime objects.

    Raises:
        ValueError: If the string is not a recognised date
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if len(text) > 10:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return datetime.strptime(text, WIRE_DATE_FORMAT).date()


def parse_wire_time(value: Union[str, time, None]) -> Optional[time]:
    """
    Parse a time-of-day coming from the backend.

    ``HH:MM`` and ``HH:MM:SS`` are accepted; seconds are dropped because slots
    have minute granularity.

    Raises:
        ValueError: If the string is not a recognised time
    """
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    parsed = time.fromisoformat(value.strip())
    return parsed.replace(second=0, microsecond=0)


def format_wire_date(value: date) -> str:
    return value.strftime(WIRE_DATE_FORMAT)


def format_wire_time(value: time) -> str:
    return value.strftime(WIRE_TIME_FORMAT)


def format_display_date(value: Optional[date]) -> str:
    """Format a date the way the clinic screens show it (dd/mm/yyyy)."""
    if value is None:
        return "N/A"
    return value.strftime(DISPLAY_DATE_FORMAT)
