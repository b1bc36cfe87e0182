"""
Date-only helpers.

Appointment dates are calendar days (``YYYY-MM-DD``) and times are wall-clock
values (``HH:MM``). Neither is an instant, so everything here works on
``datetime.date`` / ``datetime.time`` and never converts through a timestamp;
the result of parsing a date string does not depend on the process time zone.
"""

import re
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from salon_api.core import config

DATE_STR_PATTERN = re.compile(r'^(\d{4})-(\d{2})-(\d{2})$')
TIME_STR_PATTERN = re.compile(r'^([01]\d|2[0-3]):([0-5]\d)$')


def parse_date_str(value: str) -> date:
    match = DATE_STR_PATTERN.match(value or '')
    if not match:
        raise ValueError(f"Date must use the YYYY-MM-DD format, got {value!r}.")

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise ValueError(f"{value!r} is not a valid calendar date.") from exc


def format_date_str(value: date) -> str:
    return value.isoformat()


def parse_time_str(value: str) -> time:
    match = TIME_STR_PATTERN.match(value or '')
    if not match:
        raise ValueError(f"Time must use the 24-hour HH:MM format, got {value!r}.")

    return time(int(match.group(1)), int(match.group(2)))


def coerce_date(value: date | datetime | str) -> date:
    # datetime is a subclass of date, so it has to be checked first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date_str(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to a date.")


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def days_in_month(year: int, month: int) -> int:
    """Day number of the last day of the month (day 0 of the following month)."""
    if month == 12:
        first_of_next = date(year + 1, 1, 1)
    else:
        first_of_next = date(year, month + 1, 1)

    return (first_of_next - timedelta(days=1)).day


def _salon_now() -> datetime:
    if config.SALON_TIMEZONE:
        return datetime.now(ZoneInfo(config.SALON_TIMEZONE))
    return datetime.now()


def today() -> date:
    return _salon_now().date()


def current_time_str() -> str:
    return _salon_now().strftime('%H:%M')
