"""
Calendar week navigation for the schedule grid.

Weeks start on Monday. All functions are pure and work on date-only values.
"""

from datetime import date, datetime
from typing import Iterable, List

from salon_api.scheduling.dates import add_days, coerce_date, format_date_str
from salon_api.scheduling.records import Appointment

DAYS_PER_WEEK = 7
WEEKDAY_LABELS = ('MON', 'TUE', 'WED', 'THU', 'FRI', 'SAT', 'SUN')


def week_start(reference: date | datetime | str) -> date:
    reference = coerce_date(reference)

    # isoweekday() numbers Sunday as 7, so the offset back to Monday is never negative
    offset = reference.isoweekday() - 1
    return add_days(reference, -offset)


def get_week(reference: date | datetime | str) -> List[date]:
    """
    Returns the seven dates, Monday to Sunday, of the week containing ``reference``.

    Args:
        reference: any day of the wanted week (date, datetime or ``YYYY-MM-DD``)

    Returns:
        list[date]: seven consecutive dates starting on a Monday
    """
    monday = week_start(reference)
    return [add_days(monday, offset) for offset in range(DAYS_PER_WEEK)]


def shift_week(reference: date | datetime | str, weeks: int) -> date:
    return add_days(coerce_date(reference), DAYS_PER_WEEK * weeks)


def appointments_on(records: Iterable[Appointment], day: date | datetime | str) -> List[Appointment]:
    day_str = format_date_str(coerce_date(day))
    matching = [record for record in records if record.date_str == day_str]
    matching.sort(key=lambda record: record.time)
    return matching
