"""
Revenue Aggregation

Groups appointment prices into zero-filled buckets for the financial and
dashboard charts:

- daily:   fixed hour labels of the reference day (08:00, 10:00, ... 20:00)
- weekly:  the seven days of the Monday-first week containing the reference day
- monthly: every day of the reference month
- yearly:  the twelve months of the reference year

Aggregation is a grouped sum over ``Decimal`` prices, so the result does not
depend on record order, and a record lands in at most one bucket. Dates are
read with ``parse_date_str`` and never converted through a timestamp.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Hashable, Iterable, List, Optional, Tuple

from pydantic import BaseModel, field_serializer

from salon_api.core import config
from salon_api.scheduling.calendar_week import WEEKDAY_LABELS, appointments_on, get_week
from salon_api.scheduling.dates import (
    coerce_date,
    days_in_month,
    format_date_str,
    parse_date_str,
    parse_time_str,
)
from salon_api.scheduling.records import Appointment

MONTH_LABELS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')
ZERO = Decimal('0')


class Granularity(str, Enum):
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'
    YEARLY = 'yearly'


class RevenueBucket(BaseModel):
    label: str
    total: Decimal = ZERO

    @field_serializer('total', when_used='json')
    def serialize_total(self, value: Decimal) -> float:
        return float(value)


class RevenueReport(BaseModel):
    granularity: Granularity
    reference_date: str
    period_start: str
    period_end: str
    buckets: List[RevenueBucket]
    total: Decimal
    appointment_count: int

    @field_serializer('total', when_used='json')
    def serialize_total(self, value: Decimal) -> float:
        return float(value)


class DaySummary(BaseModel):
    date: str
    appointment_count: int
    revenue: Decimal
    next_appointment: Optional[Appointment] = None

    @field_serializer('revenue', when_used='json')
    def serialize_revenue(self, value: Decimal) -> float:
        return float(value)


def daily_bucket_hours() -> List[int]:
    return list(range(
        config.DAILY_BUCKET_START_HOUR,
        config.DAILY_BUCKET_END_HOUR + 1,
        config.DAILY_BUCKET_STEP_HOURS,
    ))


def _bucket_layout(granularity: Granularity, reference: date) -> List[Tuple[Hashable, str]]:
    if granularity is Granularity.DAILY:
        return [(hour, f'{hour:02d}:00') for hour in daily_bucket_hours()]

    if granularity is Granularity.WEEKLY:
        return list(zip(get_week(reference), WEEKDAY_LABELS))

    if granularity is Granularity.MONTHLY:
        last_day = days_in_month(reference.year, reference.month)
        return [(day, str(day)) for day in range(1, last_day + 1)]

    return [(month, label) for month, label in enumerate(MONTH_LABELS, start=1)]


def _daily_bucket_hour(time_str: str, hours: List[int]) -> int:
    hour = parse_time_str(time_str).hour
    bucket = hours[0]
    for candidate in hours:
        if candidate <= hour:
            bucket = candidate
    return bucket


def _bucket_key(record: Appointment, granularity: Granularity, reference: date,
                hours: List[int]) -> Optional[Hashable]:
    if not record.date_str:
        return None

    record_date = parse_date_str(record.date_str)

    if granularity is Granularity.DAILY:
        if record_date != reference or not record.time:
            return None
        return _daily_bucket_hour(record.time, hours)

    if granularity is Granularity.WEEKLY:
        return record_date

    if granularity is Granularity.MONTHLY:
        if (record_date.year, record_date.month) != (reference.year, reference.month):
            return None
        return record_date.day

    if record_date.year != reference.year:
        return None
    return record_date.month


def _grouped_totals(records: Iterable[Appointment], granularity: Granularity,
                    reference: date) -> Tuple[List[Tuple[Hashable, str]], Dict[Hashable, Decimal], int]:
    layout = _bucket_layout(granularity, reference)
    totals: Dict[Hashable, Decimal] = {key: ZERO for key, _ in layout}
    hours = daily_bucket_hours()
    counted = 0

    for record in records:
        key = _bucket_key(record, granularity, reference, hours)
        if key in totals:
            totals[key] += record.price
            counted += 1

    return layout, totals, counted


def aggregate_revenue(
    records: Iterable[Appointment],
    granularity: Granularity | str,
    reference_date: date | datetime | str,
) -> List[RevenueBucket]:
    """
    Sums appointment prices per bucket.

    Args:
        records: appointments to aggregate (typically a store snapshot)
        granularity: daily, weekly, monthly or yearly
        reference_date: any day inside the period to report on

    Returns:
        list[RevenueBucket]: one bucket per slot of the period, in order,
        with ``Decimal('0')`` for slots without appointments
    """
    granularity = Granularity(granularity)
    reference = coerce_date(reference_date)

    layout, totals, _ = _grouped_totals(records, granularity, reference)
    return [RevenueBucket(label=label, total=totals[key]) for key, label in layout]


def period_bounds(granularity: Granularity | str, reference_date: date | datetime | str) -> Tuple[date, date]:
    granularity = Granularity(granularity)
    reference = coerce_date(reference_date)

    if granularity is Granularity.DAILY:
        return reference, reference
    if granularity is Granularity.WEEKLY:
        week = get_week(reference)
        return week[0], week[-1]
    if granularity is Granularity.MONTHLY:
        return (
            reference.replace(day=1),
            reference.replace(day=days_in_month(reference.year, reference.month)),
        )
    return date(reference.year, 1, 1), date(reference.year, 12, 31)


def summarize_revenue(
    records: Iterable[Appointment],
    granularity: Granularity | str,
    reference_date: date | datetime | str,
) -> RevenueReport:
    granularity = Granularity(granularity)
    reference = coerce_date(reference_date)
    start, end = period_bounds(granularity, reference)

    layout, totals, counted = _grouped_totals(records, granularity, reference)
    buckets = [RevenueBucket(label=label, total=totals[key]) for key, label in layout]

    return RevenueReport(
        granularity=granularity,
        reference_date=format_date_str(reference),
        period_start=format_date_str(start),
        period_end=format_date_str(end),
        buckets=buckets,
        total=sum((bucket.total for bucket in buckets), ZERO),
        appointment_count=counted,
    )


def summarize_day(
    records: Iterable[Appointment],
    day: date | datetime | str,
    now_time: Optional[str] = None,
) -> DaySummary:
    """Today's card on the dashboard: how many bookings, how much, who is next."""
    day = coerce_date(day)
    day_records = appointments_on(records, day)

    upcoming = [record for record in day_records if now_time is None or record.time >= now_time]

    return DaySummary(
        date=format_date_str(day),
        appointment_count=len(day_records),
        revenue=sum((record.price for record in day_records), ZERO),
        next_appointment=upcoming[0] if upcoming else None,
    )
