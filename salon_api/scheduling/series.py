"""
Series Generation

Turns one recurring appointment draft into the concrete dated occurrences
that get saved. Every generated series is bounded: by an occurrence count,
by an inclusive end date, or by both (whichever comes first), and never by
more than ``SERIES_MAX_OCCURRENCES``.

Generated dates are not checked against existing bookings.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, List, Optional
from uuid import uuid4

from salon_api.core import config
from salon_api.scheduling.dates import add_days, format_date_str, parse_date_str
from salon_api.scheduling.records import Appointment, AppointmentFields, require_complete


class Cadence(Enum):
    WEEKLY = 7
    BIWEEKLY = 14

    @property
    def days(self) -> int:
        return self.value


@dataclass(frozen=True)
class SeriesHorizon:
    occurrences: Optional[int] = None
    until: Optional[date] = None

    def __post_init__(self):
        if self.occurrences is not None and self.occurrences < 1:
            raise ValueError('A series needs at least one occurrence.')
        if self.occurrences is not None and self.occurrences > config.SERIES_MAX_OCCURRENCES:
            raise ValueError(f'A series cannot have more than {config.SERIES_MAX_OCCURRENCES} occurrences.')

    def occurrence_limit(self) -> int:
        if self.occurrences is not None:
            return self.occurrences
        if self.until is not None:
            return config.SERIES_MAX_OCCURRENCES
        return config.SERIES_DEFAULT_OCCURRENCES


def new_series_id() -> str:
    return uuid4().hex


def series_dates(start: date, horizon: SeriesHorizon, cadence: Cadence = Cadence.WEEKLY) -> List[date]:
    if horizon.until is not None and horizon.until < start:
        raise ValueError('The series end date is before its first occurrence.')

    dates: List[date] = []
    current = start

    while len(dates) < horizon.occurrence_limit():
        if horizon.until is not None and current > horizon.until:
            break
        dates.append(current)
        current = add_days(current, cadence.days)

    return dates


def generate_series(
    template: AppointmentFields,
    horizon: Optional[SeriesHorizon] = None,
    cadence: Cadence = Cadence.WEEKLY,
    series_id_factory: Callable[[], str] = new_series_id,
) -> List[Appointment]:
    """
    Materialises a recurring draft as unsaved occurrences.

    Each occurrence copies client, service, price, time, payment method and
    status from the template; the first one falls on the template's own date
    and each following one ``cadence`` days later. All of them share one new
    ``series_id``. A horizon that yields a single occurrence produces a plain
    standalone appointment instead.

    Calling this twice for the same template creates two distinct series.
    """
    require_complete(template)
    horizon = horizon or SeriesHorizon()

    dates = series_dates(parse_date_str(template.date_str), horizon, cadence)
    series_id = series_id_factory() if len(dates) > 1 else None

    return [
        Appointment.from_draft(template, date_str=format_date_str(occurrence_date), series_id=series_id)
        for occurrence_date in dates
    ]
