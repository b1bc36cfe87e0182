from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from salon_api.routes.appointment_routes import get_scheduler, parse_date_query
from salon_api.scheduling.aggregation import DaySummary
from salon_api.scheduling.calendar_week import WEEKDAY_LABELS, get_week, shift_week
from salon_api.scheduling.dates import format_date_str, today
from salon_api.scheduling.scheduler import AppointmentScheduler

router = APIRouter(tags=['calendar'])

MAX_WEEK_SHIFT = 520


class CalendarDayResponse(BaseModel):
    date: str
    weekday: str
    appointment_count: int


class CalendarWeekResponse(BaseModel):
    reference_date: str
    days: list[CalendarDayResponse]


@router.get('/week', response_model=CalendarWeekResponse)
def get_calendar_week(
    day: str | None = Query(default=None, alias='date'),
    shift: int = Query(default=0, ge=-MAX_WEEK_SHIFT, le=MAX_WEEK_SHIFT),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    reference = parse_date_query(day) if day else today()
    reference = shift_week(reference, shift)

    return CalendarWeekResponse(
        reference_date=format_date_str(reference),
        days=[
            CalendarDayResponse(
                date=format_date_str(week_day),
                weekday=label,
                appointment_count=len(scheduler.appointments_on(week_day)),
            )
            for week_day, label in zip(get_week(reference), WEEKDAY_LABELS)
        ],
    )


@router.get('/today', response_model=DaySummary)
def get_today_summary(scheduler: AppointmentScheduler = Depends(get_scheduler)):
    return scheduler.day_summary()
