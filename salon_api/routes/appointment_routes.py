from datetime import date
from threading import Lock
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from salon_api.core import config
from salon_api.database import Base, engine, ensure_appointment_schema
from salon_api.models import appointment as appointment_model  # noqa: F401
from salon_api.scheduling.dates import format_date_str, parse_date_str, today
from salon_api.scheduling.errors import (
    AppointmentNotFoundError,
    AppointmentValidationError,
    PersistenceError,
    ScopeRequiredError,
    SchedulingError,
)
from salon_api.scheduling.recurrence import DeleteScope, EditScope
from salon_api.scheduling.records import Appointment, AppointmentChanges, AppointmentDraft
from salon_api.scheduling.scheduler import AppointmentScheduler
from salon_api.scheduling.series import Cadence, SeriesHorizon
from salon_api.scheduling.store import AppointmentStore
from salon_api.storage.sql_gateway import DATABASE_UNAVAILABLE_MESSAGE, SqlAppointmentGateway

router = APIRouter(tags=['appointments'])

_scheduler_lock = Lock()
_scheduler: AppointmentScheduler | None = None


class CreateAppointmentRequest(AppointmentDraft):
    occurrences: int | None = Field(default=None, ge=1, le=config.SERIES_MAX_OCCURRENCES)
    repeat_until: date | None = Field(default=None, alias='repeatUntil')
    cadence: str = Field(default='weekly', pattern='^(weekly|biweekly)$')

    def series_horizon(self) -> SeriesHorizon | None:
        if self.occurrences is None and self.repeat_until is None:
            return None
        return SeriesHorizon(occurrences=self.occurrences, until=self.repeat_until)

    def series_cadence(self) -> Cadence:
        return Cadence.BIWEEKLY if self.cadence == 'biweekly' else Cadence.WEEKLY


class DeletedAppointmentsResponse(BaseModel):
    deleted_ids: list[str]


def ensure_database_ready() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_appointment_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE_MESSAGE,
        ) from exc


def get_scheduler() -> AppointmentScheduler:
    global _scheduler

    if _scheduler is not None:
        return _scheduler

    with _scheduler_lock:
        if _scheduler is None:
            ensure_database_ready()
            gateway = SqlAppointmentGateway()
            store = AppointmentStore(gateway)
            try:
                store.load(gateway.fetch_all())
            except PersistenceError as exc:
                raise_http_error(exc)
            _scheduler = AppointmentScheduler(store)

    return _scheduler


def raise_http_error(exc: SchedulingError) -> NoReturn:
    if isinstance(exc, AppointmentValidationError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Client, service, date and time are required.',
        ) from exc

    if isinstance(exc, AppointmentNotFoundError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Appointment not found.',
        ) from exc

    if isinstance(exc, ScopeRequiredError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                'message': 'This appointment is part of a series. Choose a scope.',
                'series_id': exc.series_id,
                'allowed_scopes': list(exc.allowed_scopes),
            },
        ) from exc

    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=str(exc) or DATABASE_UNAVAILABLE_MESSAGE,
    ) from exc


def parse_date_query(value: str) -> date:
    try:
        return parse_date_str(value.strip())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Dates must use the YYYY-MM-DD format.',
        ) from exc


@router.get('/appointments', response_model=list[Appointment])
def list_appointments(
    day: str | None = Query(default=None, alias='date'),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    selected_day = parse_date_query(day) if day else today()
    return scheduler.appointments_on(format_date_str(selected_day))


@router.post('/appointments', response_model=list[Appointment], status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: CreateAppointmentRequest,
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    try:
        horizon = data.series_horizon()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        created = scheduler.create_appointment(
            data,
            recurring=data.is_recurring,
            horizon=horizon,
            cadence=data.series_cadence(),
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SchedulingError as exc:
        raise_http_error(exc)

    return created if isinstance(created, list) else [created]


@router.patch('/appointments/{appointment_id}', response_model=list[Appointment])
def update_appointment(
    appointment_id: str,
    changes: AppointmentChanges,
    scope: EditScope | None = Query(default=None),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    try:
        return scheduler.update_appointment(appointment_id, changes, scope)
    except SchedulingError as exc:
        raise_http_error(exc)


@router.delete('/appointments/{appointment_id}', response_model=DeletedAppointmentsResponse)
def delete_appointment(
    appointment_id: str,
    scope: DeleteScope | None = Query(default=None),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    try:
        deleted_ids = scheduler.delete_appointment(appointment_id, scope)
    except SchedulingError as exc:
        raise_http_error(exc)

    return DeletedAppointmentsResponse(deleted_ids=deleted_ids)
