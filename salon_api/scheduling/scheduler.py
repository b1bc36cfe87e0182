"""
Scheduler

Entry point for the screens and routes: turns create/edit/delete intents into
write sets with the series generator and recurrence resolver, and applies
them to the store. Reads (day lists, reports) are views over store snapshots.
"""

import logging
from datetime import date, datetime
from threading import Lock
from typing import List, Optional, Union

from salon_api.scheduling import dates
from salon_api.scheduling.aggregation import DaySummary, Granularity, RevenueReport, summarize_day, summarize_revenue
from salon_api.scheduling.calendar_week import appointments_on
from salon_api.scheduling.errors import AppointmentNotFoundError
from salon_api.scheduling.recurrence import DeleteScope, EditScope, resolve_delete, resolve_edit
from salon_api.scheduling.records import Appointment, AppointmentChanges, AppointmentDraft, require_complete
from salon_api.scheduling.series import Cadence, SeriesHorizon, generate_series
from salon_api.scheduling.store import AppointmentStore

logger = logging.getLogger(__name__)


class AppointmentScheduler:
    def __init__(self, store: AppointmentStore):
        self._store = store
        self._write_lock = Lock()

    @property
    def store(self) -> AppointmentStore:
        return self._store

    def _get_target(self, appointment_id: str) -> Appointment:
        target = self._store.get(appointment_id)
        if target is None:
            raise AppointmentNotFoundError(appointment_id)
        return target

    def create_appointment(
        self,
        draft: AppointmentDraft,
        recurring: Optional[bool] = None,
        horizon: Optional[SeriesHorizon] = None,
        cadence: Cadence = Cadence.WEEKLY,
    ) -> Union[Appointment, List[Appointment]]:
        """
        Saves a new appointment, or a whole series when recurring.

        Args:
            draft: the appointment as entered; client, service, date and time are required
            recurring: overrides ``draft.is_recurring`` when given
            horizon: bound of the series; defaults to ``SERIES_DEFAULT_OCCURRENCES``
            cadence: spacing between occurrences

        Returns:
            Appointment for a single booking, list[Appointment] for a recurring one
        """
        require_complete(draft)
        recurring = draft.is_recurring if recurring is None else recurring

        if recurring:
            records = generate_series(draft, horizon, cadence)
        else:
            records = [Appointment.from_draft(draft)]

        with self._write_lock:
            persisted = self._store.apply_writes(records)

        logger.info(
            'Created %d appointment(s) starting %s: %s',
            len(persisted), draft.date_str, ', '.join(record.id for record in persisted),
        )
        return persisted if recurring else persisted[0]

    def update_appointment(
        self,
        appointment_id: str,
        changes: AppointmentChanges,
        scope: Optional[EditScope] = None,
    ) -> List[Appointment]:
        with self._write_lock:
            target = self._get_target(appointment_id)
            write_set = resolve_edit(self._store.snapshot(), target, changes, scope)
            updated = self._store.apply_writes(write_set)

        logger.info('Updated %d appointment(s) from %s (scope=%s)', len(updated), appointment_id, scope)
        return updated

    def delete_appointment(self, appointment_id: str, scope: Optional[DeleteScope] = None) -> List[str]:
        with self._write_lock:
            target = self._get_target(appointment_id)
            delete_set = resolve_delete(self._store.snapshot(), target, scope)
            deleted = self._store.apply_deletes(delete_set)

        logger.info('Deleted %d appointment(s) from %s (scope=%s)', len(deleted), appointment_id, scope)
        return deleted

    def appointments_on(self, day: date | datetime | str) -> List[Appointment]:
        return appointments_on(self._store.snapshot(), day)

    def revenue_report(self, granularity: Granularity | str, reference_date: date | datetime | str) -> RevenueReport:
        return summarize_revenue(self._store.snapshot(), granularity, reference_date)

    def day_summary(self, day: date | datetime | str | None = None, now_time: Optional[str] = None) -> DaySummary:
        if day is None:
            day = dates.today()
            now_time = now_time or dates.current_time_str()
        return summarize_day(self._store.snapshot(), day, now_time)
