"""In-memory appointment store for the active session."""

import logging
from threading import Lock
from typing import Dict, Iterable, List, Optional, Protocol, Sequence
from uuid import uuid4

from salon_api.scheduling.errors import PersistenceError
from salon_api.scheduling.records import Appointment

logger = logging.getLogger(__name__)

PENDING_KEY_PREFIX = 'pending-'


class AppointmentGateway(Protocol):
    """Persistence collaborator. Each call is atomic: all records or none."""

    def persist(self, records: Sequence[Appointment]) -> List[Appointment]:
        ...

    def remove(self, appointment_ids: Sequence[str]) -> None:
        ...


class AppointmentStore:
    """
    Authoritative collection of the session's appointments.

    ``apply_writes`` and ``apply_deletes`` are the only mutation paths. A batch
    is first applied locally and marked pending, then handed to the gateway in
    one call; it is confirmed when the gateway succeeds and reverted to the
    exact previous state when it fails, after which the error is re-raised.

    Reads (``get``, ``snapshot``, ``len``) only ever see confirmed records:
    while a batch is pending they return the state from before the batch.
    """

    def __init__(self, gateway: AppointmentGateway):
        self._gateway = gateway
        self._records: Dict[str, Appointment] = {}
        self._pending: set[str] = set()
        # confirmed value of every key a pending write batch touches; None for new keys
        self._confirmed: Dict[str, Optional[Appointment]] = {}
        self._state_lock = Lock()

    def load(self, records: Iterable[Appointment]) -> None:
        with self._state_lock:
            self._records = {record.id: record for record in records}
            self._pending.clear()
            self._confirmed.clear()

    def get(self, appointment_id: str) -> Optional[Appointment]:
        with self._state_lock:
            if appointment_id in self._confirmed:
                return self._confirmed[appointment_id]
            return self._records.get(appointment_id)

    def snapshot(self) -> List[Appointment]:
        with self._state_lock:
            records = [
                self._confirmed[key] if key in self._confirmed else record
                for key, record in self._records.items()
            ]

        records = [record for record in records if record is not None]
        records.sort(key=lambda record: (record.date_str, record.time))
        return records

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def __len__(self) -> int:
        return len(self.snapshot())

    def apply_writes(self, records: Sequence[Appointment]) -> List[Appointment]:
        """Saves new or changed records as one batch and returns their persisted form."""
        records = list(records)
        if not records:
            return []

        previous: Dict[str, Optional[Appointment]] = {}
        with self._state_lock:
            for record in records:
                key = record.id or f'{PENDING_KEY_PREFIX}{uuid4().hex}'
                previous.setdefault(key, self._records.get(key))
                self._records[key] = record
                self._pending.add(key)
            self._confirmed.update(previous)

        try:
            persisted = self._gateway.persist(records)
            if len(persisted) != len(records):
                raise PersistenceError(
                    f'Expected {len(records)} saved appointments, the database returned {len(persisted)}.'
                )
        except Exception:
            self._revert(previous)
            logger.warning('Reverted a batch of %d appointment writes', len(records))
            raise

        with self._state_lock:
            for key in previous:
                self._records.pop(key, None)
                self._pending.discard(key)
                self._confirmed.pop(key, None)
            for record in persisted:
                self._records[record.id] = record

        return persisted

    def apply_deletes(self, appointment_ids: Sequence[str]) -> List[str]:
        """Removes a batch of records; unknown ids are ignored."""
        with self._state_lock:
            removed = [
                appointment_id
                for appointment_id in dict.fromkeys(appointment_ids)
                if appointment_id in self._records
            ]
            if not removed:
                return []
            self._pending.update(removed)

        try:
            self._gateway.remove(removed)
        except Exception:
            with self._state_lock:
                self._pending.difference_update(removed)
            logger.warning('Reverted a batch of %d appointment deletes', len(removed))
            raise

        with self._state_lock:
            for appointment_id in removed:
                del self._records[appointment_id]
                self._pending.discard(appointment_id)

        return removed

    def _revert(self, previous: Dict[str, Optional[Appointment]]) -> None:
        with self._state_lock:
            for key, record in previous.items():
                self._pending.discard(key)
                self._confirmed.pop(key, None)
                if record is None:
                    self._records.pop(key, None)
                else:
                    self._records[key] = record
