import logging
from typing import Callable, List, Sequence
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salon_api.database import SessionLocal
from salon_api.models.appointment import Appointment as AppointmentRow
from salon_api.models.client import Client as ClientRow
from salon_api.scheduling.clients import Client
from salon_api.scheduling.errors import PersistenceError
from salon_api.scheduling.records import Appointment

logger = logging.getLogger(__name__)

DATABASE_UNAVAILABLE_MESSAGE = 'Database unavailable. Verify DATABASE_URL and database credentials.'


def row_to_record(row: AppointmentRow) -> Appointment:
    return Appointment(
        id=row.id,
        date_str=row.date_str,
        time=row.time,
        client_name=row.client_name,
        service=row.service,
        price=row.price,
        status=row.status or 'pending',
        payment_method=row.payment_method or 'Dinheiro',
        series_id=row.series_id,
    )


def _copy_to_row(record: Appointment, row: AppointmentRow) -> None:
    row.date_str = record.date_str
    row.time = record.time
    row.client_name = record.client_name
    row.service = record.service
    row.price = record.price
    row.status = record.status.value
    row.payment_method = record.payment_method.value
    row.series_id = record.series_id


class SqlAppointmentGateway:
    """Stores appointments through SQLAlchemy, one transaction per call."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory

    def fetch_all(self) -> List[Appointment]:
        db = self._session_factory()
        try:
            rows = db.query(AppointmentRow).order_by(
                AppointmentRow.date_str.asc(),
                AppointmentRow.time.asc(),
            ).all()
            return [row_to_record(row) for row in rows]
        except SQLAlchemyError as exc:
            logger.exception('Loading appointments failed')
            raise PersistenceError(DATABASE_UNAVAILABLE_MESSAGE) from exc
        finally:
            db.close()

    def persist(self, records: Sequence[Appointment]) -> List[Appointment]:
        db = self._session_factory()
        try:
            rows: List[AppointmentRow] = []
            for record in records:
                if record.id is None:
                    row = AppointmentRow(id=uuid4().hex)
                    db.add(row)
                else:
                    row = db.get(AppointmentRow, record.id)
                    if row is None:
                        raise PersistenceError(f'Appointment {record.id} no longer exists.')
                _copy_to_row(record, row)
                rows.append(row)

            db.commit()
            for row in rows:
                db.refresh(row)
            return [row_to_record(row) for row in rows]
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception('Saving %d appointments failed', len(records))
            raise PersistenceError(DATABASE_UNAVAILABLE_MESSAGE) from exc
        except PersistenceError:
            db.rollback()
            raise
        finally:
            db.close()

    def remove(self, appointment_ids: Sequence[str]) -> None:
        db = self._session_factory()
        try:
            db.query(AppointmentRow).filter(
                AppointmentRow.id.in_(list(appointment_ids)),
            ).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception('Deleting %d appointments failed', len(appointment_ids))
            raise PersistenceError(DATABASE_UNAVAILABLE_MESSAGE) from exc
        finally:
            db.close()


def row_to_client(row: ClientRow) -> Client:
    return Client(
        id=row.id,
        name=row.name,
        phone=row.phone or '',
        vip=bool(row.vip),
        visits=row.visits or 0,
        last_visit=row.last_visit,
    )


class SqlClientDirectory:
    """Read-only view of the client registry's ``clients`` table."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory

    def fetch_all(self) -> List[Client]:
        db = self._session_factory()
        try:
            rows = db.query(ClientRow).order_by(ClientRow.name.asc()).all()
            return [row_to_client(row) for row in rows]
        except SQLAlchemyError as exc:
            logger.exception('Loading clients failed')
            raise PersistenceError(DATABASE_UNAVAILABLE_MESSAGE) from exc
        finally:
            db.close()
