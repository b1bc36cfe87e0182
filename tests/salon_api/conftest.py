import os
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from salon_api.database import Base  # noqa: E402
from salon_api.models.appointment import Appointment as AppointmentRow  # noqa: E402
from salon_api.models.client import Client as ClientRow  # noqa: E402
from salon_api.scheduling.errors import PersistenceError  # noqa: E402
from salon_api.scheduling.records import Appointment  # noqa: E402
from salon_api.scheduling.store import AppointmentStore  # noqa: E402


class FakeGateway:
    """Records every call and assigns sequential ids, or fails on demand."""

    def __init__(self):
        self.fail = False
        self.persist_calls = []
        self.remove_calls = []
        self._next_id = 0

    def persist(self, records):
        self.persist_calls.append(list(records))
        if self.fail:
            raise PersistenceError('database down')

        saved = []
        for record in records:
            if record.id is None:
                self._next_id += 1
                record = record.model_copy(update={'id': f'id-{self._next_id}'})
            saved.append(record)
        return saved

    def remove(self, appointment_ids):
        self.remove_calls.append(list(appointment_ids))
        if self.fail:
            raise PersistenceError('database down')


def make_appointment(appointment_id, date_str, time='10:00', *, price='50', series_id=None, **fields):
    values = {
        'client_name': 'Ana Souza',
        'service': 'Pé e Mão',
        'price': Decimal(price),
    }
    values.update(fields)
    return Appointment(id=appointment_id, date_str=date_str, time=time, series_id=series_id, **values)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def store(gateway: FakeGateway) -> AppointmentStore:
    return AppointmentStore(gateway)


@pytest.fixture
def weekly_series():
    return [
        make_appointment('a', '2024-01-01', series_id='s1'),
        make_appointment('b', '2024-01-08', series_id='s1'),
        make_appointment('c', '2024-01-15', series_id='s1'),
    ]


@pytest.fixture(name='make_appointment')
def make_appointment_fixture():
    return make_appointment


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[AppointmentRow.__table__, ClientRow.__table__])

    try:
        yield testing_session_local
    finally:
        Base.metadata.drop_all(bind=engine, tables=[AppointmentRow.__table__, ClientRow.__table__])
        engine.dispose()
