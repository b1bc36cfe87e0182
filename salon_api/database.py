from dotenv import load_dotenv
from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker


load_dotenv()

from salon_api.core import config  # noqa: E402

connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(config.DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_appointment_schema_checked = False


def ensure_appointment_schema() -> None:
    global _appointment_schema_checked

    if _appointment_schema_checked:
        return

    with _schema_lock:
        if _appointment_schema_checked:
            return

        inspector = inspect(engine)

        if 'appointments' not in inspector.get_table_names():
            _appointment_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('appointments')}
        migration_steps = [
            ('status', "ALTER TABLE appointments ADD COLUMN status VARCHAR DEFAULT 'pending'"),
            ('payment_method', "ALTER TABLE appointments ADD COLUMN payment_method VARCHAR DEFAULT 'Dinheiro'"),
            ('series_id', 'ALTER TABLE appointments ADD COLUMN series_id VARCHAR'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_date_time ON appointments(date_str, time)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_series ON appointments(series_id, date_str)')
            )

        _appointment_schema_checked = True
