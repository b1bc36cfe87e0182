import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from salon_api.core import config
from salon_api.database import engine, ensure_appointment_schema
from salon_api.models import appointment, client  # noqa: F401
from salon_api.routes import appointment_routes, calendar_routes, client_routes, report_routes

logging.basicConfig(level=config.LOG_LEVEL)

app = FastAPI(title='Salon Scheduling API', debug=config.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        appointment.Base.metadata.create_all(bind=engine)
        ensure_appointment_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Salon Scheduling API Running'}


app.include_router(appointment_routes.router)
app.include_router(calendar_routes.router, prefix='/calendar')
app.include_router(report_routes.router, prefix='/reports')
app.include_router(client_routes.router, prefix='/clients')
