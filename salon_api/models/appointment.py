"""Appointment model definitions."""

from sqlalchemy import Column, Numeric, String
from salon_api.database import Base


class Appointment(Base):
    """Represents one booked salon slot as stored by the persistence layer."""
    __tablename__ = "appointments"

    id = Column(String(32), primary_key=True)
    date_str = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD, no zone
    time = Column(String(5), nullable=False)  # HH:MM wall clock
    client_name = Column(String, nullable=False)
    service = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String, nullable=False, default="pending")
    payment_method = Column(String, nullable=False, default="Dinheiro")
    series_id = Column(String(32), nullable=True, index=True)
