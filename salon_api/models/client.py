"""Client model definitions."""

from sqlalchemy import Boolean, Column, Integer, String
from salon_api.database import Base


class Client(Base):
    """A salon client. Maintained by the client registry; this service only reads it."""
    __tablename__ = "clients"

    id = Column(String(32), primary_key=True)
    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=False, default="")
    vip = Column(Boolean, nullable=False, default=False)
    visits = Column(Integer, nullable=False, default=0)
    last_visit = Column(String(10), nullable=True)  # YYYY-MM-DD
