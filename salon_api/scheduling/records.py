"""Appointment record types shared by every scheduling component."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_serializer, field_validator

from salon_api.scheduling.dates import parse_date_str, parse_time_str
from salon_api.scheduling.errors import AppointmentValidationError

REQUIRED_FIELDS = {
    'client_name': 'client',
    'service': 'service',
    'date_str': 'date',
    'time': 'time',
}


class AppointmentStatus(str, Enum):
    confirmed = 'confirmed'
    pending = 'pending'


class PaymentMethod(str, Enum):
    cash = 'Dinheiro'
    pix = 'PIX'
    monthly = 'Mensal'


def _normalize_text(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip()


def _normalize_date_str(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if normalized:
        parse_date_str(normalized)
    return normalized


def _normalize_time_str(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if normalized:
        parse_time_str(normalized)
    return normalized


class AppointmentFields(BaseModel):
    client_name: str = Field(default='', alias='clientName')
    service: str = ''
    date_str: str = Field(default='', alias='dateStr')
    time: str = ''
    price: Decimal = Field(default=Decimal('0'), ge=0)
    status: AppointmentStatus = AppointmentStatus.pending
    payment_method: PaymentMethod = Field(default=PaymentMethod.cash, alias='paymentMethod')

    class Config:
        populate_by_name = True

    @field_validator('client_name', 'service')
    @classmethod
    def validate_text(cls, value: str) -> str:
        return _normalize_text(value)

    @field_validator('date_str')
    @classmethod
    def validate_date_str(cls, value: str) -> str:
        return _normalize_date_str(value)

    @field_validator('time')
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _normalize_time_str(value)

    @field_serializer('price', when_used='json')
    def serialize_price(self, value: Decimal) -> float:
        return float(value)


class AppointmentDraft(AppointmentFields):
    """An appointment as typed by the user, before it has been saved."""

    is_recurring: bool = False


class Appointment(AppointmentFields):
    """A saved appointment. Instances are immutable; edits produce copies."""

    id: str | None = None
    series_id: str | None = None

    class Config:
        populate_by_name = True
        frozen = True

    @classmethod
    def from_draft(cls, draft: AppointmentFields, *, date_str: str | None = None,
                   series_id: str | None = None) -> 'Appointment':
        values = draft.model_dump(include=set(AppointmentFields.model_fields))
        if date_str is not None:
            values['date_str'] = date_str
        return cls(**values, series_id=series_id)

    @property
    def is_series_member(self) -> bool:
        return self.series_id is not None


class AppointmentChanges(BaseModel):
    """Fields to change on an existing appointment; unset fields are left alone."""

    client_name: str | None = Field(default=None, alias='clientName')
    service: str | None = None
    date_str: str | None = Field(default=None, alias='dateStr')
    time: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    status: AppointmentStatus | None = None
    payment_method: PaymentMethod | None = Field(default=None, alias='paymentMethod')

    class Config:
        populate_by_name = True

    @field_validator('client_name', 'service')
    @classmethod
    def validate_text(cls, value: str | None) -> str | None:
        return _normalize_text(value)

    @field_validator('date_str')
    @classmethod
    def validate_date_str(cls, value: str | None) -> str | None:
        return _normalize_date_str(value)

    @field_validator('time')
    @classmethod
    def validate_time(cls, value: str | None) -> str | None:
        return _normalize_time_str(value)

    def as_updates(self, *, include_date: bool = True) -> dict:
        updates = self.model_dump(exclude_unset=True, exclude_none=True)
        if not include_date:
            updates.pop('date_str', None)
        return updates


def require_complete(fields: AppointmentFields) -> None:
    missing = [label for name, label in REQUIRED_FIELDS.items() if not getattr(fields, name)]
    if missing:
        raise AppointmentValidationError(missing)
