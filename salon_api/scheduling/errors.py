"""Errors raised by the scheduling core."""


class SchedulingError(Exception):
    """Base class for every error the scheduling core raises."""


class AppointmentValidationError(SchedulingError):
    """A draft or edit is missing a required field; nothing was written."""

    def __init__(self, missing_fields):
        self.missing_fields = tuple(missing_fields)
        super().__init__(f"Missing required fields: {', '.join(self.missing_fields)}.")


class ScopeRequiredError(SchedulingError):
    """A series member was edited or deleted without choosing how far it propagates."""

    def __init__(self, appointment_id: str | None, series_id: str, allowed_scopes):
        self.appointment_id = appointment_id
        self.series_id = series_id
        self.allowed_scopes = tuple(allowed_scopes)
        super().__init__(
            f"Appointment {appointment_id} belongs to series {series_id}; "
            f"choose one of: {', '.join(self.allowed_scopes)}."
        )


class AppointmentNotFoundError(SchedulingError):
    def __init__(self, appointment_id: str):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment {appointment_id} not found.")


class PersistenceError(SchedulingError):
    """The persistence collaborator rejected a write or delete batch."""
