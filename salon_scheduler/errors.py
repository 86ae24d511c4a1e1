"""Domain errors for the scheduling core.

All errors are recoverable at the caller's discretion. Each one carries a
message that can be shown to the end user as-is.
"""
from typing import List, Optional


class SchedulingError(Exception):
    """Base class for every scheduling core error."""
    code = "SCHEDULING_ERROR"


class ConfigurationError(SchedulingError):
    """Raised when a professional schedule or catalog is malformed."""
    code = "CONFIGURATION_ERROR"


class NotFound(SchedulingError):
    """Raised when an appointment, professional or service id is unknown."""
    code = "NOT_FOUND"

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} '{identifier}' not found")
        self.kind = kind
        self.identifier = identifier


class SlotConflict(SchedulingError):
    """Raised when an active appointment already holds the requested slot."""
    code = "SLOT_CONFLICT"

    def __init__(
        self,
        professional_id: str,
        date: str,
        start_time: str,
        alternatives: Optional[List[str]] = None
    ):
        super().__init__(
            f"This time slot is no longer available ({date} {start_time}), "
            "please pick another"
        )
        self.professional_id = professional_id
        self.date = date
        self.start_time = start_time
        self.alternatives = alternatives or []


class InvalidTransition(SchedulingError):
    """Raised on an illegal appointment status change."""
    code = "INVALID_TRANSITION"

    def __init__(self, appointment_id: str, current: str, requested: str):
        super().__init__(
            f"Appointment {appointment_id} cannot change from {current} to {requested}"
        )
        self.appointment_id = appointment_id
        self.current = current
        self.requested = requested


class BookingValidationError(SchedulingError):
    """Raised when a booking request is not acceptable for a reason other than a conflict."""
    code = "INVALID_BOOKING"


class PastDateError(BookingValidationError):
    """Raised when a booking targets a date before today."""
    code = "PAST_DATE"


class SlotUnavailable(BookingValidationError):
    """Raised when the start time is not an offered slot (off-grid, outside hours or in the break)."""
    code = "SLOT_UNAVAILABLE"
