"""Appointment status lifecycle.

SCHEDULED is the initial state. COMPLETED, NO_SHOW and CANCELLED are terminal:
no transition leaves them.
"""
from typing import Dict, List
from salon_scheduler.errors import InvalidTransition
from salon_scheduler.models import Appointment, AppointmentStatus


# Pattern: Current state → [allowed next states]
VALID_TRANSITIONS: Dict[AppointmentStatus, List[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: [
        AppointmentStatus.COMPLETED,
        AppointmentStatus.NO_SHOW,
        AppointmentStatus.CANCELLED,
    ],
    AppointmentStatus.COMPLETED: [],
    AppointmentStatus.NO_SHOW: [],
    AppointmentStatus.CANCELLED: [],
}

TERMINAL_STATUSES = frozenset(
    status for status, allowed in VALID_TRANSITIONS.items() if not allowed
)


def validate_transition(
    current: AppointmentStatus,
    intended: AppointmentStatus
) -> bool:
    """
    Validate status transition.

    Example:
        >>> validate_transition(
        ...     AppointmentStatus.SCHEDULED,
        ...     AppointmentStatus.COMPLETED
        ... )
        True
    """
    return intended in VALID_TRANSITIONS.get(current, [])


def apply_transition(
    appointment: Appointment,
    new_status: AppointmentStatus
) -> Appointment:
    """
    Return a copy of the appointment with the new status.

    Raises:
        InvalidTransition: If the move is not in VALID_TRANSITIONS
    """
    if not validate_transition(appointment.status, new_status):
        raise InvalidTransition(
            appointment.id,
            appointment.status.value,
            AppointmentStatus(new_status).value
        )
    return appointment.model_copy(update={"status": AppointmentStatus(new_status)})
