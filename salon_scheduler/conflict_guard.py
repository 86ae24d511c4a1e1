"""Booking conflict guard.

At most one active appointment per (professional, date, start time).
The check alone is not atomic; repositories call it inside their own
lock or transaction when appending (see AppointmentRepository.add_if_slot_free).
"""
import datetime as dt
from typing import Iterable, Optional, Tuple
from salon_scheduler.errors import SlotConflict
from salon_scheduler.models import Appointment

SlotKey = Tuple[str, dt.date, str]


def slot_key(professional_id: str, date: dt.date, start_time: str) -> SlotKey:
    """Canonical key of a bookable slot."""
    return (professional_id, date, start_time)


def find_conflict(
    candidate: Appointment,
    roster: Iterable[Appointment]
) -> Optional[Appointment]:
    """Return the active appointment holding the candidate's slot, if any."""
    key = slot_key(candidate.professional_id, candidate.date, candidate.start_time)
    for appt in roster:
        if appt.id == candidate.id or not appt.is_active:
            continue
        if slot_key(appt.professional_id, appt.date, appt.start_time) == key:
            return appt
    return None


def ensure_slot_free(candidate: Appointment, roster: Iterable[Appointment]) -> None:
    """
    Reject the candidate if its slot is already held.

    Raises:
        SlotConflict: If an active appointment has the same slot key
    """
    if find_conflict(candidate, roster) is not None:
        raise SlotConflict(
            candidate.professional_id,
            candidate.date.isoformat(),
            candidate.start_time
        )
