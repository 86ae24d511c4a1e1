"""Availability computation and filtering.

The engine maps (date, professional, roster) to the professional's slot grid:
- Start times from work_start, one interval apart, strictly before work_end
- A slot is unavailable if an active appointment starts exactly there
- A slot is unavailable if it falls in the half-open break window

Service duration is not considered: an appointment occupies only its start slot.
"""
import datetime as dt
from enum import Enum
from typing import Iterable, List, Set
from salon_scheduler import config
from salon_scheduler.models import (
    Appointment,
    ProfessionalSchedule,
    TimeSlot,
    format_minutes,
    to_minutes,
)


class TimeOfDay(str, Enum):
    """Time of day preferences."""
    MORNING = "morning"  # Before 12:00
    AFTERNOON = "afternoon"  # 12:00 and after
    ANY = "any"


def slot_times(schedule: ProfessionalSchedule) -> List[str]:
    """All candidate start times of a schedule, ascending, as "HH:MM"."""
    times = []
    current = schedule.work_start_minutes
    while current < schedule.work_end_minutes:
        times.append(format_minutes(current))
        current += schedule.slot_interval_minutes
    return times


def booked_times(
    roster: Iterable[Appointment],
    professional_id: str,
    date: dt.date
) -> Set[str]:
    """Start times held by active appointments of one professional on one date."""
    return {
        appt.start_time
        for appt in roster
        if appt.professional_id == professional_id
        and appt.date == date
        and appt.is_active
    }


def compute_slots(
    date: dt.date,
    professional_id: str,
    schedule: ProfessionalSchedule,
    roster: Iterable[Appointment]
) -> List[TimeSlot]:
    """
    Compute the slot grid for one professional on one date.

    Args:
        date: Target date (past dates are not rejected here)
        professional_id: Professional whose appointments block slots
        schedule: Validated working hours
        roster: Any appointments; other professionals and dates are ignored

    Returns:
        Ordered slots covering [work_start, work_end)
    """
    # Pre-build set of booked start times for O(1) lookup
    taken = booked_times(roster, professional_id, date)

    return [
        TimeSlot(
            time=time,
            available=time not in taken and not schedule.in_break(to_minutes(time))
        )
        for time in slot_times(schedule)
    ]


class TimeFilter:
    """Filter slot grids for display."""

    MORNING_CUTOFF = config.MORNING_CUTOFF_HOUR

    def filter_by_time_of_day(
        self,
        slots: List[TimeSlot],
        preference: TimeOfDay
    ) -> List[TimeSlot]:
        """
        Filter slots by time of day preference.

        Args:
            slots: Slot grid
            preference: Morning, afternoon, or any

        Returns:
            Filtered slots, order preserved
        """
        if preference == TimeOfDay.ANY:
            return slots

        filtered = []
        for slot in slots:
            hour = int(slot.time.split(":")[0])

            if preference == TimeOfDay.MORNING and hour < self.MORNING_CUTOFF:
                filtered.append(slot)
            elif preference == TimeOfDay.AFTERNOON and hour >= self.MORNING_CUTOFF:
                filtered.append(slot)

        return filtered

    @staticmethod
    def only_available(slots: List[TimeSlot]) -> List[TimeSlot]:
        """Keep bookable slots only."""
        return [slot for slot in slots if slot.available]
