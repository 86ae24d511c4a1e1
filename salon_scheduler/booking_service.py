"""Booking service: the operations offered to the presentation layer.

Flow:
1. get_available_slots → slot grid for a professional and date
2. create_appointment → validate request, then atomic check-and-append
3. update_appointment_status → lifecycle check, then compare-and-swap
"""
import datetime as dt
import uuid
from typing import Callable, List, Optional, Union
from salon_scheduler.availability import compute_slots
from salon_scheduler.catalog import ShopCatalog
from salon_scheduler.dashboard import DailySummary, daily_queue, summarize_day
from salon_scheduler.errors import PastDateError, SlotConflict, SlotUnavailable
from salon_scheduler.lifecycle import apply_transition
from salon_scheduler.logging_config import get_logger
from salon_scheduler.models import (
    Appointment,
    AppointmentStatus,
    BookingRequest,
    ServiceQuote,
    TimeSlot,
    to_minutes,
)
from salon_scheduler.repository import AppointmentRepository

logger = get_logger(__name__)

MAX_ALTERNATIVES = 5


def new_appointment_id() -> str:
    """Generate unique appointment ID."""
    return f"appt-{uuid.uuid4().hex[:12]}"


class BookingService:
    """
    Entry point of the scheduling core.

    Pattern: catalog (static config) and repository (roster) are injected;
    the service holds no global state of its own.
    """

    def __init__(
        self,
        catalog: ShopCatalog,
        repository: AppointmentRepository,
        today: Callable[[], dt.date] = dt.date.today
    ):
        """
        Args:
            catalog: Professionals and services
            repository: Appointment roster storage
            today: Clock used by the past-date rule
        """
        self.catalog = catalog
        self.repository = repository
        self.today = today

    def get_available_slots(self, date: dt.date, professional_id: str) -> List[TimeSlot]:
        """
        Slot grid of a professional for a date.

        Raises:
            NotFound: If the professional is unknown
        """
        professional = self.catalog.get_professional(professional_id)
        roster = self.repository.list_appointments(professional_id=professional_id, date=date)
        return compute_slots(date, professional_id, professional.schedule, roster)

    def create_appointment(self, request: BookingRequest) -> Appointment:
        """
        Book an appointment.

        Raises:
            NotFound: Unknown professional or service
            PastDateError: Date before today
            SlotUnavailable: Time is off-grid, outside working hours or in the break
            SlotConflict: An active appointment already holds the slot
        """
        professional = self.catalog.get_professional(request.professional_id)
        self.catalog.quote(request.service_ids)

        if request.date < self.today():
            raise PastDateError(
                f"Cannot book {request.date.isoformat()}: date is in the past"
            )

        schedule = professional.schedule
        minutes = to_minutes(request.start_time)
        if not schedule.is_on_grid(minutes) or schedule.in_break(minutes):
            raise SlotUnavailable(
                f"{request.start_time} is not an offered time for {professional.name}"
            )

        appointment = Appointment(
            id=new_appointment_id(),
            professional_id=professional.id,
            client_id=request.client.id,
            client_name=request.client.name,
            client_phone=request.client.phone,
            service_ids=list(dict.fromkeys(request.service_ids)),
            date=request.date,
            start_time=request.start_time,
            status=AppointmentStatus.SCHEDULED,
        )

        try:
            self.repository.add_if_slot_free(appointment)
        except SlotConflict as e:
            e.alternatives = self._alternatives(request.date, professional.id, request.start_time)
            logger.info(
                "booking_rejected",
                professional_id=professional.id,
                date=request.date.isoformat(),
                start_time=request.start_time,
                alternatives=e.alternatives
            )
            raise

        logger.info(
            "appointment_booked",
            appointment_id=appointment.id,
            professional_id=appointment.professional_id,
            client_id=appointment.client_id,
            date=appointment.date.isoformat(),
            start_time=appointment.start_time
        )
        return appointment

    def _alternatives(self, date: dt.date, professional_id: str, start_time: str) -> List[str]:
        free = [s.time for s in self.get_available_slots(date, professional_id) if s.available]
        later = [t for t in free if t > start_time]
        return (later or free)[:MAX_ALTERNATIVES]

    def get_appointment(self, appointment_id: str) -> Appointment:
        return self.repository.get(appointment_id)

    def update_appointment_status(
        self,
        appointment_id: str,
        new_status: Union[AppointmentStatus, str]
    ) -> Appointment:
        """
        Move an appointment to a new status.

        Raises:
            NotFound: Unknown appointment
            InvalidTransition: Current status is terminal, or changed concurrently
        """
        current = self.repository.get(appointment_id)
        updated = apply_transition(current, AppointmentStatus(new_status))

        stored = self.repository.update_status(
            appointment_id,
            updated.status,
            expected_status=current.status
        )
        logger.info(
            "appointment_status_changed",
            appointment_id=appointment_id,
            previous=current.status.value,
            status=stored.status.value
        )
        return stored

    def cancel_appointment(self, appointment_id: str) -> Appointment:
        return self.update_appointment_status(appointment_id, AppointmentStatus.CANCELLED)

    def quote_services(self, service_ids: List[str]) -> ServiceQuote:
        return self.catalog.quote(service_ids)

    def daily_queue(self, date: dt.date, professional_id: Optional[str] = None) -> List[Appointment]:
        roster = self.repository.list_appointments(professional_id=professional_id, date=date)
        return daily_queue(roster, date, professional_id)

    def daily_summary(self, date: dt.date, professional_id: Optional[str] = None) -> DailySummary:
        roster = self.repository.list_appointments(professional_id=professional_id, date=date)
        return summarize_day(roster, date, self.catalog, professional_id)

    def client_appointments(self, client_id: str) -> List[Appointment]:
        """The client's appointments, cancelled ones hidden, in chronological order."""
        roster = self.repository.list_appointments(client_id=client_id)
        visible = [appt for appt in roster if appt.is_active]
        return sorted(visible, key=lambda appt: (appt.date, to_minutes(appt.start_time)))
