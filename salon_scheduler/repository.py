"""Appointment roster storage interface and in-memory implementation.

The roster is the single source of truth. The core only reads it, except for
two write paths: appending a new appointment (gated by the conflict guard) and
changing an appointment's status.
"""
import datetime as dt
import threading
import weakref
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional
from salon_scheduler.conflict_guard import SlotKey, ensure_slot_free, slot_key
from salon_scheduler.errors import InvalidTransition, NotFound
from salon_scheduler.logging_config import get_logger
from salon_scheduler.models import Appointment, AppointmentStatus

logger = get_logger(__name__)


class AppointmentRepository(ABC):
    """Storage collaborator for the appointment roster.

    Implementations must make add_if_slot_free a single atomic
    check-and-append, and update_status a compare-and-swap on the status.
    """

    @abstractmethod
    def get(self, appointment_id: str) -> Appointment:
        """
        Retrieve an appointment by id.

        Raises:
            NotFound: If the id is unknown
        """

    @abstractmethod
    def list_appointments(
        self,
        professional_id: Optional[str] = None,
        date: Optional[dt.date] = None,
        client_id: Optional[str] = None
    ) -> List[Appointment]:
        """Snapshot of the roster, optionally filtered."""

    @abstractmethod
    def add_if_slot_free(self, appointment: Appointment) -> Appointment:
        """
        Append the appointment unless an active one holds its slot.

        Raises:
            SlotConflict: If the slot is already held
        """

    @abstractmethod
    def update_status(
        self,
        appointment_id: str,
        new_status: AppointmentStatus,
        expected_status: AppointmentStatus
    ) -> Appointment:
        """
        Set a new status if the stored one still equals expected_status.

        Raises:
            NotFound: If the id is unknown
            InvalidTransition: If the stored status changed meanwhile
        """


class InMemoryAppointmentRepository(AppointmentRepository):
    """
    Thread-safe in-memory roster.

    Pattern: one lock per slot key, so bookings for different slots never
    wait on each other. A slot lock lives only while some caller holds it.
    A short store lock guards the dicts themselves.
    Good for: tests, single-process deployments.
    """

    def __init__(self, appointments: Optional[Iterable[Appointment]] = None):
        self._store: Dict[str, Appointment] = {}
        # {slot_key: appointment_id} for active appointments only
        self._active_slots: Dict[SlotKey, str] = {}
        self._slot_locks: "weakref.WeakValueDictionary[SlotKey, threading.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self._store_lock = threading.Lock()

        for appointment in appointments or []:
            self.add_if_slot_free(appointment)

    def _lock_for(self, key: SlotKey) -> threading.Lock:
        with self._store_lock:
            lock = self._slot_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._slot_locks[key] = lock
            return lock

    def get(self, appointment_id: str) -> Appointment:
        with self._store_lock:
            appointment = self._store.get(appointment_id)
        if appointment is None:
            raise NotFound("Appointment", appointment_id)
        return appointment

    def list_appointments(
        self,
        professional_id: Optional[str] = None,
        date: Optional[dt.date] = None,
        client_id: Optional[str] = None
    ) -> List[Appointment]:
        with self._store_lock:
            snapshot = list(self._store.values())

        return [
            appt for appt in snapshot
            if (professional_id is None or appt.professional_id == professional_id)
            and (date is None or appt.date == date)
            and (client_id is None or appt.client_id == client_id)
        ]

    def add_if_slot_free(self, appointment: Appointment) -> Appointment:
        key = slot_key(appointment.professional_id, appointment.date, appointment.start_time)

        with self._lock_for(key):
            with self._store_lock:
                if appointment.id in self._store:
                    raise ValueError(f"Appointment id {appointment.id} already exists")
                holder_id = self._active_slots.get(key)
                holders = [self._store[holder_id]] if holder_id else []

            if appointment.is_active:
                ensure_slot_free(appointment, holders)

            with self._store_lock:
                self._store[appointment.id] = appointment
                if appointment.is_active:
                    self._active_slots[key] = appointment.id

        logger.debug("appointment_stored", appointment_id=appointment.id, slot=list(map(str, key)))
        return appointment

    def update_status(
        self,
        appointment_id: str,
        new_status: AppointmentStatus,
        expected_status: AppointmentStatus
    ) -> Appointment:
        appointment = self.get(appointment_id)
        key = slot_key(appointment.professional_id, appointment.date, appointment.start_time)

        with self._lock_for(key):
            with self._store_lock:
                current = self._store[appointment_id]
                if current.status != expected_status:
                    raise InvalidTransition(appointment_id, current.status.value, new_status.value)

                updated = current.model_copy(update={"status": new_status})
                self._store[appointment_id] = updated
                if not updated.is_active and self._active_slots.get(key) == appointment_id:
                    del self._active_slots[key]

        return updated
