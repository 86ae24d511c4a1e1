"""Test the booking operations end to end against the in-memory roster."""
import datetime as dt
import threading
import pytest
from salon_scheduler.booking_service import MAX_ALTERNATIVES, BookingService
from salon_scheduler.errors import (
    BookingValidationError,
    InvalidTransition,
    NotFound,
    PastDateError,
    SlotConflict,
    SlotUnavailable,
)
from salon_scheduler.models import AppointmentStatus, BookingRequest, ClientAccount
from salon_scheduler.repository import InMemoryAppointmentRepository
from salon_scheduler.sql_repository import SqlAppointmentRepository

TODAY = dt.date(2025, 5, 20)
BOOKING_DATE = dt.date(2025, 6, 1)


def available_times(service, date=BOOKING_DATE, professional_id="b1"):
    return [s.time for s in service.get_available_slots(date, professional_id) if s.available]


class TestGetAvailableSlots:

    def test_empty_roster(self, booking_service):
        slots = booking_service.get_available_slots(BOOKING_DATE, "b1")

        assert len(slots) == 20
        assert [s.time for s in slots if not s.available] == ["12:00", "12:30"]

    def test_second_professional_uses_own_schedule(self, booking_service):
        slots = booking_service.get_available_slots(BOOKING_DATE, "b2")

        assert slots[0].time == "10:00"
        assert slots[-1].time == "19:30"
        assert [s.time for s in slots if not s.available] == ["14:00", "14:30"]

    def test_booking_blocks_only_its_own_slot(self, booking_service, make_request):
        booking_service.create_appointment(make_request("10:00"))

        assert "10:00" not in available_times(booking_service)
        assert "10:00" in available_times(booking_service, professional_id="b2")
        assert "10:00" in available_times(booking_service, date=BOOKING_DATE + dt.timedelta(days=1))

    def test_query_is_idempotent(self, booking_service, make_request):
        booking_service.create_appointment(make_request("15:00"))

        first = booking_service.get_available_slots(BOOKING_DATE, "b1")
        second = booking_service.get_available_slots(BOOKING_DATE, "b1")

        assert first == second

    def test_unknown_professional(self, booking_service):
        with pytest.raises(NotFound):
            booking_service.get_available_slots(BOOKING_DATE, "b9")


class TestCreateAppointment:

    def test_books_scheduled_appointment(self, booking_service, make_request):
        appointment = booking_service.create_appointment(make_request("10:00", service_ids=("s1", "s2")))

        assert appointment.id.startswith("appt-")
        assert appointment.status == AppointmentStatus.SCHEDULED
        assert appointment.client_id == "c-100"
        assert appointment.client_name == "Joao Silva"
        assert appointment.service_ids == ["s1", "s2"]
        assert booking_service.get_appointment(appointment.id) == appointment

    def test_duplicate_service_ids_collapsed(self, booking_service, make_request):
        appointment = booking_service.create_appointment(make_request(service_ids=("s1", "s1", "s2")))

        assert appointment.service_ids == ["s1", "s2"]

    def test_same_slot_rejected_with_alternatives(self, booking_service, make_request):
        booking_service.create_appointment(make_request("10:00"))

        with pytest.raises(SlotConflict) as exc_info:
            booking_service.create_appointment(make_request("10:00"))

        alternatives = exc_info.value.alternatives
        assert alternatives == ["10:30", "11:00", "11:30", "13:00", "13:30"]
        assert len(alternatives) <= MAX_ALTERNATIVES
        assert len(booking_service.repository.list_appointments()) == 1

    def test_alternatives_wrap_to_earlier_slots_at_end_of_day(self, booking_service, make_request):
        booking_service.create_appointment(make_request("18:30"))

        with pytest.raises(SlotConflict) as exc_info:
            booking_service.create_appointment(make_request("18:30"))

        assert exc_info.value.alternatives[0] == "09:00"

    def test_slot_reusable_after_cancel(self, booking_service, make_request):
        first = booking_service.create_appointment(make_request("10:00"))
        booking_service.cancel_appointment(first.id)

        assert "10:00" in available_times(booking_service)

        second = booking_service.create_appointment(make_request("10:00"))
        assert second.id != first.id
        assert booking_service.get_appointment(first.id).status == AppointmentStatus.CANCELLED

    def test_completed_appointment_still_holds_slot(self, booking_service, make_request):
        appointment = booking_service.create_appointment(make_request("10:00"))
        booking_service.update_appointment_status(appointment.id, AppointmentStatus.COMPLETED)

        with pytest.raises(SlotConflict):
            booking_service.create_appointment(make_request("10:00"))

    def test_past_date_rejected(self, booking_service, make_request):
        with pytest.raises(PastDateError):
            booking_service.create_appointment(make_request(date=TODAY - dt.timedelta(days=1)))

    def test_today_is_bookable(self, booking_service, make_request):
        appointment = booking_service.create_appointment(make_request(date=TODAY))

        assert appointment.date == TODAY

    @pytest.mark.parametrize("start_time", ["10:15", "08:30", "19:00", "12:00", "12:30"])
    def test_time_not_offered_rejected(self, booking_service, make_request, start_time):
        with pytest.raises(SlotUnavailable):
            booking_service.create_appointment(make_request(start_time))

    def test_validation_errors_share_a_base(self, booking_service, make_request):
        with pytest.raises(BookingValidationError):
            booking_service.create_appointment(make_request("12:00"))

    def test_unknown_professional(self, booking_service, make_request):
        with pytest.raises(NotFound, match="Professional"):
            booking_service.create_appointment(make_request(professional_id="b9"))

    def test_unknown_service(self, booking_service, make_request):
        with pytest.raises(NotFound, match="Service 's9'"):
            booking_service.create_appointment(make_request(service_ids=("s1", "s9")))

        assert booking_service.repository.list_appointments() == []

    def test_concurrent_clients_single_winner(self, catalog):
        service = BookingService(catalog, InMemoryAppointmentRepository(), today=lambda: TODAY)
        barrier = threading.Barrier(8)
        outcomes = []
        lock = threading.Lock()

        def book(index):
            request = BookingRequest(
                professional_id="b1",
                client=ClientAccount(id=f"c-{index}", name=f"Client {index}", phone="55"),
                service_ids=["s1"],
                date=BOOKING_DATE,
                start_time="11:00"
            )
            barrier.wait()
            try:
                service.create_appointment(request)
                result = "ok"
            except SlotConflict:
                result = "conflict"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=book, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert outcomes.count("ok") == 1
        assert outcomes.count("conflict") == 7


class TestUpdateAppointmentStatus:

    def test_scheduled_to_completed_then_back_fails(self, booking_service, make_request):
        appointment = booking_service.create_appointment(make_request())

        completed = booking_service.update_appointment_status(appointment.id, AppointmentStatus.COMPLETED)
        assert completed.status == AppointmentStatus.COMPLETED

        with pytest.raises(InvalidTransition):
            booking_service.update_appointment_status(appointment.id, AppointmentStatus.SCHEDULED)

        assert booking_service.get_appointment(appointment.id).status == AppointmentStatus.COMPLETED

    def test_accepts_plain_status_string(self, booking_service, make_request):
        appointment = booking_service.create_appointment(make_request())

        updated = booking_service.update_appointment_status(appointment.id, "NO_SHOW")

        assert updated.status == AppointmentStatus.NO_SHOW

    def test_cancel_twice_fails(self, booking_service, make_request):
        appointment = booking_service.create_appointment(make_request())
        booking_service.cancel_appointment(appointment.id)

        with pytest.raises(InvalidTransition):
            booking_service.cancel_appointment(appointment.id)

    def test_unknown_appointment(self, booking_service):
        with pytest.raises(NotFound):
            booking_service.update_appointment_status("appt-nope", AppointmentStatus.CANCELLED)

    def test_unknown_status_value(self, booking_service, make_request):
        appointment = booking_service.create_appointment(make_request())

        with pytest.raises(ValueError):
            booking_service.update_appointment_status(appointment.id, "DONE")


class TestClientAppointments:

    def test_lists_active_in_chronological_order(self, booking_service, make_request):
        later = booking_service.create_appointment(make_request("09:00", date=BOOKING_DATE + dt.timedelta(days=1)))
        afternoon = booking_service.create_appointment(make_request("16:00"))
        morning = booking_service.create_appointment(make_request("09:30", professional_id="b1"))
        cancelled = booking_service.create_appointment(make_request("11:00"))
        booking_service.cancel_appointment(cancelled.id)

        ids = [a.id for a in booking_service.client_appointments("c-100")]

        assert ids == [morning.id, afternoon.id, later.id]

    def test_other_clients_not_listed(self, booking_service, make_request):
        booking_service.create_appointment(make_request())

        assert booking_service.client_appointments("c-999") == []


def test_quote_services(booking_service):
    quote = booking_service.quote_services(["s1", "s2"])

    assert quote.total_price == 90.0
    assert quote.total_duration_minutes == 60


def test_sql_roster_keeps_booking_timestamp(catalog, make_request, tmp_path):
    service = BookingService(
        catalog,
        SqlAppointmentRepository(database_url=f"sqlite:///{tmp_path / 'roster.db'}"),
        today=lambda: TODAY
    )

    booked = service.create_appointment(make_request("10:00"))
    fetched = service.get_appointment(booked.id)

    assert fetched.created_at == booked.created_at
    assert fetched.created_at.utcoffset() == dt.timedelta(0)
