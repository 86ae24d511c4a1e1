"""Shared test fixtures."""
import datetime as dt
import pytest
from salon_scheduler.booking_service import BookingService
from salon_scheduler.catalog import ShopCatalog
from salon_scheduler.models import (
    Appointment,
    AppointmentStatus,
    BookingRequest,
    ClientAccount,
    ProfessionalSchedule,
)
from salon_scheduler.repository import InMemoryAppointmentRepository

TODAY = dt.date(2025, 5, 20)
BOOKING_DATE = dt.date(2025, 6, 1)


@pytest.fixture
def schedule() -> ProfessionalSchedule:
    """09:00-19:00 with lunch 12:00-13:00, 30 min grid."""
    return ProfessionalSchedule(
        work_start="09:00",
        work_end="19:00",
        break_start="12:00",
        break_end="13:00",
        slot_interval_minutes=30
    )


@pytest.fixture
def catalog() -> ShopCatalog:
    return ShopCatalog.from_config()


@pytest.fixture
def repository() -> InMemoryAppointmentRepository:
    return InMemoryAppointmentRepository()


@pytest.fixture
def booking_service(catalog, repository) -> BookingService:
    """Service with a fixed clock so past-date checks are deterministic."""
    return BookingService(catalog, repository, today=lambda: TODAY)


@pytest.fixture
def client_account() -> ClientAccount:
    return ClientAccount(id="c-100", name="Joao Silva", phone="5511900000000")


@pytest.fixture
def make_appointment():
    """Factory for roster appointments."""
    counter = {"value": 0}

    def _make(
        start_time: str = "10:00",
        professional_id: str = "b1",
        date: dt.date = BOOKING_DATE,
        status: AppointmentStatus = AppointmentStatus.SCHEDULED,
        client_id: str = "c-100",
        service_ids=("s1",)
    ) -> Appointment:
        counter["value"] += 1
        return Appointment(
            id=f"appt-test-{counter['value']}",
            professional_id=professional_id,
            client_id=client_id,
            client_name="Joao Silva",
            client_phone="5511900000000",
            service_ids=list(service_ids),
            date=date,
            start_time=start_time,
            status=status
        )

    return _make


@pytest.fixture
def make_request(client_account):
    """Factory for booking requests."""
    def _make(
        start_time: str = "10:00",
        professional_id: str = "b1",
        date: dt.date = BOOKING_DATE,
        service_ids=("s1",)
    ) -> BookingRequest:
        return BookingRequest(
            professional_id=professional_id,
            client=client_account,
            service_ids=list(service_ids),
            date=date,
            start_time=start_time
        )

    return _make
