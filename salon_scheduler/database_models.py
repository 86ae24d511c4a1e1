"""SQLAlchemy database models for the appointment roster."""
from datetime import UTC, datetime
from sqlalchemy import Column, Date, DateTime, Index, JSON, String, text
from sqlalchemy.orm import declarative_base
from salon_scheduler.models import Appointment, AppointmentStatus

Base = declarative_base()

ACTIVE_ONLY = text("status != 'CANCELLED'")


def utc_now():
    """Get current UTC timestamp."""
    return datetime.now(UTC)


class AppointmentRecord(Base):
    """Appointment table. Rows are never deleted; cancellation is a status."""
    __tablename__ = "appointments"

    id = Column(String(64), primary_key=True, index=True)
    professional_id = Column(String(100), nullable=False, index=True)
    client_id = Column(String(100), nullable=False, index=True)
    client_name = Column(String(200), nullable=False)
    client_phone = Column(String(50), nullable=False)
    service_ids = Column(JSON, nullable=False)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    status = Column(String(20), nullable=False, default=AppointmentStatus.SCHEDULED.value, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    # At most one active appointment per slot, enforced by the database
    __table_args__ = (
        Index(
            "uq_active_slot",
            "professional_id",
            "date",
            "start_time",
            unique=True,
            sqlite_where=ACTIVE_ONLY,
            postgresql_where=ACTIVE_ONLY,
        ),
    )

    @classmethod
    def from_domain(cls, appointment: Appointment) -> "AppointmentRecord":
        created_at = appointment.created_at
        if created_at.tzinfo is not None:
            created_at = created_at.astimezone(UTC)

        return cls(
            id=appointment.id,
            professional_id=appointment.professional_id,
            client_id=appointment.client_id,
            client_name=appointment.client_name,
            client_phone=appointment.client_phone,
            service_ids=list(appointment.service_ids),
            date=appointment.date,
            start_time=appointment.start_time,
            status=appointment.status.value,
            created_at=created_at,
        )

    def to_domain(self) -> Appointment:
        created_at = self.created_at
        # SQLite drops the offset on DateTime(timezone=True); values are stored as UTC
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)

        return Appointment(
            id=self.id,
            professional_id=self.professional_id,
            client_id=self.client_id,
            client_name=self.client_name,
            client_phone=self.client_phone,
            service_ids=self.service_ids,
            date=self.date,
            start_time=self.start_time,
            status=AppointmentStatus(self.status),
            created_at=created_at,
        )

    def __repr__(self):
        return (
            f"<AppointmentRecord(id={self.id}, professional={self.professional_id}, "
            f"slot={self.date} {self.start_time}, status={self.status})>"
        )
