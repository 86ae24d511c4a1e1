"""SQLAlchemy-backed appointment roster."""
import datetime as dt
import threading
from contextlib import nullcontext
from typing import List, Optional
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from salon_scheduler.conflict_guard import ensure_slot_free
from salon_scheduler.database_models import AppointmentRecord, Base, utc_now
from salon_scheduler.errors import InvalidTransition, NotFound, SlotConflict
from salon_scheduler.logging_config import get_logger
from salon_scheduler.models import Appointment, AppointmentStatus
from salon_scheduler.repository import AppointmentRepository

logger = get_logger(__name__)


def is_shared_memory_url(database_url: str) -> bool:
    return database_url.startswith("sqlite") and ":memory:" in database_url


def create_db_engine(database_url: str):
    """Create engine; in-memory sqlite lives on one connection shared by all threads."""
    if is_shared_memory_url(database_url):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, pool_pre_ping=True)


class SqlAppointmentRepository(AppointmentRepository):
    """
    Roster persisted through SQLAlchemy.

    Pattern: the guard runs first for a clear error, and the partial unique
    index uq_active_slot closes the race between concurrent writers.
    On in-memory sqlite every session shares one connection, so sessions
    are serialised: a transaction must not be ended by another thread.
    """

    def __init__(self, database_url: str):
        """
        Initialize with database connection.

        Args:
            database_url: SQLAlchemy connection string
        """
        self.engine = create_db_engine(database_url)
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine)
        self._connection_lock = (
            threading.RLock() if is_shared_memory_url(database_url) else nullcontext()
        )

    def get(self, appointment_id: str) -> Appointment:
        with self._connection_lock, self.SessionLocal() as db:
            record = db.get(AppointmentRecord, appointment_id)
            if record is None:
                raise NotFound("Appointment", appointment_id)
            return record.to_domain()

    def list_appointments(
        self,
        professional_id: Optional[str] = None,
        date: Optional[dt.date] = None,
        client_id: Optional[str] = None
    ) -> List[Appointment]:
        with self._connection_lock, self.SessionLocal() as db:
            query = db.query(AppointmentRecord)
            if professional_id is not None:
                query = query.filter(AppointmentRecord.professional_id == professional_id)
            if date is not None:
                query = query.filter(AppointmentRecord.date == date)
            if client_id is not None:
                query = query.filter(AppointmentRecord.client_id == client_id)

            records = query.order_by(AppointmentRecord.date, AppointmentRecord.start_time).all()
            return [record.to_domain() for record in records]

    def add_if_slot_free(self, appointment: Appointment) -> Appointment:
        conflict = SlotConflict(
            appointment.professional_id,
            appointment.date.isoformat(),
            appointment.start_time
        )

        with self._connection_lock, self.SessionLocal() as db:
            if db.get(AppointmentRecord, appointment.id) is not None:
                raise ValueError(f"Appointment id {appointment.id} already exists")

            if appointment.is_active:
                holders = db.query(AppointmentRecord).filter(
                    AppointmentRecord.professional_id == appointment.professional_id,
                    AppointmentRecord.date == appointment.date,
                    AppointmentRecord.start_time == appointment.start_time,
                    AppointmentRecord.status != AppointmentStatus.CANCELLED.value
                ).all()
                ensure_slot_free(appointment, [record.to_domain() for record in holders])

            db.add(AppointmentRecord.from_domain(appointment))
            try:
                db.commit()
            except IntegrityError:
                # Lost the race: another writer committed the same slot first
                db.rollback()
                logger.warning(
                    "slot_conflict_on_commit",
                    professional_id=appointment.professional_id,
                    date=appointment.date.isoformat(),
                    start_time=appointment.start_time
                )
                raise conflict

        return appointment

    def update_status(
        self,
        appointment_id: str,
        new_status: AppointmentStatus,
        expected_status: AppointmentStatus
    ) -> Appointment:
        with self._connection_lock, self.SessionLocal() as db:
            updated = db.query(AppointmentRecord).filter(
                AppointmentRecord.id == appointment_id,
                AppointmentRecord.status == expected_status.value
            ).update(
                {"status": new_status.value, "updated_at": utc_now()},
                synchronize_session=False
            )

            if updated == 0:
                db.rollback()
                record = db.get(AppointmentRecord, appointment_id)
                if record is None:
                    raise NotFound("Appointment", appointment_id)
                raise InvalidTransition(appointment_id, record.status, new_status.value)

            db.commit()
            return db.get(AppointmentRecord, appointment_id).to_domain()
