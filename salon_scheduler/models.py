"""Domain models for the salon scheduling core.

Best Practices:
- Pydantic models validate at the boundary, so the engine can trust its inputs
- Times are zero-padded 24h "HH:MM" strings; comparisons go through minute-of-day
- Appointments are frozen: the only change is a status transition (a new copy)
"""
import datetime as dt
import re
from datetime import UTC
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from salon_scheduler import config
from salon_scheduler.errors import ConfigurationError

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
_TIME_RE = re.compile(TIME_PATTERN)


def to_minutes(hhmm: str) -> int:
    """Convert "HH:MM" to minutes after midnight."""
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def format_minutes(minutes: int) -> str:
    """Convert minutes after midnight to zero-padded "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def utc_now() -> dt.datetime:
    """Get current UTC timestamp."""
    return dt.datetime.now(UTC)


class AppointmentStatus(str, Enum):
    """Appointment lifecycle states. SCHEDULED is the only non-terminal one."""
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"
    CANCELLED = "CANCELLED"


class ProfessionalSchedule(BaseModel):
    """
    Working hours of one professional.

    Invariant: work_start < break_start <= break_end < work_end.
    A schedule with break_start == break_end has no break.

    Raises:
        ConfigurationError: On malformed times or a broken invariant
    """
    work_start: str = Field(..., description="Workday start HH:MM 24h")
    work_end: str = Field(..., description="Workday end HH:MM 24h")
    break_start: str = Field(..., description="Break start HH:MM 24h")
    break_end: str = Field(..., description="Break end HH:MM 24h")
    slot_interval_minutes: int = Field(
        default=config.SLOT_INTERVAL_MINUTES,
        description="Slot grid granularity in minutes"
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "work_start": "09:00",
                "work_end": "19:00",
                "break_start": "12:00",
                "break_end": "13:00",
                "slot_interval_minutes": 30
            }
        }
    )

    @field_validator("work_start", "work_end", "break_start", "break_end")
    @classmethod
    def check_time_format(cls, v: str, info):
        if not _TIME_RE.match(v):
            raise ConfigurationError(f"{info.field_name} must be HH:MM (24h), got '{v}'")
        return v

    @model_validator(mode="after")
    def check_time_window(self):
        if self.slot_interval_minutes <= 0:
            raise ConfigurationError(
                f"slot_interval_minutes must be positive, got {self.slot_interval_minutes}"
            )
        if not (
            self.work_start_minutes
            < self.break_start_minutes
            <= self.break_end_minutes
            < self.work_end_minutes
        ):
            raise ConfigurationError(
                "Schedule must satisfy work_start < break_start <= break_end < work_end "
                f"(got {self.work_start}-{self.work_end}, break {self.break_start}-{self.break_end})"
            )
        return self

    @property
    def work_start_minutes(self) -> int:
        return to_minutes(self.work_start)

    @property
    def work_end_minutes(self) -> int:
        return to_minutes(self.work_end)

    @property
    def break_start_minutes(self) -> int:
        return to_minutes(self.break_start)

    @property
    def break_end_minutes(self) -> int:
        return to_minutes(self.break_end)

    def in_break(self, minutes: int) -> bool:
        """Half-open check: break_end itself is bookable."""
        return self.break_start_minutes <= minutes < self.break_end_minutes

    def is_on_grid(self, minutes: int) -> bool:
        """True if a slot starts at this minute (break not considered)."""
        if not self.work_start_minutes <= minutes < self.work_end_minutes:
            return False
        return (minutes - self.work_start_minutes) % self.slot_interval_minutes == 0


class Service(BaseModel):
    """Catalog service (immutable reference data)."""
    id: str = Field(..., min_length=1, description="Unique service ID (e.g., s1)")
    name: str = Field(..., min_length=1, max_length=100, description="Service name")
    duration_minutes: int = Field(..., gt=0, le=480, description="Duration in minutes (1-480)")
    price: float = Field(..., ge=0, description="Price (0 or positive)")
    description: str = Field(default="", max_length=500, description="Service description")
    image: Optional[str] = Field(default=None, description="Optional image URL")

    model_config = ConfigDict(frozen=True)


class ClientAccount(BaseModel):
    """A client booking appointments."""
    kind: Literal["client"] = "client"
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=1)
    email: Optional[str] = None


class StaffAccount(BaseModel):
    """A professional: the account that owns a schedule."""
    kind: Literal["staff"] = "staff"
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=1)
    email: Optional[str] = None
    pin: str = Field(..., min_length=4, max_length=8)
    schedule: ProfessionalSchedule
    specialties: List[str] = Field(default_factory=list)
    address: Optional[str] = None
    operating_days: Optional[str] = None

    def public_view(self) -> dict:
        """Serializable view without the PIN."""
        return self.model_dump(mode="json", exclude={"pin"})


Account = Annotated[Union[ClientAccount, StaffAccount], Field(discriminator="kind")]


class Appointment(BaseModel):
    """
    Booked appointment.

    Never deleted: cancelled appointments stay in the roster as history.
    """
    id: str = Field(..., min_length=1)
    professional_id: str = Field(..., min_length=1)
    client_id: str = Field(..., min_length=1)
    client_name: str
    client_phone: str
    service_ids: List[str] = Field(..., min_length=1)
    date: dt.date
    start_time: str = Field(..., pattern=TIME_PATTERN)
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    created_at: dt.datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(frozen=True)

    @property
    def is_active(self) -> bool:
        return self.status != AppointmentStatus.CANCELLED


class BookingRequest(BaseModel):
    """Candidate appointment submitted by a client."""
    professional_id: str = Field(..., min_length=1)
    client: ClientAccount
    service_ids: List[str] = Field(..., min_length=1)
    date: dt.date
    start_time: str = Field(..., pattern=TIME_PATTERN, description="HH:MM 24h start time")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "professional_id": "b1",
                "client": {"id": "c-100", "name": "Joao Silva", "phone": "5511900000000"},
                "service_ids": ["s1", "s2"],
                "date": "2025-06-01",
                "start_time": "10:00"
            }
        }
    )


class TimeSlot(BaseModel):
    """Derived slot value, produced fresh on every availability query."""
    time: str
    available: bool

    model_config = ConfigDict(frozen=True)


class ServiceQuote(BaseModel):
    """Price and duration of a set of services."""
    services: List[Service]
    total_price: float
    total_duration_minutes: int
