"""Staff queue and daily figures."""
import datetime as dt
from typing import Iterable, List, Optional
from pydantic import BaseModel, Field
from salon_scheduler.catalog import ShopCatalog
from salon_scheduler.models import Appointment, AppointmentStatus, to_minutes


class DailySummary(BaseModel):
    """Day totals over active (non-cancelled) appointments."""
    date: dt.date
    professional_id: Optional[str] = None
    total: int = Field(..., description="Active appointments of the day")
    completed: int
    no_show: int
    revenue: float = Field(..., description="Service prices of completed appointments")


def daily_queue(
    roster: Iterable[Appointment],
    date: dt.date,
    professional_id: Optional[str] = None
) -> List[Appointment]:
    """Active appointments of the day, earliest first."""
    queue = [
        appt for appt in roster
        if appt.date == date
        and appt.is_active
        and (professional_id is None or appt.professional_id == professional_id)
    ]
    return sorted(queue, key=lambda appt: (to_minutes(appt.start_time), appt.professional_id))


def summarize_day(
    roster: Iterable[Appointment],
    date: dt.date,
    catalog: ShopCatalog,
    professional_id: Optional[str] = None
) -> DailySummary:
    queue = daily_queue(roster, date, professional_id)
    completed = [a for a in queue if a.status == AppointmentStatus.COMPLETED]

    return DailySummary(
        date=date,
        professional_id=professional_id,
        total=len(queue),
        completed=len(completed),
        no_show=sum(1 for a in queue if a.status == AppointmentStatus.NO_SHOW),
        revenue=sum(catalog.price_of(a.service_ids) for a in completed),
    )
