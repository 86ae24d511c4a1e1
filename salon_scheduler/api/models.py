"""Pydantic models for API request/response validation."""
import datetime as dt
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from salon_scheduler.dashboard import DailySummary
from salon_scheduler.models import Appointment, AppointmentStatus, TimeSlot


class SlotsResponse(BaseModel):
    """Response schema for the slot grid endpoint."""
    professional_id: str
    date: dt.date
    slots: List[TimeSlot]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "professional_id": "b1",
                "date": "2025-06-01",
                "slots": [
                    {"time": "09:00", "available": True},
                    {"time": "09:30", "available": False}
                ]
            }
        }
    )


class StatusUpdateRequest(BaseModel):
    """Request schema for PATCH /api/v1/appointments/{id}/status."""
    status: AppointmentStatus = Field(
        ...,
        description="New status",
        examples=["COMPLETED", "NO_SHOW", "CANCELLED"]
    )


class DashboardResponse(BaseModel):
    """Staff view of one day."""
    summary: DailySummary
    queue: List[Appointment]


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
    code: Optional[str] = Field(None, description="Error code")
    alternatives: Optional[List[str]] = Field(
        None,
        description="Other free times the same day (slot conflicts only)"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Slot Conflict",
                "detail": "This time slot is no longer available (2025-06-01 10:00), please pick another",
                "code": "SLOT_CONFLICT",
                "alternatives": ["10:30", "11:00"]
            }
        }
    )
