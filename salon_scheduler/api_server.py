"""FastAPI server exposing the scheduling core.

Features:
- Slot grid, booking and status endpoints
- Staff dashboard and client appointment list
- Domain errors mapped to actionable JSON responses
- Structured logging with X-Request-ID

Usage:
    uvicorn salon_scheduler.api_server:app --port 8000
"""
import datetime as dt
from contextlib import asynccontextmanager
from typing import List, Optional
from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salon_scheduler import config
from salon_scheduler.api.dependencies import get_booking_service
from salon_scheduler.api.models import (
    DashboardResponse,
    ErrorResponse,
    SlotsResponse,
    StatusUpdateRequest,
)
from salon_scheduler.availability import TimeFilter, TimeOfDay
from salon_scheduler.booking_service import BookingService
from salon_scheduler.errors import (
    BookingValidationError,
    ConfigurationError,
    InvalidTransition,
    NotFound,
    SchedulingError,
    SlotConflict,
)
from salon_scheduler.logging_config import (
    RequestIDMiddleware,
    get_logger,
    setup_structured_logging,
)
from salon_scheduler.models import Appointment, BookingRequest, Service, ServiceQuote

logger = get_logger(__name__)

ERROR_STATUS = [
    (NotFound, status.HTTP_404_NOT_FOUND, "Not Found"),
    (InvalidTransition, status.HTTP_409_CONFLICT, "Invalid Status Transition"),
    (BookingValidationError, status.HTTP_400_BAD_REQUEST, "Booking Rejected"),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Configuration Error"),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown logic."""
    setup_structured_logging(config.LOG_LEVEL)
    logger.info("server_starting", database_url=config.DATABASE_URL.split("@")[-1])
    yield
    logger.info("server_stopping")


app = FastAPI(
    title="Salon Scheduling API",
    description="Availability and booking for salon / barbershop professionals",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors consistently."""
    logger.warning("validation_error", errors=str(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="Validation Error",
            detail=str(exc.errors()),
            code="VALIDATION_ERROR"
        ).model_dump()
    )


@app.exception_handler(SlotConflict)
async def slot_conflict_handler(request: Request, exc: SlotConflict):
    """Double booking: tell the client to pick another time and suggest some."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=ErrorResponse(
            error="Slot Conflict",
            detail=str(exc),
            code=exc.code,
            alternatives=exc.alternatives
        ).model_dump()
    )


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    """Map remaining domain errors to their HTTP status."""
    for error_type, status_code, title in ERROR_STATUS:
        if isinstance(exc, error_type):
            break
    else:
        status_code, title = status.HTTP_400_BAD_REQUEST, "Scheduling Error"

    if status_code >= 500:
        logger.error("scheduling_error", error=str(exc), code=exc.code)

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=title, detail=str(exc), code=exc.code).model_dump()
    )


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for load balancers."""
    return {
        "status": "healthy",
        "service": "salon-scheduling-api",
        "version": "1.0.0"
    }


@app.get("/api/v1/professionals", tags=["Catalog"])
def list_professionals(service: BookingService = Depends(get_booking_service)):
    """Professionals with their schedules (PIN never exposed)."""
    return [p.public_view() for p in service.catalog.professionals]


@app.get("/api/v1/services", tags=["Catalog"], response_model=List[Service])
def list_services(service: BookingService = Depends(get_booking_service)):
    return service.catalog.services


@app.get("/api/v1/services/quote", tags=["Catalog"], response_model=ServiceQuote)
def quote_services(
    service_ids: List[str] = Query(...),
    service: BookingService = Depends(get_booking_service)
):
    """Total price and duration of a service selection."""
    return service.quote_services(service_ids)


@app.get(
    "/api/v1/professionals/{professional_id}/slots",
    tags=["Availability"],
    response_model=SlotsResponse
)
def get_slots(
    professional_id: str,
    date: dt.date = Query(..., description="YYYY-MM-DD"),
    time_of_day: TimeOfDay = Query(TimeOfDay.ANY),
    only_available: bool = Query(False),
    service: BookingService = Depends(get_booking_service)
):
    """Slot grid of a professional for one date."""
    slots = service.get_available_slots(date, professional_id)

    time_filter = TimeFilter()
    slots = time_filter.filter_by_time_of_day(slots, time_of_day)
    if only_available:
        slots = time_filter.only_available(slots)

    return SlotsResponse(professional_id=professional_id, date=date, slots=slots)


@app.post(
    "/api/v1/appointments",
    tags=["Appointments"],
    response_model=Appointment,
    status_code=status.HTTP_201_CREATED
)
def create_appointment(
    request: BookingRequest,
    service: BookingService = Depends(get_booking_service)
):
    """
    Book an appointment.

    Raises:
        400: Past date or time not offered
        404: Unknown professional or service
        409: Slot already taken (response lists alternatives)
        422: Validation error
    """
    return service.create_appointment(request)


@app.get("/api/v1/appointments/{appointment_id}", tags=["Appointments"], response_model=Appointment)
def get_appointment(
    appointment_id: str,
    service: BookingService = Depends(get_booking_service)
):
    return service.get_appointment(appointment_id)


@app.patch(
    "/api/v1/appointments/{appointment_id}/status",
    tags=["Appointments"],
    response_model=Appointment
)
def update_status(
    appointment_id: str,
    body: StatusUpdateRequest,
    service: BookingService = Depends(get_booking_service)
):
    """
    Change appointment status.

    Raises:
        404: Unknown appointment
        409: Transition not allowed (terminal status)
    """
    return service.update_appointment_status(appointment_id, body.status)


@app.get(
    "/api/v1/clients/{client_id}/appointments",
    tags=["Appointments"],
    response_model=List[Appointment]
)
def client_appointments(
    client_id: str,
    service: BookingService = Depends(get_booking_service)
):
    return service.client_appointments(client_id)


@app.get("/api/v1/dashboard", tags=["Staff"], response_model=DashboardResponse)
def dashboard(
    date: Optional[dt.date] = Query(None, description="Defaults to today"),
    professional_id: Optional[str] = Query(None),
    service: BookingService = Depends(get_booking_service)
):
    """Day summary and queue for staff."""
    day = date or service.today()
    if professional_id is not None:
        service.catalog.get_professional(professional_id)

    return DashboardResponse(
        summary=service.daily_summary(day, professional_id),
        queue=service.daily_queue(day, professional_id)
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
