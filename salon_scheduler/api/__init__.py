"""API package initialization."""
from salon_scheduler.api.models import ErrorResponse, SlotsResponse, StatusUpdateRequest

__all__ = ["ErrorResponse", "SlotsResponse", "StatusUpdateRequest"]
