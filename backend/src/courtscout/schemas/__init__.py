"""Pydantic schemas for API requests and responses."""

from courtscout.schemas.auth import LoginRequest, LoginResponse, TimeSlotsResponse
from courtscout.schemas.availability import AvailabilityResult, CourtSlot
from courtscout.schemas.search import (
    BatchRequest,
    CacheEntry,
    CompleteEvent,
    ErrorEvent,
    SearchCourtsRequest,
    SearchCourtsResponse,
    SearchEvent,
    SlotResultEvent,
    cache_key,
    to_sse,
)

__all__ = [
    "AvailabilityResult",
    "BatchRequest",
    "CacheEntry",
    "CompleteEvent",
    "CourtSlot",
    "ErrorEvent",
    "LoginRequest",
    "LoginResponse",
    "SearchCourtsRequest",
    "SearchCourtsResponse",
    "SearchEvent",
    "SlotResultEvent",
    "TimeSlotsResponse",
    "cache_key",
    "to_sse",
]
