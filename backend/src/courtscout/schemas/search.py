"""Pydantic schemas for the court search endpoint and its event stream."""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from courtscout.schemas.availability import AvailabilityResult, CamelModel
from courtscout.scrapers.models import Session
from courtscout.utils.dates import parse_date


class SearchCourtsRequest(CamelModel):
    """Body of POST /api/search-courts."""

    unit_id: str = Field(min_length=1)
    date: str = Field(min_length=1, description="DD/MM/YYYY")
    time_slots: list[str]
    session_id: str = Field(min_length=1)
    authenticity_token: str = Field(min_length=1)

    @field_validator("date")
    @classmethod
    def check_date(cls, value: str) -> str:
        parse_date(value)
        return value


class BatchRequest(CamelModel):
    """One client-initiated search across several start times."""

    unit_id: str
    date: str
    time_slots: list[str]
    session: Session

    @classmethod
    def from_search(cls, body: SearchCourtsRequest) -> "BatchRequest":
        return cls(
            unit_id=body.unit_id,
            date=body.date,
            time_slots=body.time_slots,
            session=Session(
                session_token=body.session_id,
                csrf_token=body.authenticity_token,
            ),
        )

    @property
    def cache_key(self) -> str:
        return cache_key(self.unit_id, self.date)


def cache_key(unit_id: str, date: str) -> str:
    """Cache key for a venue and date, e.g. ``12:04/12/2024``."""
    return f"{unit_id}:{date}"


class SearchCourtsResponse(CamelModel):
    """Non-streaming (or cached) search response."""

    unit_id: str
    date: str
    results: dict[str, AvailabilityResult]
    cached: bool = False


class CacheEntry(CamelModel):
    """Stored search results for one venue and date. Holds no credentials."""

    key: str
    unit_id: str
    date: str
    results: dict[str, AvailabilityResult]
    cached_at: datetime


class SlotResultEvent(CamelModel):
    type: Literal["result"] = "result"
    time_slot: str
    data: AvailabilityResult


class CompleteEvent(CamelModel):
    type: Literal["complete"] = "complete"
    unit_id: str
    date: str
    results: dict[str, AvailabilityResult]


class ErrorEvent(CamelModel):
    type: Literal["error"] = "error"
    error: str


SearchEvent = SlotResultEvent | CompleteEvent | ErrorEvent


def to_sse(event: SearchEvent) -> str:
    """Format an event as a Server-Sent Events frame."""
    return f"data: {event.model_dump_json(by_alias=True, exclude_none=True)}\n\n"
