"""Pydantic schemas for court availability results."""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

AvailabilityStatus = Literal["available", "no-courts", "error"]


class CamelModel(BaseModel):
    """Base model serialising field names as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json_dict(self) -> dict:
        """JSON-ready dict with camelCase keys and unset optionals left out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CourtSlot(CamelModel):
    """A single bookable court entry extracted from the search markup."""

    court_number: int
    court_id: int
    duration: float  # Hours
    start_time: str
    end_time: str


class AvailabilityResult(CamelModel):
    """Availability of one (venue, date, time) triple."""

    status: AvailabilityStatus
    courts: list[int] = []
    slots: list[CourtSlot] = []
    # None means "not applicable"; omitted from JSON output
    suggested_times: list[str] | None = None
    error: str | None = None

    @classmethod
    def no_courts(cls, suggested_times: list[str] | None = None) -> "AvailabilityResult":
        return cls(status="no-courts", suggested_times=suggested_times or None)

    @classmethod
    def failed(cls, message: str) -> "AvailabilityResult":
        return cls(status="error", error=message)
