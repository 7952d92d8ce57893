"""Pydantic schemas for login and time-slot lookups."""

from pydantic import Field

from courtscout.schemas.availability import CamelModel


class LoginRequest(CamelModel):
    email: str = Field(min_length=1)
    user_id: str = Field(min_length=1)


class LoginResponse(CamelModel):
    session_id: str
    authenticity_token: str


class TimeSlotsResponse(CamelModel):
    unit_id: str
    date: str
    time_slots: list[str]
