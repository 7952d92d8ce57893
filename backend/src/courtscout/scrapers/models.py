"""Data models for the upstream scraper."""

import re
from dataclasses import dataclass
from datetime import date

SESSION_COOKIE_NAME = "_session_id"

_TIME_RE = re.compile(r"^\d{2}:\d{2}$")


@dataclass(frozen=True)
class Session:
    """
    Credential material issued by the upstream site after login.

    Both values are opaque. The service never stores them; callers pass a
    Session into every client call.
    """

    session_token: str  # Value of the _session_id cookie
    csrf_token: str  # authenticity_token required by search requests

    @property
    def cookie(self) -> str:
        """Cookie header value for upstream requests."""
        if "=" in self.session_token:
            return self.session_token
        return f"{SESSION_COOKIE_NAME}={self.session_token}"


@dataclass(frozen=True)
class TimeSlot:
    """One bookable hour (or half-hour) on a given date."""

    date: date
    time: str  # "HH:MM"

    def __post_init__(self) -> None:
        """Validate that time is in HH:MM form."""
        if not _TIME_RE.match(self.time):
            raise ValueError(f"time must be HH:MM, got {self.time!r}")

    @property
    def hour(self) -> int:
        return int(self.time.split(":")[0])
