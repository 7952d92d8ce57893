"""Date and time-slot helpers for the ITEC booking site."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from courtscout.scrapers.models import TimeSlot
from courtscout.scrapers.parser import filter_half_hour_slots

ISRAEL_TZ = ZoneInfo("Asia/Jerusalem")


def format_date(d: date) -> str:
    """Format a date the way the search form expects it (DD/MM/YYYY)."""
    return d.strftime("%d/%m/%Y")


def parse_date(value: str) -> date:
    """Parse a DD/MM/YYYY string. Raises ValueError on bad input."""
    return datetime.strptime(value, "%d/%m/%Y").date()


def _hours(start: int, end: int) -> list[str]:
    return [f"{hour:02d}:00" for hour in range(start, end + 1)]


def get_valid_time_slots(d: date) -> list[str]:
    """
    Default opening hours for a tennis center.

    Sun-Thu: 08:00-22:00
    Fri: 07:00-16:00
    Sat: 07:00-12:00 and 16:00-21:00
    """
    weekday = d.weekday()  # Monday == 0
    if weekday == 4:
        return _hours(7, 16)
    if weekday == 5:
        return _hours(7, 12) + _hours(16, 21)
    return _hours(8, 22)


def generate_time_slots_for_date(
    d: date,
    available: list[str] | None = None,
    now: datetime | None = None,
) -> list[TimeSlot]:
    """
    Build the list of TimeSlots to search for a date.

    Args:
        d: Date to search
        available: Times reported by the upstream site; falls back to the
            default opening hours when None
        now: Current time (defaults to now in Israel); on the same date,
            only hours after the current hour are kept

    Returns:
        TimeSlots in schedule order, with redundant half-hours removed
    """
    now = now or datetime.now(ISRAEL_TZ)
    times = get_valid_time_slots(d) if available is None else available

    if d == now.date():
        times = [t for t in times if int(t.split(":")[0]) > now.hour]

    return [TimeSlot(date=d, time=t) for t in filter_half_hour_slots(times)]
