"""Parsers for the jQuery/HTML fragments returned by the ITEC self-service site.

The search endpoint answers with a script such as::

    jQuery('#step-2').html('<div class=\\"alert alert-success\\">...</div>');

Everything here is a pure function over strings. The regular expressions
are tied to the current upstream markup; when the site changes, this is the
only module that should need updating.
"""

import logging
import re
from urllib.parse import unquote_plus

from courtscout.schemas.availability import AvailabilityResult, CourtSlot

logger = logging.getLogger(__name__)

_JQUERY_HTML_RE = re.compile(r"jQuery\('#step-2'\)\.html\('([\s\S]*?)'\);")

# Success marker always takes precedence over the failure markers
SUCCESS_MARKER = "alert-success"
NO_COURTS_MARKERS = (
    "מועדים אחרים",  # "other times"
    "alert-danger",
    "נסה מועד אחר",  # "try another time"
)

# "מגרש: 3" (court: 3) followed, possibly much later, by the booking link
_COURT_SLOT_RE = re.compile(
    r"מגרש:\s*(\d+)[\s\S]*?"
    r"court_id=(\d+)&amp;duration=([\d.]+)&amp;end_time=([^&]+)&amp;start_time=([^\"&]+)"
)

_SUGGESTED_TIME_RE = re.compile(r"<h3>(\d{2}:\d{2})-\d{2}:\d{2}</h3>")

_AUTHENTICITY_TOKEN_RE = re.compile(r'name="authenticity_token"\s+value="([^"]+)"')
_SESSION_ID_RE = re.compile(r"_session_id=([^;]+)")
_LOGIN_REDIRECT_RE = re.compile(
    r"(?:window\.)?location(?:\.href)?\s*=\s*['\"][^'\"]*/self_services/login['\"]"
)

# The set_time_by_unit response escapes quotes inconsistently
_TIME_OPTION_PATTERNS = (
    re.compile(r'value=\\"(\d{2}:\d{2})\\"'),
    re.compile(r'value="(\d{2}:\d{2})"'),
    re.compile(r"value='(\d{2}:\d{2})'"),
)


def extract_html(response: str) -> str:
    """
    Extract the HTML payload from a jQuery ``.html('...')`` script.

    Args:
        response: Raw response body from the search endpoint

    Returns:
        Unescaped HTML, or an empty string if the script is not present
    """
    match = _JQUERY_HTML_RE.search(response)
    if not match:
        return ""

    return match.group(1).replace("\\n", "").replace('\\"', '"').replace("\\/", "/")


def is_no_courts_available(html: str) -> bool:
    """Return True if the markup says there are no courts for this slot."""
    if SUCCESS_MARKER in html:
        return False
    return any(marker in html for marker in NO_COURTS_MARKERS)


def parse_court_slots(html: str) -> list[CourtSlot]:
    """Extract every court entry from the search result markup."""
    slots: list[CourtSlot] = []
    for match in _COURT_SLOT_RE.finditer(html):
        court_number, court_id, duration, end_time, start_time = match.groups()
        slots.append(
            CourtSlot(
                court_number=int(court_number),
                court_id=int(court_id),
                duration=float(duration),
                start_time=unquote_plus(start_time),
                end_time=unquote_plus(end_time),
            )
        )
    return slots


def parse_suggested_times(html: str) -> list[str]:
    """Return alternative start times offered in a "no courts" response."""
    times: list[str] = []
    for match in _SUGGESTED_TIME_RE.finditer(html):
        start_time = match.group(1)
        if start_time not in times:
            times.append(start_time)
    return times


def parse_availability(response: str) -> AvailabilityResult:
    """
    Parse a raw search response into an AvailabilityResult.

    Never raises: anything unexpected degrades to a "no-courts" result.
    """
    try:
        return _parse_availability(response)
    except Exception as e:
        logger.warning(f"Failed to parse availability response: {e}")
        return AvailabilityResult.no_courts()


def _parse_availability(response: str) -> AvailabilityResult:
    html = extract_html(response)

    if is_no_courts_available(html):
        return AvailabilityResult.no_courts(parse_suggested_times(html))

    slots = parse_court_slots(html)
    if not slots:
        # The success marker is not a reliable signal on its own
        return AvailabilityResult.no_courts()

    courts = sorted({slot.court_number for slot in slots})
    return AvailabilityResult(status="available", courts=courts, slots=slots)


def parse_time_slots(response: str) -> list[str]:
    """
    Parse ``HH:MM`` option values from a set_time_by_unit response.

    The candidate patterns are tried in order and the first one that matches
    anything wins. Half-hour slots are then suppressed where the following
    full hour is also offered.
    """
    all_slots: list[str] = []
    for pattern in _TIME_OPTION_PATTERNS:
        for match in pattern.finditer(response):
            if match.group(1) not in all_slots:
                all_slots.append(match.group(1))
        if all_slots:
            break

    return filter_half_hour_slots(all_slots)


def filter_half_hour_slots(slots: list[str]) -> list[str]:
    """
    Keep full and half hours only, and drop ``HH:30`` slots whose following
    ``HH+1:00`` slot is present.

    >>> filter_half_hour_slots(["08:00", "08:15", "08:30", "09:00"])
    ['08:00', '09:00']
    """
    available = set(slots)
    filtered: list[str] = []
    for slot in slots:
        if slot.endswith(":00"):
            filtered.append(slot)
        elif slot.endswith(":30"):
            next_hour = f"{int(slot.split(':')[0]) + 1:02d}:00"
            if next_hour not in available:
                filtered.append(slot)
    return filtered


def extract_authenticity_token(html: str) -> str | None:
    """Return the CSRF token embedded in a page's forms, if any."""
    match = _AUTHENTICITY_TOKEN_RE.search(html)
    return match.group(1) if match else None


def extract_session_id(set_cookie: str | None) -> str | None:
    """Return the ``_session_id`` value from a Set-Cookie header, if any."""
    if not set_cookie:
        return None
    match = _SESSION_ID_RE.search(set_cookie)
    return match.group(1) if match else None


def is_login_redirect(body: str) -> bool:
    """Return True if a response body is a script bouncing to the login page."""
    return bool(_LOGIN_REDIRECT_RE.search(body))
