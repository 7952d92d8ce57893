"""Client for the Israel Tennis Centers (ITEC) self-service site."""

import logging

import httpx

from courtscout.config import settings
from courtscout.exceptions import AuthError, UpstreamError
from courtscout.schemas.availability import AvailabilityResult
from courtscout.scrapers.models import SESSION_COOKIE_NAME, Session
from courtscout.scrapers.parser import (
    extract_authenticity_token,
    extract_session_id,
    is_login_redirect,
    parse_availability,
    parse_time_slots,
)

logger = logging.getLogger(__name__)

LOGIN_PATH = "/self_services/login"
LOGIN_SUBMIT_PATH = "/self_services/login.js"
COURT_INVITATION_PATH = "/self_services/court_invitation"
TIME_SLOTS_PATH = "/self_services/set_time_by_unit"
SEARCH_COURT_PATH = "/self_services/search_court.js"

COURT_TYPE = "1"  # Always 1 for tennis courts
UTF8_CHECK = "✓"  # Rails form marker

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
    "Accept": "text/javascript, text/html, application/xhtml+xml, */*; q=0.01",
    "X-Requested-With": "XMLHttpRequest",
}


class ITECClient:
    """
    Client for center.tennis.org.il.

    The site is a Rails app answering form posts with jQuery snippets. Every
    call takes the caller's Session explicitly; the client itself holds no
    credential state.
    """

    BASE_URL = "https://center.tennis.org.il"

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        """
        Initialize ITEC client.

        Args:
            base_url: Upstream base URL (uses settings if not provided)
            timeout: Request timeout in seconds (uses settings if not provided)
        """
        self.base_url = (base_url or settings.target_base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout or settings.scrape_timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, headers=DEFAULT_HEADERS)

    async def login(self, email: str, user_id: str) -> Session:
        """
        Log in and return a Session usable for searches.

        Args:
            email: Account email
            user_id: Israeli ID number registered with the account

        Returns:
            Session holding the new session id and a search CSRF token

        Raises:
            AuthError: if any step of the login exchange fails
        """
        async with self._client() as client:
            login_page = await client.get(self._url(LOGIN_PATH))
            if login_page.is_error:
                raise AuthError(f"Login page returned HTTP {login_page.status_code}")

            login_token = extract_authenticity_token(login_page.text)
            if not login_token:
                raise AuthError("Failed to get authenticity token")

            response = await client.post(
                self._url(LOGIN_SUBMIT_PATH),
                data={
                    "utf8": UTF8_CHECK,
                    "authenticity_token": login_token,
                    "login": email,
                    "p_id": user_id,
                },
            )
            if response.is_error:
                raise AuthError(f"Login returned HTTP {response.status_code}")

            session_id = extract_session_id("; ".join(response.headers.get_list("set-cookie")))
            if not session_id:
                raise AuthError("Failed to get session ID from login response")

            # Confirm the session and pick up the token the search form needs
            invitation = await client.get(
                self._url(COURT_INVITATION_PATH),
                headers={"Cookie": f"{SESSION_COOKIE_NAME}={session_id}"},
                follow_redirects=True,
            )
            if invitation.is_error:
                raise AuthError(f"Court invitation page returned HTTP {invitation.status_code}")
            if invitation.url.path.endswith(LOGIN_PATH) or is_login_redirect(invitation.text):
                raise AuthError("Authentication failed: upstream redirected to login")

            search_token = extract_authenticity_token(invitation.text)
            if not search_token:
                logger.warning("No authenticity token on court invitation page, reusing login token")

        logger.info("ITEC login succeeded")
        return Session(session_token=session_id, csrf_token=search_token or login_token)

    async def fetch_time_slots(self, unit_id: str, day: str, session: Session) -> list[str]:
        """
        Fetch the bookable start times for a unit on a date.

        Args:
            unit_id: Tennis center id
            day: Date in YYYY-MM-DD form
            session: Caller's session

        Returns:
            "HH:MM" strings in upstream order, half-hours suppressed

        Raises:
            UpstreamError: on a non-2xx response
            AuthError: if the session was rejected
        """
        async with self._client() as client:
            response = await client.post(
                self._url(TIME_SLOTS_PATH),
                data={"unit_id": unit_id, "date": day, "court_type": COURT_TYPE},
                headers={"Cookie": session.cookie},
            )

        self._raise_for_session(response)
        slots = parse_time_slots(response.text)
        logger.debug(f"ITEC: {len(slots)} time slots for unit {unit_id} on {day}")
        return slots

    async def probe_slot(self, unit_id: str, day: str, time: str, session: Session) -> str:
        """
        Run the court search for a single start time.

        Args:
            unit_id: Tennis center id
            day: Date in DD/MM/YYYY form
            time: Start time, "HH:MM"
            session: Caller's session

        Returns:
            Raw response text, to be handed to parse_availability

        Raises:
            UpstreamError: on a non-2xx response
            AuthError: if the session was rejected
        """
        async with self._client() as client:
            response = await client.post(
                self._url(SEARCH_COURT_PATH),
                data={
                    "utf8": UTF8_CHECK,
                    "authenticity_token": session.csrf_token,
                    "search[unit_id]": unit_id,
                    "search[court_type]": COURT_TYPE,
                    "search[start_date]": day,
                    "search[start_hour]": time,
                    "search[duration]": "1",
                },
                headers={"Cookie": session.cookie},
            )

        self._raise_for_session(response)
        return response.text

    async def search_court(
        self, unit_id: str, day: str, time: str, session: Session
    ) -> AvailabilityResult:
        """Probe a single start time and parse the result."""
        raw = await self.probe_slot(unit_id, day, time, session)
        return parse_availability(raw)

    def _raise_for_session(self, response: httpx.Response) -> None:
        if response.is_redirect and LOGIN_PATH in response.headers.get("location", ""):
            raise AuthError("Session expired: upstream redirected to login")
        if not response.is_success:
            raise UpstreamError(response.status_code)
        if is_login_redirect(response.text):
            raise AuthError("Session expired: upstream redirected to login")
