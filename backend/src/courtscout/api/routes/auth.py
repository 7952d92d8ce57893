"""Login and time-slot endpoints backed by the ITEC site."""

from datetime import date

from fastapi import APIRouter, Depends, Header, Query

from courtscout.api.dependencies import get_itec_client
from courtscout.exceptions import AuthError
from courtscout.schemas.auth import LoginRequest, LoginResponse, TimeSlotsResponse
from courtscout.scrapers.itec import ITECClient
from courtscout.scrapers.models import Session
from courtscout.utils.dates import format_date, generate_time_slots_for_date

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    client: ITECClient = Depends(get_itec_client),
) -> LoginResponse:
    """
    Log in to the booking site.

    The returned session id and authenticity token are not stored here;
    the caller sends them back with every search.
    """
    session = await client.login(body.email, body.user_id)
    return LoginResponse(
        session_id=session.session_token,
        authenticity_token=session.csrf_token,
    )


@router.get("/time-slots", response_model=TimeSlotsResponse)
async def get_time_slots(
    unit_id: str = Query(..., alias="unitId", description="Tennis center id"),
    date_param: date = Query(..., alias="date", description="Date to search (YYYY-MM-DD)"),
    session_cookie: str | None = Header(None, alias="X-Session-Cookie"),
    authenticity_token: str | None = Header(None, alias="X-Auth-Token"),
    client: ITECClient = Depends(get_itec_client),
) -> TimeSlotsResponse:
    """
    Get the start times worth searching for a center and date.

    Times already past are dropped when the date is today.
    """
    if not session_cookie:
        raise AuthError("Missing X-Session-Cookie header")

    session = Session(session_token=session_cookie, csrf_token=authenticity_token or "")
    available = await client.fetch_time_slots(unit_id, date_param.isoformat(), session)
    slots = generate_time_slots_for_date(date_param, available)

    return TimeSlotsResponse(
        unit_id=unit_id,
        date=format_date(date_param),
        time_slots=[slot.time for slot in slots],
    )
