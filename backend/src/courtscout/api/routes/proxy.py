"""Pass-through proxy for the ITEC pages a browser needs to drive login itself."""

import logging

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from courtscout.api.gateway import SESSION_HEADER
from courtscout.config import settings
from courtscout.exceptions import PathForbidden
from courtscout.scrapers.models import SESSION_COOKIE_NAME
from courtscout.scrapers.parser import extract_session_id

logger = logging.getLogger(__name__)
router = APIRouter()
# Registered last: anything no other route claims is treated as an unprefixed proxy path
fallback_router = APIRouter()

PROXY_PREFIX = "/proxy"

ALLOWED_PATHS = frozenset(
    {
        "/self_services/login",
        "/self_services/login.js",
        "/self_services/court_invitation",
        "/self_services/set_time_by_unit",
        "/self_services/search_court.js",
    }
)

PROXY_METHODS = ["GET", "POST", "PUT", "DELETE", "HEAD", "PATCH"]

# Not forwarded upstream; Cookie is rebuilt from X-Session-Cookie
_DROP_REQUEST_HEADERS = frozenset(
    {"origin", "host", "x-session-cookie", "content-length", "connection", "accept-encoding"}
)
# httpx has already decoded the body, and browsers can't read cross-origin Set-Cookie
_DROP_RESPONSE_HEADERS = frozenset(
    {"set-cookie", "content-encoding", "content-length", "transfer-encoding", "connection"}
)


@router.api_route(PROXY_PREFIX, methods=PROXY_METHODS, include_in_schema=False)
async def proxy_root() -> Response:
    return PlainTextResponse("Bad Request: Missing path", status_code=400)


@router.api_route(f"{PROXY_PREFIX}/{{path:path}}", methods=PROXY_METHODS)
@fallback_router.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy(path: str, request: Request) -> Response:
    """
    Forward an allow-listed request to the booking site.

    The session cookie travels in the ``X-Session-Cookie`` header both ways,
    since the browser cannot read or send the upstream cookie cross-origin.
    """
    upstream_path = f"/{path}"
    if upstream_path not in ALLOWED_PATHS:
        raise PathForbidden(upstream_path)

    target_url = f"{settings.target_base_url.rstrip('/')}{upstream_path}"
    if request.url.query:
        target_url = f"{target_url}?{request.url.query}"

    headers = {
        key: value
        for key, value in request.headers.items()
        if key.lower() not in _DROP_REQUEST_HEADERS
    }
    session_cookie = request.headers.get(SESSION_HEADER)
    if session_cookie:
        headers["cookie"] = session_cookie

    body = await request.body() if request.method not in ("GET", "HEAD") else None

    try:
        async with httpx.AsyncClient(timeout=settings.scrape_timeout) as client:
            upstream = await client.request(
                request.method,
                target_url,
                headers=headers,
                content=body,
                follow_redirects=True,
            )
    except httpx.HTTPError as e:
        logger.error(f"Proxy error for {upstream_path}: {e}")
        return PlainTextResponse(f"Proxy Error: {e}", status_code=500)

    response_headers = {
        key: value
        for key, value in upstream.headers.items()
        if key.lower() not in _DROP_RESPONSE_HEADERS
    }
    # Redirect hops can set the session too; the latest cookie wins
    set_cookies = [
        cookie
        for hop in reversed([*upstream.history, upstream])
        for cookie in hop.headers.get_list("set-cookie")
    ]
    session_id = extract_session_id("; ".join(set_cookies))
    if session_id:
        response_headers[SESSION_HEADER] = f"{SESSION_COOKIE_NAME}={session_id}"

    logger.debug(f"Proxied {request.method} {upstream_path} -> {upstream.status_code}")
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        headers=response_headers,
    )
