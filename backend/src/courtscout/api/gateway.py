"""Origin policy, CORS headers and error mapping for the public gateway."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from courtscout.exceptions import AuthError, OriginForbidden, PathForbidden, UpstreamError

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Cookie"

CORS_ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, X-Session-Cookie, X-Auth-Token"
CORS_EXPOSE_HEADERS = SESSION_HEADER
CORS_MAX_AGE = "86400"


class OriginPolicy:
    """
    Allow-set of browser origins.

    Requests without an Origin header (curl, server-side callers) are let
    through; browsers from any other origin are refused.
    """

    def __init__(self, allowed_origins: list[str]) -> None:
        self.allowed_origins = [origin for origin in allowed_origins if origin]

    @property
    def default_origin(self) -> str:
        return self.allowed_origins[0] if self.allowed_origins else "*"

    def check(self, origin: str | None) -> None:
        """Raise OriginForbidden if a browser origin is not allowed."""
        if origin and origin not in self.allowed_origins:
            raise OriginForbidden(origin)

    def negotiate(self, origin: str | None) -> str:
        """Origin to echo in Access-Control-Allow-Origin."""
        return origin if origin in self.allowed_origins else self.default_origin

    def cors_headers(self, origin: str | None, preflight: bool = False) -> dict[str, str]:
        headers = {
            "Access-Control-Allow-Origin": self.negotiate(origin),
            "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
            "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        }
        if preflight:
            headers["Access-Control-Max-Age"] = CORS_MAX_AGE
        else:
            headers["Access-Control-Expose-Headers"] = CORS_EXPOSE_HEADERS
        return headers


class GatewayMiddleware(BaseHTTPMiddleware):
    """Answers preflights, enforces the origin policy and adds CORS headers."""

    def __init__(self, app, allowed_origins: list[str]) -> None:
        super().__init__(app)
        self.policy = OriginPolicy(allowed_origins)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        origin = request.headers.get("origin")

        if request.method == "OPTIONS":
            return Response(status_code=204, headers=self.policy.cors_headers(origin, preflight=True))

        try:
            self.policy.check(origin)
        except OriginForbidden:
            logger.warning(f"Rejected request from origin {origin} to {request.url.path}")
            return PlainTextResponse("Forbidden", status_code=403)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error on {request.method} {request.url.path}: {e}", exc_info=True)
            response = JSONResponse({"error": str(e)}, status_code=500)

        response.headers.update(self.policy.cors_headers(origin))
        return response


# Errors that mean a required value was not supplied
_MISSING_ERROR_TYPES = frozenset({"missing", "string_too_short"})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report missing or malformed fields as a 400 with the field names."""
    missing: list[str] = []
    invalid: list[str] = []
    for error in exc.errors():
        loc = error.get("loc", ())
        if len(loc) < 2 or not isinstance(loc[1], str):
            continue
        fields = missing if error.get("type") in _MISSING_ERROR_TYPES else invalid
        if loc[1] not in fields:
            fields.append(loc[1])

    if missing:
        message = f"Missing required parameters: {', '.join(missing)}"
    elif invalid:
        message = f"Invalid parameters: {', '.join(invalid)}"
    else:
        message = "Invalid request body"
    return JSONResponse({"error": message}, status_code=400)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    logger.info(f"Authentication failed on {request.url.path}: {exc}")
    return JSONResponse({"error": str(exc)}, status_code=401)


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.warning(f"Upstream error on {request.url.path}: {exc}")
    return JSONResponse({"error": str(exc)}, status_code=502)


async def path_forbidden_handler(request: Request, exc: PathForbidden) -> PlainTextResponse:
    logger.warning(f"Rejected proxy path {exc}")
    return PlainTextResponse("Forbidden: Path not allowed", status_code=403)


def install_gateway(app: FastAPI, allowed_origins: list[str]) -> None:
    """Attach the gateway middleware and error handlers to an app."""
    app.add_middleware(GatewayMiddleware, allowed_origins=allowed_origins)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)
    app.add_exception_handler(PathForbidden, path_forbidden_handler)
