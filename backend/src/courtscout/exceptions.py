"""Exception types shared across the gateway, client and cache layers."""


class CourtScoutError(Exception):
    """Base class for all CourtScout errors."""


class AuthError(CourtScoutError):
    """Login failed or the upstream site rejected the session."""


class UpstreamError(CourtScoutError):
    """The upstream site answered with a non-2xx status."""

    def __init__(self, http_status: int, message: str | None = None) -> None:
        self.http_status = http_status
        super().__init__(message or f"HTTP {http_status}")


class ConfigError(CourtScoutError):
    """A required backend is not configured."""


class OriginForbidden(CourtScoutError):
    """Request Origin is not in the allow-set."""


class PathForbidden(CourtScoutError):
    """Proxy path is not in the allow-list."""
