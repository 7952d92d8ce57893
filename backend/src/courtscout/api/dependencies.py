"""FastAPI dependencies for the upstream client, cache and search service."""

from fastapi import Depends, Request

from courtscout.scrapers.itec import ITECClient
from courtscout.services.cache import AvailabilityCache
from courtscout.services.court_search import CourtSearchService


def get_itec_client() -> ITECClient:
    return ITECClient()


def get_cache(request: Request) -> AvailabilityCache:
    """The app-wide cache created at startup; a disabled cache if there is none."""
    cache = getattr(request.app.state, "cache", None)
    return cache if cache is not None else AvailabilityCache(None)


def get_search_service(
    client: ITECClient = Depends(get_itec_client),
    cache: AvailabilityCache = Depends(get_cache),
) -> CourtSearchService:
    return CourtSearchService(client, cache)
