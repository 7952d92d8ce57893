"""Health check endpoint."""

from fastapi import APIRouter, Depends

from courtscout.api.dependencies import get_cache
from courtscout.services.cache import AvailabilityCache

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check(cache: AvailabilityCache = Depends(get_cache)) -> dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Status message plus whether result caching is active
    """
    return {"status": "ok", "cache": "enabled" if cache.enabled else "disabled"}
