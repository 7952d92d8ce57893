"""Tennis center API endpoints."""

from fastapi import APIRouter, HTTPException

from courtscout.centers import TENNIS_CENTERS, get_center

router = APIRouter()


@router.get("/centers")
async def list_centers() -> list[dict]:
    """Get the list of tennis centers that can be searched."""
    return [center.to_dict() for center in TENNIS_CENTERS]


@router.get("/centers/{center_id}")
async def get_center_by_id(center_id: str) -> dict:
    center = get_center(center_id)
    if not center:
        raise HTTPException(status_code=404, detail=f"Unknown tennis center: {center_id}")
    return center.to_dict()
