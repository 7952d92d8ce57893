"""Court search API endpoint."""

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response, StreamingResponse

from courtscout.api.dependencies import get_search_service
from courtscout.exceptions import AuthError
from courtscout.schemas.search import (
    BatchRequest,
    ErrorEvent,
    SearchCourtsRequest,
    SearchCourtsResponse,
    to_sse,
)
from courtscout.services.court_search import CourtSearchService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/search-courts", response_model=None)
async def search_courts(
    body: SearchCourtsRequest,
    stream: bool = Query(True, description="Stream results as Server-Sent Events"),
    service: CourtSearchService = Depends(get_search_service),
) -> Response:
    """
    Check court availability for a list of start times on one date.

    Cached results are returned immediately as JSON. Otherwise results are
    streamed as ``text/event-stream`` (one ``result`` event per start time,
    then a ``complete`` event), or returned as one JSON document when
    ``stream=false``.
    """
    batch = BatchRequest.from_search(body)

    if not stream:
        results, cached = await service.search(batch)
        return _json(
            SearchCourtsResponse(
                unit_id=batch.unit_id, date=batch.date, results=results, cached=cached
            )
        )

    entry = await service.get_cached(batch)
    if entry:
        return _json(
            SearchCourtsResponse(
                unit_id=batch.unit_id, date=batch.date, results=entry.results, cached=True
            )
        )

    return StreamingResponse(
        _event_stream(service, batch),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


async def _event_stream(service: CourtSearchService, batch: BatchRequest) -> AsyncIterator[str]:
    try:
        async for event in service.stream(batch):
            yield to_sse(event)
    except AuthError as e:
        logger.info(f"Search for {batch.cache_key} stopped, session rejected: {e}")
        yield to_sse(ErrorEvent(error=str(e)))
    except Exception as e:
        logger.error(f"Streaming search for {batch.cache_key} failed: {e}", exc_info=True)
        yield to_sse(ErrorEvent(error=str(e)))


def _json(response: SearchCourtsResponse) -> JSONResponse:
    return JSONResponse(response.to_json_dict())
