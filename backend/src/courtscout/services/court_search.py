"""Batched court availability search across many start times."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import datetime, timezone

from courtscout.config import settings
from courtscout.exceptions import AuthError
from courtscout.schemas.availability import AvailabilityResult
from courtscout.schemas.search import (
    BatchRequest,
    CacheEntry,
    CompleteEvent,
    SearchEvent,
    SlotResultEvent,
)
from courtscout.scrapers.itec import ITECClient
from courtscout.services.cache import AvailabilityCache

logger = logging.getLogger(__name__)

# emit(time_slot, result, is_final); the final call gets (None, results, True)
EmitCallback = Callable[
    [str | None, AvailabilityResult | dict[str, AvailabilityResult], bool],
    Awaitable[None],
]


def partition(items: list[str], size: int) -> list[list[str]]:
    """Split items into consecutive groups of at most ``size``."""
    return [items[i : i + size] for i in range(0, len(items), size)]


class CourtSearchService:
    """
    Runs the availability probes for a BatchRequest.

    Start times are probed in small groups: each group runs concurrently,
    the whole group settles before its results are emitted, and the next
    group starts only after a short pause. The upstream site rate-limits
    aggressive clients, so groups are never overlapped.
    """

    def __init__(
        self,
        client: ITECClient,
        cache: AvailabilityCache,
        batch_size: int | None = None,
        batch_delay: float | None = None,
        max_retries: int | None = None,
    ) -> None:
        """
        Initialize the search service.

        Args:
            client: Upstream client used for probes
            cache: Result cache (may be a disabled cache)
            batch_size: Probes per group (uses settings if not provided)
            batch_delay: Seconds to wait between groups (uses settings if not provided)
            max_retries: Extra attempts for a failed probe (uses settings if not provided)
        """
        self.client = client
        self.cache = cache
        self.batch_size = max(1, batch_size or settings.search_batch_size)
        self.batch_delay = (
            batch_delay if batch_delay is not None else settings.search_batch_delay_ms / 1000
        )
        self.max_retries = max_retries if max_retries is not None else settings.probe_max_retries

    async def get_cached(self, request: BatchRequest) -> CacheEntry | None:
        """Return cached results for the request's venue and date, if any."""
        entry = await self.cache.get(request.cache_key)
        if entry:
            logger.info(f"Cache hit for {request.cache_key}")
        return entry

    async def search(
        self, request: BatchRequest
    ) -> tuple[dict[str, AvailabilityResult], bool]:
        """
        Cache-first search.

        Returns:
            The results map and whether it came from the cache
        """
        entry = await self.get_cached(request)
        if entry:
            return entry.results, True
        return await self.run_batch(request), False

    async def stream(self, request: BatchRequest) -> AsyncIterator[SearchEvent]:
        """
        Probe every time slot and yield results group by group.

        Yields one SlotResultEvent per slot, then a single CompleteEvent once
        the results have been written to the cache.

        Raises:
            AuthError: if the upstream site rejects the session mid-run
        """
        results: dict[str, AvailabilityResult] = {}
        groups = partition(request.time_slots, self.batch_size)

        for index, group in enumerate(groups):
            group_results = await self._probe_group(request, group)
            for time_slot, result in zip(group, group_results):
                results[time_slot] = result
                yield SlotResultEvent(time_slot=time_slot, data=result)

            if index < len(groups) - 1:
                await asyncio.sleep(self.batch_delay)

        errors = sum(1 for r in results.values() if r.status == "error")
        logger.info(
            f"Search for {request.cache_key} complete: {len(results)} slots, {errors} errors"
        )

        await self.cache.put(
            request.cache_key,
            CacheEntry(
                key=request.cache_key,
                unit_id=request.unit_id,
                date=request.date,
                results=results,
                cached_at=datetime.now(timezone.utc),
            ),
        )

        yield CompleteEvent(unit_id=request.unit_id, date=request.date, results=results)

    async def run_batch(
        self, request: BatchRequest, emit: EmitCallback | None = None
    ) -> dict[str, AvailabilityResult]:
        """
        Run a full search and return the aggregated results.

        Args:
            request: The search to run
            emit: Optional callback receiving each slot result as it is
                ready, then the full map with ``is_final=True``

        Returns:
            Mapping of "HH:MM" to AvailabilityResult for every requested slot
        """
        results: dict[str, AvailabilityResult] = {}
        async for event in self.stream(request):
            if isinstance(event, SlotResultEvent):
                if emit:
                    await emit(event.time_slot, event.data, False)
            elif isinstance(event, CompleteEvent):
                results = event.results
                if emit:
                    await emit(None, results, True)
        return results

    async def _probe_group(
        self, request: BatchRequest, group: list[str]
    ) -> list[AvailabilityResult]:
        """
        Probe one group concurrently.

        A rejected session cancels the probes still in flight, so nothing
        more is sent upstream with it.
        """
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(self._probe(request, time_slot)) for time_slot in group]
        except ExceptionGroup as eg:
            auth_errors = eg.subgroup(AuthError)
            raise (auth_errors or eg).exceptions[0] from None
        return [task.result() for task in tasks]

    async def _probe(self, request: BatchRequest, time_slot: str) -> AvailabilityResult:
        """Probe one slot; failures other than AuthError become error results."""
        attempts = self.max_retries + 1
        error = ""
        for attempt in range(1, attempts + 1):
            try:
                result = await self.client.search_court(
                    request.unit_id, request.date, time_slot, request.session
                )
                logger.debug(f"Probe {request.cache_key} {time_slot}: {result.status}")
                return result
            except AuthError:
                raise
            except Exception as e:
                error = str(e) or type(e).__name__
                logger.warning(
                    f"Probe {request.cache_key} {time_slot} failed "
                    f"(attempt {attempt}/{attempts}): {error}"
                )
        return AvailabilityResult.failed(error)
