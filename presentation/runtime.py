"""Wires the tracker's object graph from settings."""
from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from config import settings as default_settings
from core.logging.logger import get_logger
from domain.enums import Region
from domain.interfaces import IAggregateStore, IMatchSource
from infrastructure import RiotAPIClient, RiotMatchSource, SqliteAggregateStore
from application.services import AggregationCache, MatchFilter
from application.use_cases import RosterStatsUseCase

logger = get_logger(__name__, service="runtime")


@dataclass
class TrackerRuntime:
    cache: AggregationCache
    roster: RosterStatsUseCase


def build_runtime(source: IMatchSource, store: IAggregateStore, settings=default_settings) -> TrackerRuntime:
    """Assemble cache and use case around an already-open source and store."""
    cache = AggregationCache(
        source,
        store,
        MatchFilter.from_settings(settings),
        page_size=settings.MATCH_ID_PAGE_SIZE,
        max_match_ids=settings.MAX_MATCH_IDS,
        max_concurrent_fetches=settings.MAX_CONCURRENT_MATCH_FETCHES,
    )
    roster = RosterStatsUseCase(
        cache,
        settings.TRACKED_PUUIDS,
        max_concurrent=settings.MAX_CONCURRENT_PLAYERS,
        refresh_interval_s=settings.REFRESH_INTERVAL_S,
    )
    return TrackerRuntime(cache=cache, roster=roster)


@asynccontextmanager
async def open_runtime(
    settings=default_settings,
    *,
    source: Optional[IMatchSource] = None,
    store: Optional[IAggregateStore] = None,
) -> AsyncIterator[TrackerRuntime]:
    """Load the cache, yield a ready runtime, then drain and flush on exit.

    ``source``/``store`` replace the Riot client and SQLite file when given.
    """
    store = store or SqliteAggregateStore(settings.CACHE_PATH)
    try:
        if source is not None:
            runtime = build_runtime(source, store, settings)
            runtime.cache.load()
            try:
                yield runtime
            finally:
                await _shutdown(runtime)
            return

        settings.validate()
        region = Region.from_platform(settings.PLATFORM)
        async with RiotAPIClient(settings.RIOT_API_KEY, region) as client:
            runtime = build_runtime(RiotMatchSource(client), store, settings)
            runtime.cache.load()
            logger.info(lambda: f"Tracking {len(runtime.roster.roster)} players on {region.value}")
            try:
                yield runtime
            finally:
                await _shutdown(runtime)
    finally:
        store.close()


async def _shutdown(runtime: TrackerRuntime) -> None:
    await runtime.roster.drain()
    if runtime.cache.flush():
        logger.info(lambda: f"Flushed {len(runtime.cache)} aggregates")
