"""Use case serving stats for the whole tracked roster."""
from __future__ import annotations

import asyncio
import time
from dataclasses import replace
from typing import Callable, Dict, Iterable, List

from core.logging import get_logger
from domain.entities import PlayerAggregate, StatsSummary
from application.services.aggregation_cache import AggregationCache, ReconcileReport
from application.services.stats_presenter import present

logger = get_logger(__name__, service="roster")


class RosterStatsUseCase:
    """
    Fans reconciliation out over the roster and presents the results.

    - At most ``max_concurrent`` players reconcile at once.
    - A player reconciled less than ``refresh_interval_s`` ago is served from
      the cache without touching the source (0 disables this).
    - Reconciliations run as tasks of their own: a caller that goes away does
      not cancel them, and concurrent callers for one player share one task.
    - One player failing never fails the others; their summary comes back
      ``stale`` with the error attached.
    """

    def __init__(
        self,
        cache: AggregationCache,
        roster: Iterable[str],
        *,
        max_concurrent: int = 4,
        refresh_interval_s: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.cache = cache
        self.roster: List[str] = list(dict.fromkeys(roster))
        self.refresh_interval_s = refresh_interval_s
        self._clock = clock
        self._sem = asyncio.Semaphore(max(1, max_concurrent))
        self._inflight: Dict[str, asyncio.Task] = {}
        self._last_checked: Dict[str, float] = {}

    async def execute(self) -> List[StatsSummary]:
        """Summaries for every tracked player, in roster order."""
        return list(await asyncio.gather(*(self._summary(p) for p in self.roster)))

    async def player(self, puuid: str) -> StatsSummary:
        if puuid not in self.roster:
            raise KeyError(puuid)
        return await self._summary(puuid)

    async def refresh_all(self) -> List[ReconcileReport]:
        """Reconcile every player regardless of freshness (used by the CLI)."""
        return list(await asyncio.gather(*(self._refresh(p) for p in self.roster)))

    def cached(self) -> List[StatsSummary]:
        """Summaries from memory only, no network."""
        return [present(self.cache.get(p) or PlayerAggregate.empty(p)) for p in self.roster]

    async def drain(self) -> None:
        """Wait for reconciliations still running after their callers left."""
        pending = [t for t in self._inflight.values() if not t.done()]
        if pending:
            logger.info(lambda: f"Waiting for {len(pending)} reconciliation(s) to finish")
            await asyncio.gather(*pending, return_exceptions=True)

    def _is_fresh(self, puuid: str) -> bool:
        checked = self._last_checked.get(puuid)
        if checked is None or self.refresh_interval_s <= 0:
            return False
        return self._clock() - checked < self.refresh_interval_s

    async def _summary(self, puuid: str) -> StatsSummary:
        if self._is_fresh(puuid):
            aggregate = self.cache.get(puuid)
            if aggregate is not None:
                logger.debug(lambda: f"Cache hit for {puuid}")
                return present(aggregate)
        try:
            report = await self._refresh(puuid)
        except Exception as exc:
            logger.exception(lambda: f"Reconciliation crashed for {puuid}: {exc}")
            aggregate = self.cache.get(puuid) or PlayerAggregate.empty(puuid)
            return replace(present(aggregate), stale=True, error=f"refresh failed: {exc}")
        summary = present(report.aggregate)
        if report.errors:
            summary = replace(summary, stale=True, error="; ".join(report.errors))
        return summary

    async def _refresh(self, puuid: str) -> ReconcileReport:
        task = self._inflight.get(puuid)
        if task is None or task.done():
            task = asyncio.get_running_loop().create_task(self._run(puuid), name=f"reconcile-{puuid[:8]}")
            self._inflight[puuid] = task
            task.add_done_callback(self._forget)
        return await asyncio.shield(task)

    async def _run(self, puuid: str) -> ReconcileReport:
        async with self._sem:
            report = await self.cache.reconcile_with_report(puuid)
        if not report.listing_failed:
            self._last_checked[puuid] = self._clock()
        return report

    def _forget(self, task: asyncio.Task) -> None:
        for puuid, t in list(self._inflight.items()):
            if t is task:
                del self._inflight[puuid]
        # Retrieve the outcome so an orphaned failure is logged, not lost.
        if not task.cancelled() and task.exception() is not None:
            logger.error(lambda: f"Background reconciliation failed: {task.exception()!r}")
