"""Incremental per-player aggregation over the remote match history."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from core.logging import context as log_context, get_logger
from core.logging.logger import traceable
from domain.entities import MatchRecord, PlayerAggregate, UNRANKED
from domain.errors import MalformedRecord, PersistenceFailure, RemoteUnavailable
from domain.interfaces import IAggregateStore, IMatchSource
from .match_filter import MatchFilter

logger = get_logger(__name__, service="cache")


@dataclass
class ReconcileReport:
    """What one reconciliation did. ``errors`` holds soft failures only."""

    aggregate: PlayerAggregate
    new_match_ids: int = 0
    counted: int = 0
    filtered: int = 0
    failed_match_ids: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    listing_failed: bool = False
    persisted: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AggregationCache:
    """
    Owns the puuid -> PlayerAggregate map and keeps it in step with the source.

    Reconciling a player lists their recent match ids, fetches only the ids
    not seen before, folds qualifying ones into the tally, refreshes the rank
    and persists the result. Reconciliations of the same player are
    serialized by a per-player lock; different players never share state.

    Failure policy for a single match: a record that cannot be fetched or
    parsed is *not* marked seen, so the next reconciliation retries it.
    """

    def __init__(
        self,
        source: IMatchSource,
        store: IAggregateStore,
        match_filter: MatchFilter,
        *,
        page_size: int = 100,
        max_match_ids: int = 1000,
        max_concurrent_fetches: int = 8,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if page_size <= 0 or max_match_ids <= 0:
            raise ValueError("page_size and max_match_ids must be positive")
        self.source = source
        self.store = store
        self.match_filter = match_filter
        self.page_size = page_size
        self.max_match_ids = max_match_ids
        self._clock = clock
        self._fetch_sem = asyncio.Semaphore(max(1, max_concurrent_fetches))
        self._aggregates: Dict[str, PlayerAggregate] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def load(self) -> int:
        """Read persisted aggregates. An unreadable store means starting empty."""
        try:
            loaded = self.store.load_all()
        except PersistenceFailure as exc:
            logger.warning(lambda: f"Cache store unreadable, starting empty: {exc}")
            loaded = {}
        self._aggregates.update(loaded)
        logger.info(lambda: f"Loaded {len(loaded)} cached player aggregates")
        return len(loaded)

    def flush(self) -> bool:
        """Write every in-memory aggregate. Returns False if the write failed."""
        try:
            self.store.save(list(self._aggregates.values()))
        except PersistenceFailure as exc:
            logger.error(lambda: f"Cache flush failed: {exc}")
            return False
        return True

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get(self, puuid: str) -> Optional[PlayerAggregate]:
        aggregate = self._aggregates.get(puuid)
        return aggregate.copy() if aggregate else None

    def __contains__(self, puuid: str) -> bool:
        return puuid in self._aggregates

    def __len__(self) -> int:
        return len(self._aggregates)

    # ------------------------------------------------------------------ #
    # Reconciliation
    # ------------------------------------------------------------------ #

    async def reconcile(self, puuid: str) -> PlayerAggregate:
        return (await self.reconcile_with_report(puuid)).aggregate

    async def reconcile_with_report(self, puuid: str) -> ReconcileReport:
        lock = self._locks.setdefault(puuid, asyncio.Lock())
        async with lock:
            with log_context(puuid=puuid):
                return await self._reconcile(puuid)

    async def _reconcile(self, puuid: str) -> ReconcileReport:
        aggregate = self._aggregates.get(puuid)
        if aggregate is None:
            aggregate = self._aggregates[puuid] = PlayerAggregate.empty(puuid)
        report = ReconcileReport(aggregate=aggregate.copy())

        try:
            fetched = await self._list_match_ids(puuid)
        except (RemoteUnavailable, MalformedRecord) as exc:
            logger.warning(lambda: f"Match id listing failed, serving last known stats: {exc}")
            report.errors.append(f"match history unavailable: {exc}")
            report.listing_failed = True
            return report

        new_ids = [m for m in dict.fromkeys(fetched) if m not in aggregate.seen_match_ids]
        report.new_match_ids = len(new_ids)
        if not new_ids:
            logger.debug(lambda: f"No new matches among {len(fetched)} ids")
            return report

        logger.info(lambda: f"Found {len(fetched)} match ids, {len(new_ids)} new")
        records = await asyncio.gather(*(self._fetch_match(m) for m in new_ids))
        for match_id, record in zip(new_ids, records):
            if record is None:
                report.failed_match_ids.append(match_id)
            elif self._fold(aggregate, puuid, match_id, record):
                report.counted += 1
            else:
                report.filtered += 1
        if report.failed_match_ids:
            report.errors.append(f"{len(report.failed_match_ids)} match(es) could not be fetched, will retry")

        await self._refresh_rank(aggregate, report)
        aggregate.last_updated = self._clock()

        try:
            self.store.save([aggregate])
            report.persisted = True
        except PersistenceFailure as exc:
            logger.error(lambda: f"Could not persist aggregate: {exc}")
            report.errors.append(f"cache not persisted: {exc}")

        report.aggregate = aggregate.copy()
        logger.success(
            lambda: f"Reconciled: +{report.counted} counted, {report.filtered} filtered, "
                    f"{len(report.failed_match_ids)} failed; {aggregate.games_played} games total"
        )
        return report

    @traceable
    async def _list_match_ids(self, puuid: str) -> List[str]:
        """Most recent ids, paged until a short/empty page or the configured cap."""
        ids: List[str] = []
        start = 0
        while start < self.max_match_ids:
            count = min(self.page_size, self.max_match_ids - start)
            page = await self.source.list_match_ids(puuid, start, count)
            if not page:
                break
            ids.extend(page)
            if len(page) < count:
                break
            start += count
        return ids

    async def _fetch_match(self, match_id: str) -> Optional[MatchRecord]:
        async with self._fetch_sem:
            try:
                return await self.source.get_match(match_id)
            except (RemoteUnavailable, MalformedRecord) as exc:
                logger.warning(lambda: f"Match {match_id} failed, will retry later: {exc}")
                return None
            except Exception as exc:
                # A fault stays with its own id; sibling matches are still folded.
                logger.exception(lambda: f"Match {match_id} raised unexpectedly, will retry later: {exc!r}")
                return None

    def _fold(self, aggregate: PlayerAggregate, puuid: str, match_id: str, record: MatchRecord) -> bool:
        """Apply one evaluated match. Returns True when it was counted."""
        participant = record.participant(puuid) if self.match_filter.included(record) else None
        if participant is None:
            aggregate.mark_seen(match_id)
            return False
        aggregate.record_game(match_id, participant.champion_name, participant.win)
        return True

    async def _refresh_rank(self, aggregate: PlayerAggregate, report: ReconcileReport) -> None:
        try:
            standing = await self.source.get_ranked_standing(aggregate.puuid)
        except (RemoteUnavailable, MalformedRecord) as exc:
            logger.warning(lambda: f"Rank refresh failed, keeping {aggregate.rank!r}: {exc}")
            report.errors.append(f"rank unavailable: {exc}")
            return
        aggregate.rank = standing.display if standing else UNRANKED
