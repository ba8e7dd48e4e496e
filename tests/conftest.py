import asyncio
from typing import Dict, Iterable, List, Optional

import pytest

from domain.entities import MatchParticipant, MatchRecord, PlayerAggregate, RankedStanding
from domain.enums import Rank
from domain.errors import PersistenceFailure, RemoteUnavailable
from domain.interfaces import IAggregateStore, IMatchSource
from application.services import AggregationCache, MatchFilter

SEASON_START_MS = 1_736_380_800_000  # 2025-01-09T00:00:00Z
IN_SEASON_MS = SEASON_START_MS + 86_400_000
SOLO, FLEX, ARAM = 420, 440, 450

PLAYER = "puuid-player-one"
OTHER = "puuid-player-two"


def make_match(
    match_id: str,
    puuid: str = PLAYER,
    champion: str = "Ahri",
    win: bool = True,
    *,
    queue_id: int = SOLO,
    created_at_ms: int = IN_SEASON_MS,
    duration_s: int = 1800,
    include_player: bool = True,
) -> MatchRecord:
    participants = [MatchParticipant(puuid=f"filler-{i}", champion_name="Garen", win=not win) for i in range(4)]
    if include_player:
        participants.append(MatchParticipant(puuid=puuid, champion_name=champion, win=win))
    return MatchRecord(
        match_id=match_id,
        queue_id=queue_id,
        created_at_ms=created_at_ms,
        duration_s=duration_s,
        participants=tuple(participants),
    )


def run(coro):
    return asyncio.run(coro)


class FakeMatchSource(IMatchSource):
    """In-memory match source that counts calls and can be told to fail."""

    def __init__(self) -> None:
        self.match_ids: Dict[str, List[str]] = {}
        self.matches: Dict[str, MatchRecord] = {}
        self.standings: Dict[str, Optional[RankedStanding]] = {}
        self.fail_listing: set = set()
        self.fail_rank: set = set()
        self.match_failures: Dict[str, int] = {}
        self.list_calls: List[tuple] = []
        self.match_calls: List[str] = []
        self.rank_calls: List[str] = []
        self.delay = 0.0

    def add(self, puuid: str, *records: MatchRecord) -> None:
        ids = self.match_ids.setdefault(puuid, [])
        for record in records:
            self.matches[record.match_id] = record
            ids.insert(0, record.match_id)

    def set_rank(self, puuid: str, tier: str, division: str, lp: int) -> None:
        self.standings[puuid] = RankedStanding("RANKED_SOLO_5x5", Rank[tier], division, lp)

    async def list_match_ids(self, puuid: str, start: int, count: int) -> List[str]:
        self.list_calls.append((puuid, start, count))
        if puuid in self.fail_listing:
            raise RemoteUnavailable("listing down", status_code=503)
        if self.delay:
            await asyncio.sleep(self.delay)
        return list(self.match_ids.get(puuid, [])[start:start + count])

    async def get_match(self, match_id: str) -> MatchRecord:
        self.match_calls.append(match_id)
        remaining = self.match_failures.get(match_id, 0)
        if remaining:
            self.match_failures[match_id] = remaining - 1
            raise RemoteUnavailable(f"match {match_id} down", status_code=500)
        return self.matches[match_id]

    async def get_ranked_standing(self, puuid: str) -> Optional[RankedStanding]:
        self.rank_calls.append(puuid)
        if puuid in self.fail_rank:
            raise RemoteUnavailable("league down", status_code=503)
        return self.standings.get(puuid)


class MemoryStore(IAggregateStore):
    def __init__(self, initial: Iterable[PlayerAggregate] = ()) -> None:
        self.data: Dict[str, dict] = {a.puuid: a.to_dict() for a in initial}
        self.saves = 0
        self.fail_saves = False
        self.fail_loads = False

    def load_all(self) -> Dict[str, PlayerAggregate]:
        if self.fail_loads:
            raise PersistenceFailure("store unreadable")
        return {puuid: PlayerAggregate.from_dict(d) for puuid, d in self.data.items()}

    def save(self, aggregates: Iterable[PlayerAggregate]) -> None:
        if self.fail_saves:
            raise PersistenceFailure("disk full")
        self.saves += 1
        for a in aggregates:
            self.data[a.puuid] = a.to_dict()


@pytest.fixture
def source() -> FakeMatchSource:
    return FakeMatchSource()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def match_filter() -> MatchFilter:
    return MatchFilter.create({SOLO, FLEX}, SEASON_START_MS, 300)


@pytest.fixture
def cache(source, store, match_filter) -> AggregationCache:
    return AggregationCache(source, store, match_filter, page_size=100, max_match_ids=1000)
