"""Per-player running tally, the unit of caching."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Set

from ..errors import MalformedRecord
from .ranked_standing import UNRANKED


@dataclass
class PlayerAggregate:
    """Everything the tracker has learned about one player so far.

    ``seen_match_ids`` only ever grows. A match id lands there once its record
    has been evaluated, whether or not it counted, so it is never fetched or
    counted again. ``champion_counts`` always sums to ``games_played``.
    """

    puuid: str
    seen_match_ids: Set[str] = field(default_factory=set)
    games_played: int = 0
    wins: int = 0
    champion_counts: Dict[str, int] = field(default_factory=dict)
    rank: str = UNRANKED
    last_updated: Optional[datetime] = None

    @classmethod
    def empty(cls, puuid: str) -> "PlayerAggregate":
        return cls(puuid=puuid)

    @property
    def losses(self) -> int:
        return self.games_played - self.wins

    def mark_seen(self, match_id: str) -> None:
        self.seen_match_ids.add(match_id)

    def record_game(self, match_id: str, champion_name: str, win: bool) -> None:
        """Count one qualifying game. A match id already seen is ignored."""
        if match_id in self.seen_match_ids:
            return
        self.seen_match_ids.add(match_id)
        self.games_played += 1
        if win:
            self.wins += 1
        self.champion_counts[champion_name] = self.champion_counts.get(champion_name, 0) + 1

    def check_invariants(self) -> list[str]:
        """Return a description of every violated invariant (empty when sound)."""
        problems = []
        if self.games_played < 0 or self.wins < 0:
            problems.append("negative counter")
        if self.wins > self.games_played:
            problems.append(f"wins ({self.wins}) > games_played ({self.games_played})")
        if any(c < 0 for c in self.champion_counts.values()):
            problems.append("negative champion count")
        total = sum(self.champion_counts.values())
        if total != self.games_played:
            problems.append(f"champion counts sum to {total}, games_played is {self.games_played}")
        if self.games_played > len(self.seen_match_ids):
            problems.append("more games counted than match ids seen")
        return problems

    def copy(self) -> "PlayerAggregate":
        return PlayerAggregate(
            puuid=self.puuid,
            seen_match_ids=set(self.seen_match_ids),
            games_played=self.games_played,
            wins=self.wins,
            champion_counts=dict(self.champion_counts),
            rank=self.rank,
            last_updated=self.last_updated,
        )

    def to_dict(self) -> dict:
        return {
            'puuid': self.puuid,
            'seen_match_ids': sorted(self.seen_match_ids),
            'games_played': self.games_played,
            'wins': self.wins,
            'champion_counts': dict(sorted(self.champion_counts.items())),
            'rank': self.rank,
            'last_updated': self.last_updated.isoformat() if self.last_updated else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerAggregate":
        """Rebuild from :meth:`to_dict` output; raises MalformedRecord on bad data."""
        try:
            last_updated = data.get('last_updated')
            aggregate = cls(
                puuid=str(data['puuid']),
                seen_match_ids={str(m) for m in data.get('seen_match_ids', [])},
                games_played=int(data.get('games_played', 0)),
                wins=int(data.get('wins', 0)),
                champion_counts={str(k): int(v) for k, v in data.get('champion_counts', {}).items()},
                rank=str(data.get('rank') or UNRANKED),
                last_updated=datetime.fromisoformat(last_updated) if last_updated else None,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise MalformedRecord(f"stored aggregate is malformed: {exc}") from exc
        problems = aggregate.check_invariants()
        if problems:
            raise MalformedRecord(f"stored aggregate for {aggregate.puuid} is inconsistent: {'; '.join(problems)}")
        return aggregate
