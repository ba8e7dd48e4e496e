"""Decides which matches count toward a player's statistics."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from domain.entities import MatchRecord


@dataclass(frozen=True)
class MatchFilter:
    """A match counts iff it was played in a ranked queue, inside the season
    window, and lasted at least ``min_duration_s`` (remakes are excluded)."""

    queue_ids: frozenset
    season_start_ms: int
    min_duration_s: int

    @classmethod
    def create(cls, queue_ids: Iterable[int], season_start_ms: int, min_duration_s: int) -> "MatchFilter":
        return cls(frozenset(queue_ids), season_start_ms, min_duration_s)

    @classmethod
    def from_settings(cls, settings) -> "MatchFilter":
        return cls.create(settings.RANKED_QUEUE_IDS, settings.SEASON_START_MS, settings.MIN_GAME_DURATION_S)

    def included(self, match: MatchRecord) -> bool:
        return (
            match.queue_id in self.queue_ids
            and match.created_at_ms >= self.season_start_ms
            and match.duration_s >= self.min_duration_s
        )
