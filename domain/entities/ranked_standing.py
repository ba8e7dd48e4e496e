"""Ranked queue standing of a player."""
from dataclasses import dataclass

from ..enums import Rank

UNRANKED = "Unranked"


@dataclass(frozen=True)
class RankedStanding:
    queue_type: str
    tier: Rank
    division: str
    league_points: int

    @property
    def display(self) -> str:
        """Formatted as ``"GOLD II (45 LP)"``."""
        return f"{self.tier.value} {self.division} ({self.league_points} LP)"
