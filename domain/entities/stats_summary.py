"""Display-ready summary of a player aggregate."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StatsSummary:
    puuid: str
    games_played: int
    winrate: str
    most_played_champion: str
    rank: str
    stale: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """JSON shape consumed by the front end."""
        data = {
            'puuid': self.puuid,
            'gamesPlayed': self.games_played,
            'winrate': self.winrate,
            'mostPlayedChampion': self.most_played_champion,
            'rank': self.rank,
        }
        if self.stale:
            data['stale'] = True
        if self.error:
            data['error'] = self.error
        return data
