"""Maps a player aggregate to what the front end displays."""
from typing import Dict

from domain.entities import PlayerAggregate, StatsSummary

NOT_AVAILABLE = "N/A"


def format_winrate(wins: int, games_played: int) -> str:
    if games_played == 0:
        return NOT_AVAILABLE
    return f"{wins / games_played * 100:.1f}%"


def most_played(champion_counts: Dict[str, int]) -> str:
    """Highest play count; ties go to the alphabetically first champion."""
    if not champion_counts:
        return NOT_AVAILABLE
    return min(champion_counts.items(), key=lambda item: (-item[1], item[0]))[0]


def present(aggregate: PlayerAggregate) -> StatsSummary:
    return StatsSummary(
        puuid=aggregate.puuid,
        games_played=aggregate.games_played,
        winrate=format_winrate(aggregate.wins, aggregate.games_played),
        most_played_champion=most_played(aggregate.champion_counts),
        rank=aggregate.rank,
    )
