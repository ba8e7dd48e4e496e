"""Domain entities."""
from .match_record import MatchParticipant, MatchRecord
from .ranked_standing import RankedStanding, UNRANKED
from .player_aggregate import PlayerAggregate
from .stats_summary import StatsSummary

__all__ = [
    'MatchParticipant',
    'MatchRecord',
    'RankedStanding',
    'UNRANKED',
    'PlayerAggregate',
    'StatsSummary',
]
