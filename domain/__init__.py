"""Domain layer - entities, enums, errors and interfaces."""
from .entities import (
    MatchParticipant, MatchRecord, RankedStanding, UNRANKED,
    PlayerAggregate, StatsSummary,
)
from .enums import Region, QueueType, Rank
from .errors import TrackerError, RemoteUnavailable, MalformedRecord, PersistenceFailure
from .interfaces import IMatchSource, IAggregateStore

__all__ = [
    # Entities
    'MatchParticipant',
    'MatchRecord',
    'RankedStanding',
    'UNRANKED',
    'PlayerAggregate',
    'StatsSummary',
    # Enums
    'Region',
    'QueueType',
    'Rank',
    # Errors
    'TrackerError',
    'RemoteUnavailable',
    'MalformedRecord',
    'PersistenceFailure',
    # Interfaces
    'IMatchSource',
    'IAggregateStore',
]
