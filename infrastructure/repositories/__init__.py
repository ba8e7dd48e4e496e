"""Repository implementations."""
from .riot_match_source import RiotMatchSource
from .sqlite_aggregate_store import SqliteAggregateStore

__all__ = [
    'RiotMatchSource',
    'SqliteAggregateStore',
]
