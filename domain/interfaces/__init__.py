"""Domain interfaces."""
from .match_source import IMatchSource
from .aggregate_store import IAggregateStore

__all__ = [
    'IMatchSource',
    'IAggregateStore',
]
