"""Application use cases."""
from .roster_stats import RosterStatsUseCase

__all__ = [
    'RosterStatsUseCase',
]
