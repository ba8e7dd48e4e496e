"""Application layer - services and use cases."""
from .services import AggregationCache, MatchFilter, ReconcileReport, present
from .use_cases import RosterStatsUseCase

__all__ = [
    'AggregationCache',
    'MatchFilter',
    'ReconcileReport',
    'present',
    'RosterStatsUseCase',
]
