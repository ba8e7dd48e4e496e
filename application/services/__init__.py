"""Application services root exports."""
from .match_filter import MatchFilter
from .stats_presenter import present, format_winrate, most_played
from .aggregation_cache import AggregationCache, ReconcileReport

__all__ = [
    "MatchFilter",
    "present",
    "format_winrate",
    "most_played",
    "AggregationCache",
    "ReconcileReport",
]
