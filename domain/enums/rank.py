"""Rank tier enumeration."""
from enum import Enum
from typing import Optional


class Rank(Enum):
    """League of Legends rank tiers, lowest first."""

    IRON = "IRON"
    BRONZE = "BRONZE"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"
    EMERALD = "EMERALD"
    DIAMOND = "DIAMOND"
    MASTER = "MASTER"
    GRANDMASTER = "GRANDMASTER"
    CHALLENGER = "CHALLENGER"

    @classmethod
    def from_string(cls, rank_str: str) -> Optional['Rank']:
        return cls.__members__.get(rank_str.strip().upper())
